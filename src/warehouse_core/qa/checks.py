"""Silver data quality detectors.

Each detector takes conformed frames and returns the offending rows, or None
when the check passes. Detectors never raise for bad data and never read or
write files.

The checks mirror the warehouse's quality scripts:
- primary-key integrity of customers and product versions
- product validity history forming a gap-free, non-overlapping chain
- sales dates in business order (order before ship and due)
- sales amount consistent with quantity x price
- unwanted surrounding spaces in customer names
- sales rows that would not join to a customer or a current product
"""

from __future__ import annotations

import numpy as np
import pandas as pd

REQUIRED_COLUMNS: dict[str, list[str]] = {
    "crm_cust_info": ["cst_id", "cst_key", "cst_firstname", "cst_lastname"],
    "crm_prd_info": ["prd_key", "prd_start_dt", "prd_end_dt"],
    "crm_sales_details": [
        "sls_ord_num",
        "sls_prd_key",
        "sls_cust_id",
        "sls_order_dt",
        "sls_ship_dt",
        "sls_due_dt",
        "sls_sales",
        "sls_quantity",
        "sls_price",
    ],
}

DATE_COLUMNS: dict[str, list[str]] = {
    "crm_prd_info": ["prd_start_dt", "prd_end_dt"],
    "crm_sales_details": ["sls_order_dt", "sls_ship_dt", "sls_due_dt"],
}

ONE_DAY = pd.Timedelta(days=1)


def prepare_tables(tables: dict[str, pd.DataFrame]) -> dict[str, pd.DataFrame]:
    """Copy the frames and convert date columns to datetime64.

    Dates read back from the conformed store arrive as ``datetime.date``
    objects; detectors compare them as timestamps.
    """
    prepared = {}
    for name, df in tables.items():
        df = df.copy()
        for col in DATE_COLUMNS.get(name, []):
            if col in df.columns:
                df[col] = pd.to_datetime(df[col])
        prepared[name] = df
    return prepared


def _or_none(df: pd.DataFrame, mask: pd.Series) -> pd.DataFrame | None:
    if not mask.any():
        return None
    return df[mask].copy()


def detect_duplicate_customers(customers: pd.DataFrame) -> pd.DataFrame | None:
    """Customer rows whose ``cst_id`` is null or not unique.

    Examples:
        >>> df = pd.DataFrame({'cst_id': [1, 1, 2, None]})
        >>> len(detect_duplicate_customers(df))
        3

    """
    if customers.empty:
        return None
    mask = customers["cst_id"].isna() | customers.duplicated(subset=["cst_id"], keep=False)
    return _or_none(customers, mask)


def detect_duplicate_products(products: pd.DataFrame) -> pd.DataFrame | None:
    """Product rows sharing both ``prd_key`` and ``prd_start_dt``."""
    if products.empty:
        return None
    mask = products.duplicated(subset=["prd_key", "prd_start_dt"], keep=False)
    return _or_none(products, mask)


def detect_broken_product_history(products: pd.DataFrame) -> pd.DataFrame | None:
    """Product versions that do not chain correctly.

    Within a product key ordered by start date, every version except the last
    must end exactly one day before the next one starts, and the last version
    must be open (null end date). A version ending before it starts is also
    flagged.

    Returns:
        Offending rows with an added ``next_start_dt`` column, or None.
    """
    if products.empty:
        return None

    ordered = products.sort_values(["prd_key", "prd_start_dt"], kind="mergesort").copy()
    ordered["next_start_dt"] = ordered.groupby("prd_key", dropna=False)["prd_start_dt"].shift(-1)

    end = ordered["prd_end_dt"]
    nxt = ordered["next_start_dt"]
    gap_or_overlap = nxt.notna() & (end.isna() | (end + ONE_DAY != nxt))
    closed_last = nxt.isna() & end.notna()
    ends_before_start = end.notna() & (end < ordered["prd_start_dt"])

    return _or_none(ordered, gap_or_overlap | closed_last | ends_before_start)


def detect_invalid_sales_dates(sales: pd.DataFrame) -> pd.DataFrame | None:
    """Sales lines ordered after they were shipped or due."""
    if sales.empty:
        return None
    mask = (sales["sls_order_dt"] > sales["sls_ship_dt"]) | (
        sales["sls_order_dt"] > sales["sls_due_dt"]
    )
    return _or_none(sales, mask)


def detect_inconsistent_sales(sales: pd.DataFrame) -> pd.DataFrame | None:
    """Sales lines where amount, quantity or price is unusable or inconsistent.

    Flags null or non-positive values, and rows where
    ``sls_sales != sls_quantity * sls_price``.
    """
    if sales.empty:
        return None

    amount = pd.to_numeric(sales["sls_sales"], errors="coerce")
    qty = pd.to_numeric(sales["sls_quantity"], errors="coerce")
    price = pd.to_numeric(sales["sls_price"], errors="coerce")

    unusable = pd.Series(False, index=sales.index)
    for values in (amount, qty, price):
        unusable |= values.isna() | (values <= 0)

    expected = (qty * price).to_numpy(dtype="float64", na_value=np.nan)
    mismatch = ~np.isclose(amount.to_numpy(dtype="float64", na_value=np.nan), expected)
    return _or_none(sales, unusable | pd.Series(mismatch, index=sales.index))


def detect_unwanted_spaces(customers: pd.DataFrame) -> pd.DataFrame | None:
    """Customers whose first or last name has leading/trailing whitespace."""
    if customers.empty:
        return None
    mask = pd.Series(False, index=customers.index)
    for col in ("cst_firstname", "cst_lastname"):
        values = customers[col]
        as_text = values.astype("string")
        mask |= values.notna() & (as_text != as_text.str.strip()).fillna(False).astype(bool)
    return _or_none(customers, mask)


def detect_orphan_sales(
    sales: pd.DataFrame,
    customers: pd.DataFrame,
    products: pd.DataFrame,
) -> pd.DataFrame | None:
    """Sales lines without a matching customer or current product.

    Only open product versions (null ``prd_end_dt``) count, since those are
    the ones the star schema exposes.

    Returns:
        Offending rows with boolean ``missing_customer`` and ``missing_product``
        columns, or None.
    """
    if sales.empty:
        return None

    current_keys = set(products.loc[products["prd_end_dt"].isna(), "prd_key"].dropna())
    customer_ids = set(customers["cst_id"].dropna())

    flagged = sales.copy()
    flagged["missing_customer"] = ~sales["sls_cust_id"].isin(customer_ids)
    flagged["missing_product"] = ~sales["sls_prd_key"].isin(current_keys)
    mask = flagged["missing_customer"] | flagged["missing_product"]
    return _or_none(flagged, mask)
