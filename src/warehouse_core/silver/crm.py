r"""Silver layer: CRM cleansing rules.

This module is part of the Silver layer in the warehouse pipeline. It turns
the three CRM landing extracts into conformed tables.

Data directory mapping:
    Input: data/a_raw/source_crm/ → Landing (Bronze) layer
    Output: crm_cust_info, crm_prd_info, crm_sales_details → Conformed (Silver) store

The cleansing rules:
1. Customers: drop rows without an id, keep the latest version of each id,
   trim names, expand marital status and gender codes
2. Products: split the raw product key into category id and product key,
   default missing cost, expand product line codes, rebuild validity end dates
3. Sales lines: validate YYYYMMDD dates, repair sales amount and price from
   each other and the quantity

Each rule is a pure function: landing frame in, new conformed frame out.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import pandas as pd

from warehouse_core.silver.cleaning_utils import (
    CRM_GENDER_CODES,
    MARITAL_STATUS_CODES,
    PRODUCT_LINE_CODES,
    is_missing,
    map_code,
    parse_yyyymmdd,
    strip_text,
)
from warehouse_core.silver.dedup import latest_per_key
from warehouse_core.silver.temporal import derive_end_dates

logger = logging.getLogger(__name__)

CUSTOMER_COLUMNS = [
    "cst_id",
    "cst_key",
    "cst_firstname",
    "cst_lastname",
    "cst_marital_status",
    "cst_gndr",
    "cst_create_date",
]

PRODUCT_COLUMNS = [
    "prd_id",
    "cat_id",
    "prd_key",
    "prd_nm",
    "prd_cost",
    "prd_line",
    "prd_start_dt",
    "prd_end_dt",
]

SALES_COLUMNS = [
    "sls_ord_num",
    "sls_prd_key",
    "sls_cust_id",
    "sls_order_dt",
    "sls_ship_dt",
    "sls_due_dt",
    "sls_sales",
    "sls_quantity",
    "sls_price",
]

SALES_DATE_COLUMNS = ("sls_order_dt", "sls_ship_dt", "sls_due_dt")

# Raw product keys look like "CO-RF-FR-R92B-58": a 5-character category
# prefix, a separator, then the product key proper.
CATEGORY_PREFIX_LEN = 5
PRODUCT_KEY_OFFSET = 6


# ---------- customers ----------


def clean_customers(raw: pd.DataFrame) -> pd.DataFrame:
    """Conform CRM customers (``crm_cust_info``).

    Args:
        raw: Landing rows from ``source_crm/cust_info.csv``.

    Returns:
        One row per non-null ``cst_id`` (the most recently created version),
        with trimmed names and expanded marital status / gender.
    """
    df = latest_per_key(raw, "cst_id", "cst_create_date")

    out = pd.DataFrame({
        "cst_id": df["cst_id"],
        "cst_key": df["cst_key"],
        "cst_firstname": df["cst_firstname"].map(strip_text),
        "cst_lastname": df["cst_lastname"].map(strip_text),
        "cst_marital_status": df["cst_marital_status"].map(
            lambda v: map_code(v, MARITAL_STATUS_CODES)
        ),
        "cst_gndr": df["cst_gndr"].map(lambda v: map_code(v, CRM_GENDER_CODES)),
        "cst_create_date": pd.to_datetime(df["cst_create_date"]).dt.normalize(),
    })
    logger.debug("Customers: %d landing rows -> %d conformed rows", len(raw), len(out))
    return out[CUSTOMER_COLUMNS]


# ---------- products ----------


def category_id(raw_key: Any) -> Optional[str]:
    """First five characters of the raw product key, with ``-`` replaced by ``_``.

    Examples:
        >>> category_id("CO-RF-FR-R92B-58")
        'CO_RF'
    """
    if is_missing(raw_key):
        return None
    return str(raw_key)[:CATEGORY_PREFIX_LEN].replace("-", "_")


def product_key(raw_key: Any) -> Optional[str]:
    """Raw product key from the seventh character onward.

    Examples:
        >>> product_key("CO-RF-FR-R92B-58")
        'FR-R92B-58'
    """
    if is_missing(raw_key):
        return None
    return str(raw_key)[PRODUCT_KEY_OFFSET:]


def clean_products(raw: pd.DataFrame) -> pd.DataFrame:
    """Conform CRM products (``crm_prd_info``).

    The landing ``prd_end_dt`` is ignored; end dates are rebuilt from the
    start date of the next version of the same product key.

    Args:
        raw: Landing rows from ``source_crm/prd_info.csv``.

    Returns:
        One row per landing row, with derived ``cat_id`` and ``prd_end_dt``.
    """
    df = pd.DataFrame({
        "prd_id": raw["prd_id"],
        "cat_id": raw["prd_key"].map(category_id),
        "prd_key": raw["prd_key"].map(product_key),
        "prd_nm": raw["prd_nm"],
        "prd_cost": raw["prd_cost"].fillna(0).astype("Int64"),
        "prd_line": raw["prd_line"].map(lambda v: map_code(v, PRODUCT_LINE_CODES)),
        "prd_start_dt": pd.to_datetime(raw["prd_start_dt"]).dt.normalize(),
    })

    out = derive_end_dates(df, key="prd_key", start="prd_start_dt", end="prd_end_dt")
    logger.debug(
        "Products: %d rows, %d open versions", len(out), int(out["prd_end_dt"].isna().sum())
    )
    return out[PRODUCT_COLUMNS]


# ---------- sales ----------


def clean_sales_date(values: pd.Series) -> pd.Series:
    """Convert a column of YYYYMMDD integers to dates, nulling invalid ones."""
    return pd.to_datetime(values.map(parse_yyyymmdd))


def repair_sales_amounts(
    sales: pd.Series,
    quantity: pd.Series,
    price: pd.Series,
) -> tuple[pd.Series, pd.Series]:
    """Cross-derive sales amount and price.

    - Sales amount missing or <= 0: recomputed as ``quantity * |price|``.
    - Price missing or <= 0: recomputed as ``sales / quantity`` using the
      repaired sales amount; null when quantity is 0 or missing.

    Args:
        sales: Raw sales amounts.
        quantity: Raw quantities.
        price: Raw unit prices.

    Returns:
        Tuple of (sales, price) as float Series aligned to the inputs.
    """
    sales = sales.astype("float64")
    quantity = quantity.astype("float64")
    price = price.astype("float64")

    bad_sales = sales.isna() | (sales <= 0)
    out_sales = sales.where(~bad_sales, quantity * price.abs())

    bad_price = price.isna() | (price <= 0)
    divisor = quantity.where(quantity != 0)
    out_price = price.where(~bad_price, out_sales / divisor)

    return out_sales, out_price


def clean_sales_details(raw: pd.DataFrame) -> pd.DataFrame:
    """Conform CRM sales lines (``crm_sales_details``).

    Args:
        raw: Landing rows from ``source_crm/sales_details.csv``.

    Returns:
        One row per landing row with validated dates and repaired amounts.

    Raises:
        MalformedDataError: If an 8-digit date is not a calendar date.
    """
    out = raw[["sls_ord_num", "sls_prd_key", "sls_cust_id"]].copy()
    for col in SALES_DATE_COLUMNS:
        out[col] = clean_sales_date(raw[col])

    sales, price = repair_sales_amounts(
        raw["sls_sales"], raw["sls_quantity"], raw["sls_price"]
    )
    out["sls_sales"] = sales
    out["sls_quantity"] = raw["sls_quantity"]
    out["sls_price"] = price

    nulled = {col: int(out[col].isna().sum() - raw[col].isna().sum()) for col in SALES_DATE_COLUMNS}
    logger.debug("Sales: %d rows, invalid dates nulled: %s", len(out), nulled)
    return out[SALES_COLUMNS].reset_index(drop=True)
