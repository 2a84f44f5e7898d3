"""Landing (Bronze) layer reader.

The landing layer is owned by the bulk loader: one CSV extract per source
feed, deposited under ``data_root/a_raw/``. This module only reads it. Headers
are normalized to lower-case, text columns are kept verbatim and typed columns
are converted. Conversion failures are fatal.

Data directory mapping:
    Input: data/a_raw/source_crm/ and data/a_raw/source_erp/ → Landing (Bronze)

Examples:
    >>> from warehouse_core import DataPaths
    >>> from warehouse_core.landing import read_landing_table
    >>> paths = DataPaths.from_root("data")
    >>> raw = read_landing_table(paths, "crm_cust_info")
    >>> raw.columns.tolist()[:2]
    ['cst_id', 'cst_key']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from warehouse_core.exceptions import MalformedDataError, MissingInputError

if TYPE_CHECKING:
    from warehouse_core.config import DataPaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LandingTable:
    """Layout of one landing extract.

    Attributes:
        name: Landing table name (matches the conformed table name).
        source: Source system folder, ``"crm"`` or ``"erp"``.
        filename: CSV file name inside the source folder.
        columns: Expected columns, in file order.
        int_columns: Columns converted to nullable integers.
        float_columns: Columns converted to floats.
        date_columns: Columns parsed as ``YYYY-MM-DD`` dates.
    """

    name: str
    source: str
    filename: str
    columns: tuple[str, ...]
    int_columns: tuple[str, ...] = ()
    float_columns: tuple[str, ...] = ()
    date_columns: tuple[str, ...] = ()

    def path(self, paths: DataPaths) -> Path:
        """Location of this extract under ``paths``."""
        folder = paths.raw_crm if self.source == "crm" else paths.raw_erp
        return folder / self.filename


LANDING_TABLES: dict[str, LandingTable] = {
    t.name: t
    for t in (
        LandingTable(
            name="crm_cust_info",
            source="crm",
            filename="cust_info.csv",
            columns=(
                "cst_id",
                "cst_key",
                "cst_firstname",
                "cst_lastname",
                "cst_marital_status",
                "cst_gndr",
                "cst_create_date",
            ),
            int_columns=("cst_id",),
            date_columns=("cst_create_date",),
        ),
        LandingTable(
            name="crm_prd_info",
            source="crm",
            filename="prd_info.csv",
            columns=(
                "prd_id",
                "prd_key",
                "prd_nm",
                "prd_cost",
                "prd_line",
                "prd_start_dt",
                "prd_end_dt",
            ),
            int_columns=("prd_id", "prd_cost"),
            date_columns=("prd_start_dt", "prd_end_dt"),
        ),
        LandingTable(
            name="crm_sales_details",
            source="crm",
            filename="sales_details.csv",
            columns=(
                "sls_ord_num",
                "sls_prd_key",
                "sls_cust_id",
                "sls_order_dt",
                "sls_ship_dt",
                "sls_due_dt",
                "sls_sales",
                "sls_quantity",
                "sls_price",
            ),
            int_columns=(
                "sls_cust_id",
                "sls_order_dt",
                "sls_ship_dt",
                "sls_due_dt",
                "sls_quantity",
            ),
            float_columns=("sls_sales", "sls_price"),
        ),
        LandingTable(
            name="erp_cust_az12",
            source="erp",
            filename="cust_az12.csv",
            columns=("cid", "bdate", "gen"),
            date_columns=("bdate",),
        ),
        LandingTable(
            name="erp_loc_a101",
            source="erp",
            filename="loc_a101.csv",
            columns=("cid", "cntry"),
        ),
        LandingTable(
            name="erp_px_cat_g1v2",
            source="erp",
            filename="px_cat_g1v2.csv",
            columns=("id", "cat", "subcat", "maintenance"),
        ),
    )
}


def _blank_to_nan(s: pd.Series) -> pd.Series:
    stripped = s.str.strip()
    return stripped.mask(stripped == "", np.nan)


def _coerce(table: LandingTable, df: pd.DataFrame) -> pd.DataFrame:
    for col in table.int_columns:
        try:
            df[col] = pd.to_numeric(_blank_to_nan(df[col]), errors="raise").astype("Int64")
        except (ValueError, TypeError) as e:
            raise MalformedDataError(
                f"Column '{col}' is not integer: {e}", table=table.name
            ) from e
    for col in table.float_columns:
        try:
            df[col] = pd.to_numeric(_blank_to_nan(df[col]), errors="raise").astype("float64")
        except (ValueError, TypeError) as e:
            raise MalformedDataError(
                f"Column '{col}' is not numeric: {e}", table=table.name
            ) from e
    for col in table.date_columns:
        try:
            df[col] = pd.to_datetime(_blank_to_nan(df[col]), format="%Y-%m-%d", errors="raise")
        except (ValueError, TypeError) as e:
            raise MalformedDataError(
                f"Column '{col}' is not a YYYY-MM-DD date: {e}", table=table.name
            ) from e
    return df


def read_landing_table(paths: DataPaths, name: str) -> pd.DataFrame:
    """Read one landing extract into a typed DataFrame.

    Text cells are kept exactly as delivered (including surrounding spaces);
    only empty cells become null. Columns listed as integer, float or date are
    converted.

    Args:
        paths: DataPaths configuration.
        name: Landing table name, one of ``LANDING_TABLES``.

    Returns:
        DataFrame with the expected columns in file order.

    Raises:
        KeyError: If ``name`` is not a known landing table.
        MissingInputError: If the extract file does not exist.
        MalformedDataError: If the file is empty, lacks expected columns or a
            typed value cannot be converted.
    """
    table = LANDING_TABLES[name]
    csv_path = table.path(paths)

    if not csv_path.exists():
        raise MissingInputError(f"Landing file not found: {csv_path}", table=name)

    try:
        df = pd.read_csv(
            csv_path,
            dtype=str,
            keep_default_na=False,
            na_values=[""],
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError as e:
        raise MalformedDataError(f"Landing file is empty: {csv_path}", table=name) from e
    except pd.errors.ParserError as e:
        raise MalformedDataError(f"Could not parse {csv_path}: {e}", table=name) from e

    df.columns = [str(c).strip().lower() for c in df.columns]

    missing = [c for c in table.columns if c not in df.columns]
    if missing:
        raise MalformedDataError(
            f"Missing required columns: {missing}. Available: {list(df.columns)}",
            table=name,
        )

    extra = [c for c in df.columns if c not in table.columns]
    if extra:
        logger.debug("Ignoring unexpected columns in %s: %s", csv_path.name, extra)

    df = df.loc[:, list(table.columns)].copy()
    df = _coerce(table, df)

    logger.debug("Read %d rows from %s", len(df), csv_path)
    return df
