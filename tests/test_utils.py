"""Shared test utilities.

This module writes a small, deliberately dirty landing layer to disk and
provides helpers for comparing date columns regardless of how they were
materialized (datetime64, ``datetime.date`` or None).
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from textwrap import dedent

import pandas as pd

from warehouse_core.config import DataPaths

PROCESSING_TIME = datetime(2025, 1, 1, 12, 0, 0)

LANDING_FILES: dict[str, tuple[str, str]] = {
    "crm_cust_info": (
        "source_crm/cust_info.csv",
        """\
        cst_id,cst_key,cst_firstname,cst_lastname,cst_marital_status,cst_gndr,cst_create_date
        11000,AW00011000, Jon,Yang ,M,M,2025-10-06
        11001,AW00011001,Eugene,Huang,S,M,2025-10-06
        11000,AW00011000,Jonathan,Yang,S,F,2025-10-01
        ,AW00011002,Ruben,Torres,M,M,2025-10-06
        11003,AW00011003,Christy,Zhu,s, f ,
        """,
    ),
    "crm_prd_info": (
        "source_crm/prd_info.csv",
        """\
        prd_id,prd_key,prd_nm,prd_cost,prd_line,prd_start_dt,prd_end_dt
        210,CO-RF-FR-R92B-58,HL Road Frame - Black- 58,,R ,2003-07-01,
        211,CO-RF-FR-R92R-58,HL Road Frame - Red- 58,1432,R,2003-07-01,
        212,AC-HE-HL-U509-R,Sport-100 Helmet- Red,12,S,2011-07-01,2007-12-28
        213,AC-HE-HL-U509-R,Sport-100 Helmet- Red,14,S,2012-07-01,2008-12-27
        214,AC-HE-HL-U509-R,Sport-100 Helmet- Red,13,S,2013-07-01,
        """,
    ),
    "crm_sales_details": (
        "source_crm/sales_details.csv",
        """\
        sls_ord_num,sls_prd_key,sls_cust_id,sls_order_dt,sls_ship_dt,sls_due_dt,sls_sales,sls_quantity,sls_price
        SO43697,FR-R92R-58,11000,20101229,20110105,20110110,3578,1,3578
        SO43698,HL-U509-R,11001,0,20110105,20110110,,2,-13
        SO43699,HL-U509-R,11003,201012,20110105,20110110,26,2,
        SO43700,FR-R92B-58,11001,20101229,20110105,20110110,-5,0,
        """,
    ),
    "erp_cust_az12": (
        "source_erp/cust_az12.csv",
        """\
        CID,BDATE,GEN
        NASAW00011000,1971-10-06,Male
        AW00011001,2050-01-01, F 
        NASAW00011003,1976-08-10,
        """,
    ),
    "erp_loc_a101": (
        "source_erp/loc_a101.csv",
        """\
        CID,CNTRY
        AW-00011000,Australia
        AW-00011001,DE
        AW-00011003,USA
        AW-00011004, 
        AW-00011005,
        """,
    ),
    "erp_px_cat_g1v2": (
        "source_erp/px_cat_g1v2.csv",
        """\
        ID,CAT,SUBCAT,MAINTENANCE
        AC_HE,Accessories,Helmets,Yes
        CO_RF,Components,Road Frames,No
        """,
    ),
}


def write_landing(
    data_root: Path,
    overrides: dict[str, str] | None = None,
    skip: tuple[str, ...] = (),
) -> DataPaths:
    """Write the sample landing extracts under ``data_root``.

    Args:
        data_root: Root directory for the test warehouse.
        overrides: Replacement CSV text for some landing tables.
        skip: Landing tables to leave out entirely.

    Returns:
        DataPaths for ``data_root`` with the default SQLite conformed store.
    """
    overrides = overrides or {}
    for name, (relpath, content) in LANDING_FILES.items():
        if name in skip:
            continue
        path = data_root / "a_raw" / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(overrides.get(name, content)), encoding="utf-8")
    return DataPaths.from_root(data_root)


def as_dates(values) -> list[date | None]:
    """Normalize a date-like column to a list of ``date`` or None."""
    return [None if pd.isna(v) else pd.Timestamp(v).date() for v in values]
