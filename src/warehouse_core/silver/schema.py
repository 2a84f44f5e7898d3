"""Conformed (Silver) table definitions.

One SQLAlchemy ``Table`` per conformed entity. Every table carries a
``dwh_create_date`` load timestamp; the server-side default applies to
writers that do not set it, the silver load stamps it with the run's
processing time.
"""

from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, Float, Integer, MetaData, String, Table, func

SILVER_METADATA = MetaData()


def _load_timestamp() -> Column:
    return Column("dwh_create_date", DateTime, nullable=False, server_default=func.now())


crm_cust_info = Table(
    "crm_cust_info",
    SILVER_METADATA,
    Column("cst_id", Integer),
    Column("cst_key", String(50)),
    Column("cst_firstname", String(50)),
    Column("cst_lastname", String(50)),
    Column("cst_marital_status", String(50)),
    Column("cst_gndr", String(50)),
    Column("cst_create_date", Date),
    _load_timestamp(),
)

crm_prd_info = Table(
    "crm_prd_info",
    SILVER_METADATA,
    Column("prd_id", Integer),
    Column("cat_id", String(50)),
    Column("prd_key", String(50)),
    Column("prd_nm", String(50)),
    Column("prd_cost", Integer),
    Column("prd_line", String(50)),
    Column("prd_start_dt", Date),
    Column("prd_end_dt", Date),
    _load_timestamp(),
)

crm_sales_details = Table(
    "crm_sales_details",
    SILVER_METADATA,
    Column("sls_ord_num", String(50)),
    Column("sls_prd_key", String(50)),
    Column("sls_cust_id", Integer),
    Column("sls_order_dt", Date),
    Column("sls_ship_dt", Date),
    Column("sls_due_dt", Date),
    Column("sls_sales", Float),
    Column("sls_quantity", Integer),
    Column("sls_price", Float),
    _load_timestamp(),
)

erp_cust_az12 = Table(
    "erp_cust_az12",
    SILVER_METADATA,
    Column("cid", String(50)),
    Column("bdate", Date),
    Column("gen", String(50)),
    _load_timestamp(),
)

erp_loc_a101 = Table(
    "erp_loc_a101",
    SILVER_METADATA,
    Column("cid", String(50)),
    Column("cntry", String(50)),
    _load_timestamp(),
)

erp_px_cat_g1v2 = Table(
    "erp_px_cat_g1v2",
    SILVER_METADATA,
    Column("id", String(50)),
    Column("cat", String(50)),
    Column("subcat", String(50)),
    Column("maintenance", String(50)),
    _load_timestamp(),
)

# Load order of the full reload
SILVER_TABLES: tuple[Table, ...] = (
    crm_cust_info,
    crm_prd_info,
    crm_sales_details,
    erp_cust_az12,
    erp_loc_a101,
    erp_px_cat_g1v2,
)

LOAD_TIMESTAMP_COLUMN = "dwh_create_date"


def get_table(name: str) -> Table:
    """Look up a conformed table by name.

    Raises:
        KeyError: If ``name`` is not a conformed table.
    """
    return SILVER_METADATA.tables[name]
