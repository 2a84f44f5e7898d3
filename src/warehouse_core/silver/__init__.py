"""Silver (conformed) layer: cleansing rules, resolvers, store and full reload.

Data Layers
===========

**Landing (Bronze)** - ``warehouse_core.landing``
    CSV extracts deposited by the bulk loader, read verbatim.
    Data directory: ``data/a_raw/``

**Conformed (Silver)** - ``warehouse_core.silver``
    Cleansed, deduplicated, business-rule-applied tables:
    - ``crm_cust_info``: one row per customer id (latest version)
    - ``crm_prd_info``: product versions with reconstructed validity end dates
    - ``crm_sales_details``: sales lines with validated dates and repaired amounts
    - ``erp_cust_az12``: customer demographics
    - ``erp_loc_a101``: customer locations
    - ``erp_px_cat_g1v2``: product categories
    Data directory: ``data/b_clean/`` (SQLite by default)

**Star schema (Gold)**
    Read-only views over the silver tables, maintained outside this package.

High-Level API
--------------
``run_full_load(paths)`` truncates and repopulates every silver table.
"""

from warehouse_core.silver.crm import clean_customers, clean_products, clean_sales_details
from warehouse_core.silver.dedup import latest_per_key
from warehouse_core.silver.erp import (
    clean_customer_demographics,
    clean_customer_locations,
    clean_product_categories,
)
from warehouse_core.silver.load import LoadRun, TableLoadResult, run_full_load
from warehouse_core.silver.store import ConformedStore
from warehouse_core.silver.temporal import derive_end_dates

__all__ = [
    # Orchestration
    "run_full_load",
    "LoadRun",
    "TableLoadResult",
    "ConformedStore",
    # Cleansing rules - CRM
    "clean_customers",
    "clean_products",
    "clean_sales_details",
    # Cleansing rules - ERP
    "clean_customer_demographics",
    "clean_customer_locations",
    "clean_product_categories",
    # Resolvers
    "latest_per_key",
    "derive_end_dates",
]
