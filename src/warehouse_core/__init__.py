"""Warehouse Core - silver-layer transformation engine for a bronze/silver/gold warehouse.

Raw CRM and ERP extracts land verbatim as CSV files (bronze). This package
cleanses, deduplicates and conforms them into six silver tables that the
star-schema views (gold) read from.

Module Structure:
    warehouse_core.landing: Landing extract reader
    warehouse_core.silver: Cleansing rules, resolvers, conformed store, full reload
    warehouse_core.qa: Silver data quality checks
    warehouse_core.config: DataPaths configuration

Quick Start:
    >>> from warehouse_core import DataPaths
    >>> from warehouse_core.silver import ConformedStore, run_full_load
    >>> from warehouse_core.qa import run_silver_qa
    >>>
    >>> paths = DataPaths.from_root("data")
    >>> run = run_full_load(paths)
    >>> print(run.rows_written())
    >>>
    >>> store = ConformedStore.from_url(paths.database_url)
    >>> result = run_silver_qa(store.read_all())
    >>> print(result.summary)

Grain Reference:
    crm_cust_info: customer id
    crm_prd_info: product key x validity start date
    crm_sales_details: sales line (order number x product key x customer id)
    erp_cust_az12 / erp_loc_a101: ERP customer id
    erp_px_cat_g1v2: category id
"""

__version__ = "0.1.0"

from warehouse_core.config import DataPaths
from warehouse_core.exceptions import (
    ConfigError,
    DataQualityError,
    LoadError,
    MalformedDataError,
    MissingInputError,
    WarehouseError,
)

__all__ = [
    "ConfigError",
    "DataPaths",
    "DataQualityError",
    "LoadError",
    "MalformedDataError",
    "MissingInputError",
    "WarehouseError",
    "__version__",
]
