"""Public API for silver QA checks.

This module provides a clean, in-memory API for running quality checks on the
conformed tables without reading or writing files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from warehouse_core.exceptions import DataQualityError
from warehouse_core.qa.checks import (
    REQUIRED_COLUMNS,
    detect_broken_product_history,
    detect_duplicate_customers,
    detect_duplicate_products,
    detect_inconsistent_sales,
    detect_invalid_sales_dates,
    detect_orphan_sales,
    detect_unwanted_spaces,
    prepare_tables,
)

logger = logging.getLogger(__name__)


@dataclass
class SilverQAResult:
    """Result of the silver QA checks.

    Attributes:
        summary: Dictionary with row counts and per-check issue counts.
        duplicate_customers: Customers with null or repeated ids, or None.
        duplicate_products: Product versions repeating (key, start date), or None.
        broken_product_history: Product versions that do not chain, or None.
        invalid_sales_dates: Sales lines ordered after ship/due date, or None.
        inconsistent_sales: Sales lines with unusable or inconsistent amounts, or None.
        unwanted_spaces: Customers with untrimmed names, or None.
        orphan_sales: Sales lines without customer or current product, or None.
    """

    summary: dict
    duplicate_customers: pd.DataFrame | None
    duplicate_products: pd.DataFrame | None
    broken_product_history: pd.DataFrame | None
    invalid_sales_dates: pd.DataFrame | None
    inconsistent_sales: pd.DataFrame | None
    unwanted_spaces: pd.DataFrame | None
    orphan_sales: pd.DataFrame | None

    @property
    def passed(self) -> bool:
        """True when no check reported any row."""
        return self.summary["total_issues"] == 0


def _validate(tables: dict[str, pd.DataFrame]) -> None:
    missing_tables = [name for name in REQUIRED_COLUMNS if name not in tables]
    if missing_tables:
        raise DataQualityError(f"Missing required tables: {missing_tables}")

    for name, required in REQUIRED_COLUMNS.items():
        missing_cols = [col for col in required if col not in tables[name].columns]
        if missing_cols:
            raise DataQualityError(
                f"Missing required columns in {name}: {missing_cols}. Required: {required}"
            )


def _count(df: pd.DataFrame | None) -> int:
    return len(df) if df is not None else 0


def run_silver_qa(tables: dict[str, pd.DataFrame]) -> SilverQAResult:
    """Run all silver quality checks in memory.

    This function:
    - does NOT read or write any files,
    - does NOT raise for bad data (issues are reported in the result),
    - MAY log progress via the logging module.

    Args:
        tables: Conformed tables keyed by table name, e.g. the output of
            ``ConformedStore.read_all()``. ``crm_cust_info``, ``crm_prd_info``
            and ``crm_sales_details`` are required.

    Returns:
        SilverQAResult with a summary and the offending rows of each check.

    Raises:
        DataQualityError: If a required table or column is missing.
    """
    _validate(tables)
    prepared = prepare_tables(tables)
    customers = prepared["crm_cust_info"]
    products = prepared["crm_prd_info"]
    sales = prepared["crm_sales_details"]

    logger.info(
        "Running silver QA on %d customers, %d product versions, %d sales lines",
        len(customers),
        len(products),
        len(sales),
    )

    checks = {
        "duplicate_customers": detect_duplicate_customers(customers),
        "duplicate_products": detect_duplicate_products(products),
        "broken_product_history": detect_broken_product_history(products),
        "invalid_sales_dates": detect_invalid_sales_dates(sales),
        "inconsistent_sales": detect_inconsistent_sales(sales),
        "unwanted_spaces": detect_unwanted_spaces(customers),
        "orphan_sales": detect_orphan_sales(sales, customers, products),
    }

    counts = {f"{name}_count": _count(df) for name, df in checks.items()}
    summary = {
        "customer_rows": len(customers),
        "product_rows": len(products),
        "sales_rows": len(sales),
        **counts,
        "total_issues": sum(counts.values()),
    }

    logger.info(
        "QA complete: %d duplicate customers, %d broken product versions, "
        "%d invalid sales dates, %d inconsistent sales, %d orphan sales",
        counts["duplicate_customers_count"],
        counts["broken_product_history_count"],
        counts["invalid_sales_dates_count"],
        counts["inconsistent_sales_count"],
        counts["orphan_sales_count"],
    )

    return SilverQAResult(summary=summary, **checks)
