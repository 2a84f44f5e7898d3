"""Example: Full silver reload and quality checks

This example demonstrates how to rebuild the silver layer from the landing
extracts and check the result:
1. Read the six CSV extracts from data/a_raw (Bronze)
2. Cleanse and conform them into the silver tables (Silver)
3. Run the silver quality checks on the conformed tables

Prerequisites:
- Landing extracts in data/a_raw/source_crm and data/a_raw/source_erp
- Optional: WAREHOUSE_DATABASE_URL pointing at another SQLAlchemy database
"""

import logging
import os
from datetime import datetime
from pathlib import Path

from warehouse_core import DataPaths, LoadError
from warehouse_core.metadata import read_metadata
from warehouse_core.qa import run_silver_qa
from warehouse_core.silver import ConformedStore, run_full_load

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

data_root = Path("data")
paths = DataPaths.from_root(data_root, os.environ.get("WAREHOUSE_DATABASE_URL"))

# A fixed processing time makes reruns reproduce the same tables
processing_time = datetime(2025, 1, 31, 23, 59, 59)  # MODIFY AS NEEDED

print(f"Reloading silver layer from {paths.raw_dir}...")
try:
    run = run_full_load(paths, processing_time=processing_time)
except LoadError as e:
    print(f"\nLoad failed: {e}")
    meta = read_metadata(paths.meta_dir)
    if meta is not None:
        print(f"Tables completed before the failure: {meta.tables}")
    raise SystemExit(1)

print("\nRows written:")
for result in run.tables:
    print(f"  - {result.table}: {result.rows_read} read, {result.rows_written} written")

# Run QA checks on the conformed tables
print("\nRunning QA checks...")
store = ConformedStore.from_url(paths.database_url)
try:
    qa_result = run_silver_qa(store.read_all())
finally:
    store.dispose()

print("\nQA Summary:")
print(f"  - Customers: {qa_result.summary['customer_rows']}")
print(f"  - Product versions: {qa_result.summary['product_rows']}")
print(f"  - Sales lines: {qa_result.summary['sales_rows']}")
print(f"  - Broken product history: {qa_result.summary['broken_product_history_count']}")
print(f"  - Inconsistent sales: {qa_result.summary['inconsistent_sales_count']}")
print(f"  - Orphan sales: {qa_result.summary['orphan_sales_count']}")

if qa_result.orphan_sales is not None:
    print("\nSales lines without a customer or current product:")
    print(qa_result.orphan_sales.head())

print("\nData Layers:")
print(f"  - Bronze (landing): {paths.raw_dir}")
print(f"  - Silver (conformed): {paths.database_url}")
