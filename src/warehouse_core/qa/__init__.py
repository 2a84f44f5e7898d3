"""QA module for silver data quality checks.

Example:
    >>> from warehouse_core import DataPaths
    >>> from warehouse_core.qa import run_silver_qa
    >>> from warehouse_core.silver import ConformedStore
    >>>
    >>> paths = DataPaths.from_root("data")
    >>> store = ConformedStore.from_url(paths.database_url)
    >>>
    >>> result = run_silver_qa(store.read_all())
    >>> print(result.summary)
    >>> if not result.passed:
    ...     print(result.broken_product_history)

"""

from warehouse_core.qa.api import SilverQAResult, run_silver_qa

__all__ = ["SilverQAResult", "run_silver_qa"]
