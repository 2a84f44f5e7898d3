"""Full reload of the silver layer.

This module sequences one full load: create the conformed schema if needed,
truncate every conformed table, then for each entity read its landing extract,
apply its cleansing rule and bulk-insert the result. Tables are processed one
at a time, in a fixed order.

Run state (processing time, timings, per-table results) lives in a ``LoadRun``
value that is threaded through the run and returned to the caller.

Failure semantics:
    - The first error aborts the run.
    - Tables that already completed keep their new contents; there is no
      multi-table rollback.
    - ``MissingInputError`` and ``MalformedDataError`` propagate as raised;
      any other exception is logged with its traceback and re-raised as a
      ``LoadError`` carrying the exception class name as its code.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

import pandas as pd

from warehouse_core.config import DataPaths
from warehouse_core.exceptions import LoadError
from warehouse_core.landing import read_landing_table
from warehouse_core.metadata import LoadMetadata, write_metadata
from warehouse_core.silver.crm import clean_customers, clean_products, clean_sales_details
from warehouse_core.silver.erp import (
    clean_customer_demographics,
    clean_customer_locations,
    clean_product_categories,
)
from warehouse_core.silver.store import ConformedStore
from warehouse_core.utils import format_duration

logger = logging.getLogger(__name__)

BANNER = "=" * 48
STAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class TableLoadResult:
    """Outcome of loading one conformed table.

    Attributes:
        table: Conformed table name.
        rows_read: Landing rows read.
        rows_written: Conformed rows inserted.
        seconds: Time spent reading, transforming and inserting.
    """

    table: str
    rows_read: int
    rows_written: int
    seconds: float


@dataclass
class LoadRun:
    """State of one full silver load.

    Attributes:
        processing_time: Reference time for the run. Used as the load timestamp
            of every inserted row and as "now" by time-dependent rules.
        started_at: When the run started.
        finished_at: When the run ended, or None while running.
        status: "running", "ok" or "failed".
        tables: Results of the tables loaded so far, in load order.
        error: The error that aborted the run, if any.
    """

    processing_time: datetime
    started_at: datetime
    finished_at: datetime | None = None
    status: str = "running"
    tables: list[TableLoadResult] = field(default_factory=list)
    error: LoadError | None = None
    _clock_start: float = field(default_factory=time.perf_counter, repr=False)
    _duration: float | None = field(default=None, repr=False)

    @classmethod
    def start(cls, processing_time: datetime | None = None) -> LoadRun:
        """Begin a run. ``processing_time`` defaults to the current local time."""
        started_at = datetime.now()
        if processing_time is None:
            processing_time = started_at
        elif processing_time.tzinfo is not None:
            # conformed timestamps are naive local time
            processing_time = processing_time.astimezone().replace(tzinfo=None)
        return cls(processing_time=processing_time, started_at=started_at)

    @property
    def duration_seconds(self) -> float:
        """Elapsed seconds (up to now while the run is in progress)."""
        if self._duration is not None:
            return self._duration
        return time.perf_counter() - self._clock_start

    def finish(self, status: str, error: LoadError | None = None) -> None:
        """Freeze the duration and record the final status."""
        self._duration = time.perf_counter() - self._clock_start
        self.finished_at = datetime.now()
        self.status = status
        self.error = error

    def rows_written(self) -> dict[str, int]:
        """Rows written per completed table."""
        return {r.table: r.rows_written for r in self.tables}

    def to_metadata(self) -> LoadMetadata:
        return LoadMetadata(
            processing_time=self.processing_time.isoformat(),
            started_at=self.started_at.isoformat(),
            finished_at=(self.finished_at or datetime.now()).isoformat(),
            duration_seconds=round(self.duration_seconds, 3),
            status=self.status,
            tables=self.rows_written(),
            error_code=self.error.code if self.error else None,
            error_message=self.error.message if self.error else None,
        )


@dataclass(frozen=True)
class SilverLoad:
    """One step of the full reload: a conformed table and how to build it."""

    table: str
    label: str
    transform: Callable[[pd.DataFrame, LoadRun], pd.DataFrame]


SILVER_LOADS: tuple[SilverLoad, ...] = (
    SilverLoad("crm_cust_info", "CRM Customer", lambda raw, run: clean_customers(raw)),
    SilverLoad("crm_prd_info", "CRM Product", lambda raw, run: clean_products(raw)),
    SilverLoad("crm_sales_details", "CRM Sales", lambda raw, run: clean_sales_details(raw)),
    SilverLoad(
        "erp_cust_az12",
        "ERP Customer",
        lambda raw, run: clean_customer_demographics(raw, run.processing_time),
    ),
    SilverLoad("erp_loc_a101", "ERP Location", lambda raw, run: clean_customer_locations(raw)),
    SilverLoad(
        "erp_px_cat_g1v2", "ERP Product Category", lambda raw, run: clean_product_categories(raw)
    ),
)


def _stamp(ts: datetime | None = None) -> str:
    return (ts or datetime.now()).strftime(STAMP_FORMAT)


def _load_table(step: SilverLoad, paths: DataPaths, store: ConformedStore, run: LoadRun) -> None:
    logger.info("[%s] Loading %s (%s)...", _stamp(), step.table, step.label)
    t0 = time.perf_counter()

    raw = read_landing_table(paths, step.table)
    conformed = step.transform(raw, run)
    written = store.insert(step.table, conformed, run.processing_time)

    result = TableLoadResult(
        table=step.table,
        rows_read=len(raw),
        rows_written=written,
        seconds=time.perf_counter() - t0,
    )
    run.tables.append(result)
    logger.info(
        ">> %s: %d landing rows -> %d conformed rows in %s",
        step.table,
        result.rows_read,
        result.rows_written,
        format_duration(result.seconds),
    )


def _record_failure(run: LoadRun, error: LoadError, paths: DataPaths) -> None:
    run.finish("failed", error)
    logger.error(
        "[%s] Silver layer load FAILED. Code: %s, Table: %s, Error: %s",
        _stamp(run.finished_at),
        error.code,
        error.table,
        error.message,
    )
    write_metadata(paths.meta_dir, run.to_metadata())


def run_full_load(
    paths: DataPaths,
    processing_time: datetime | None = None,
    store: ConformedStore | None = None,
) -> LoadRun:
    """Truncate and repopulate all six conformed tables.

    Args:
        paths: DataPaths configuration (landing location and conformed database).
        processing_time: Reference time for the run (default: now). Fixing it
            makes reloads of unchanged inputs produce identical tables.
        store: Optional conformed store; by default one is created from
            ``paths.database_url`` and disposed when the run ends.

    Returns:
        The completed LoadRun.

    Raises:
        MissingInputError: If a landing extract is absent.
        MalformedDataError: If a landing value cannot be converted.
        LoadError: For any other failure during the run.
        ConfigError: If ``paths.database_url`` is unusable.

    Examples:
        >>> from warehouse_core import DataPaths
        >>> from warehouse_core.silver import run_full_load
        >>> run = run_full_load(DataPaths.from_root("data"))
        >>> run.rows_written()["crm_cust_info"]
        18484
    """
    run = LoadRun.start(processing_time)
    owns_store = store is None
    if store is None:
        store = ConformedStore.from_url(paths.database_url)
    paths.ensure_dirs()

    logger.info(BANNER)
    logger.info("[%s] Starting FULL load to silver layer...", _stamp(run.started_at))
    logger.info(BANNER)

    current: str | None = None
    try:
        store.ensure_schema()

        logger.info("[%s] Truncating silver tables...", _stamp())
        store.truncate()

        for step in SILVER_LOADS:
            current = step.table
            _load_table(step, paths, store, run)
        current = None
    except LoadError as e:
        if e.table is None:
            e.table = current
        _record_failure(run, e, paths)
        raise
    except Exception as e:
        error = LoadError(str(e), code=type(e).__name__, table=current)
        logger.exception("Unexpected error while loading %s", current or "silver schema")
        _record_failure(run, error, paths)
        raise error from e
    finally:
        if owns_store:
            store.dispose()

    run.finish("ok")
    logger.info(BANNER)
    logger.info("[%s] FULL load to silver layer complete.", _stamp(run.finished_at))
    logger.info("TOTAL DURATION: %s", format_duration(run.duration_seconds))
    logger.info(BANNER)
    write_metadata(paths.meta_dir, run.to_metadata())
    return run
