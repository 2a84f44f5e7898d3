"""Conformed (Silver) store backed by SQLAlchemy.

The store owns the six conformed tables. It only supports what a full reload
needs: create the schema, truncate, bulk-insert a cleansed frame and read a
table back.

Examples:
    >>> from warehouse_core.silver.store import ConformedStore
    >>> store = ConformedStore.from_url("sqlite:///data/b_clean/warehouse.db")
    >>> store.ensure_schema()
    >>> store.read("crm_cust_info").head()
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

import numpy as np
import pandas as pd
from sqlalchemy import Date, Integer, Table, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, NoSuchModuleError

from warehouse_core.exceptions import ConfigError
from warehouse_core.silver.cleaning_utils import is_missing, to_date
from warehouse_core.silver.schema import (
    LOAD_TIMESTAMP_COLUMN,
    SILVER_METADATA,
    SILVER_TABLES,
    get_table,
)

logger = logging.getLogger(__name__)


def _to_python(value: Any, column_type: Any) -> Any:
    if is_missing(value):
        return None
    if isinstance(column_type, Date):
        return to_date(value)
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(column_type, Integer) and isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def to_records(table: Table, frame: pd.DataFrame, loaded_at: datetime) -> list[dict]:
    """Convert a cleansed frame into insert parameters for ``table``.

    pandas nulls become None, date columns become ``datetime.date`` and
    numpy scalars become Python scalars. Every record is stamped with
    ``loaded_at`` as its load timestamp.

    Args:
        table: Target conformed table.
        frame: Cleansed rows; must contain every non-timestamp column of ``table``.
        loaded_at: Load timestamp for all rows.

    Returns:
        List of column-name to value dictionaries.

    Raises:
        KeyError: If ``frame`` lacks a column of ``table``.
    """
    columns = [c for c in table.columns if c.name != LOAD_TIMESTAMP_COLUMN]
    names = [c.name for c in columns]

    records = []
    for row in frame[names].itertuples(index=False, name=None):
        record = {col.name: _to_python(val, col.type) for col, val in zip(columns, row)}
        record[LOAD_TIMESTAMP_COLUMN] = loaded_at
        records.append(record)
    return records


class ConformedStore:
    """Read/write access to the conformed tables through one SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> ConformedStore:
        """Create a store for a SQLAlchemy database URL.

        Raises:
            ConfigError: If the URL cannot be parsed or its driver is unknown.
        """
        try:
            engine = create_engine(database_url)
        except (ArgumentError, NoSuchModuleError) as e:
            raise ConfigError(f"Invalid database URL '{database_url}': {e}") from e
        return cls(engine)

    def ensure_schema(self) -> None:
        """Create any conformed table that does not exist yet."""
        SILVER_METADATA.create_all(self.engine)

    def truncate(self, tables: Iterable[Table] = SILVER_TABLES) -> None:
        """Delete every row of ``tables`` in a single transaction."""
        with self.engine.begin() as conn:
            for table in tables:
                conn.execute(table.delete())
                logger.debug("Truncated %s", table.name)

    def insert(self, name: str, frame: pd.DataFrame, loaded_at: datetime) -> int:
        """Bulk-insert a cleansed frame into table ``name``.

        Args:
            name: Conformed table name.
            frame: Cleansed rows.
            loaded_at: Load timestamp written to ``dwh_create_date``.

        Returns:
            Number of rows inserted.
        """
        table = get_table(name)
        records = to_records(table, frame, loaded_at)
        if not records:
            return 0
        with self.engine.begin() as conn:
            conn.execute(table.insert(), records)
        return len(records)

    def read(self, name: str) -> pd.DataFrame:
        """Return all rows of table ``name`` as a DataFrame."""
        table = get_table(name)
        with self.engine.connect() as conn:
            return pd.read_sql(select(table), conn)

    def read_all(self) -> dict[str, pd.DataFrame]:
        """Return every conformed table, keyed by table name."""
        return {table.name: self.read(table.name) for table in SILVER_TABLES}

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
