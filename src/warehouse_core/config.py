"""Unified configuration for the warehouse silver layer.

This module provides a single, simple configuration class used by the
landing reader, the conformed store and the load orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from warehouse_core.exceptions import ConfigError

DEFAULT_DATABASE_FILE = "warehouse.db"


@dataclass
class DataPaths:
    """All filesystem locations used by the silver load.

    Attributes:
        data_root: Root directory for all warehouse data layers.
        database_url: SQLAlchemy URL of the conformed (silver) database.

    Directory Structure:
        data_root/
        ├── a_raw/               # Bronze: landing CSV extracts
        │   ├── source_crm/      # cust_info.csv, prd_info.csv, sales_details.csv
        │   └── source_erp/      # cust_az12.csv, loc_a101.csv, px_cat_g1v2.csv
        └── b_clean/             # Silver: conformed database
            ├── warehouse.db     # default SQLite conformed store
            └── _meta/           # last-run metadata
    """

    data_root: Path
    database_url: str

    @classmethod
    def from_root(
        cls,
        data_root: str | Path,
        database_url: str | None = None,
    ) -> DataPaths:
        """Create DataPaths from a root directory.

        Args:
            data_root: Root directory for warehouse data.
            database_url: Optional SQLAlchemy URL for the conformed store. If None,
                defaults to a SQLite file at ``data_root/b_clean/warehouse.db``.

        Returns:
            DataPaths instance.

        Raises:
            ConfigError: If database_url is given but blank.

        Examples:
            >>> paths = DataPaths.from_root("data")
            >>> paths.raw_crm
            PosixPath('data/a_raw/source_crm')
        """
        if isinstance(data_root, str):
            data_root = Path(data_root)

        if database_url is None:
            db_file = data_root / "b_clean" / DEFAULT_DATABASE_FILE
            database_url = f"sqlite:///{db_file.as_posix()}"
        elif not database_url.strip():
            raise ConfigError("database_url must not be blank")

        return cls(data_root=data_root, database_url=database_url.strip())

    @property
    def raw_dir(self) -> Path:
        """Bronze layer: landing extracts."""
        return self.data_root / "a_raw"

    @property
    def raw_crm(self) -> Path:
        """Bronze layer: CRM source extracts."""
        return self.raw_dir / "source_crm"

    @property
    def raw_erp(self) -> Path:
        """Bronze layer: ERP source extracts."""
        return self.raw_dir / "source_erp"

    @property
    def clean_dir(self) -> Path:
        """Silver layer: conformed store directory."""
        return self.data_root / "b_clean"

    @property
    def meta_dir(self) -> Path:
        """Silver layer: run metadata."""
        return self.clean_dir / "_meta"

    def ensure_dirs(self) -> None:
        """Create the silver directories (the landing layer is never created here)."""
        for path in [self.clean_dir, self.meta_dir]:
            path.mkdir(parents=True, exist_ok=True)
