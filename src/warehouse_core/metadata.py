"""Metadata handling for silver load runs.

This module stores and reads a JSON record of the most recent full load so that
operators can see when the silver layer was last rebuilt and how it ended.
Metadata is stored as a JSON file in the ``_meta/`` subdirectory of the
silver layer.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path

METADATA_FILENAME = "silver_load.json"


@dataclass
class LoadMetadata:
    """Metadata for a full silver load.

    Attributes:
        processing_time: ISO timestamp used as the run's processing time.
        started_at: ISO timestamp of when the run started.
        finished_at: ISO timestamp of when the run ended (successfully or not).
        duration_seconds: Wall-clock duration of the run.
        status: Status of the run: "ok" or "failed".
        tables: Rows written per conformed table, for tables that completed.
        error_code: Error classification when status is "failed".
        error_message: Error message when status is "failed".

    """

    processing_time: str
    started_at: str
    finished_at: str
    duration_seconds: float
    status: str  # "ok" | "failed"
    tables: dict[str, int] = field(default_factory=dict)
    error_code: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict:
        """Convert metadata to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> LoadMetadata:
        """Create metadata from dictionary."""
        return cls(**data)


def metadata_path(meta_dir: Path) -> Path:
    """Return the metadata file path inside ``meta_dir``."""
    return meta_dir / METADATA_FILENAME


def write_metadata(meta_dir: Path, metadata: LoadMetadata) -> Path:
    """Write metadata JSON to the ``_meta/`` directory.

    Args:
        meta_dir: Metadata directory (e.g., data/b_clean/_meta).
        metadata: Metadata to write.

    Returns:
        Path of the written file.

    """
    meta_path = metadata_path(meta_dir)
    meta_path.parent.mkdir(parents=True, exist_ok=True)

    with open(meta_path, "w", encoding="utf-8") as f:
        json.dump(metadata.to_dict(), f, indent=2, ensure_ascii=False)
    return meta_path


def read_metadata(meta_dir: Path) -> LoadMetadata | None:
    """Read metadata JSON if it exists.

    Args:
        meta_dir: Metadata directory (e.g., data/b_clean/_meta).

    Returns:
        LoadMetadata if the file exists and parses, None otherwise.

    Examples:
        >>> meta = read_metadata(Path("data/b_clean/_meta"))
        >>> if meta and meta.status == "ok":
        ...     print("Silver layer is current")

    """
    meta_path = metadata_path(meta_dir)

    if not meta_path.exists():
        return None

    try:
        with open(meta_path, encoding="utf-8") as f:
            data = json.load(f)
        return LoadMetadata.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError):
        # Corrupted metadata is treated as missing
        return None
