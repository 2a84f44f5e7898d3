"""Temporal conformance resolver for slowly-changing product records.

The CRM product extract only records when a product version became valid.
The end of each version is reconstructed from its successor: versions sharing
a key are ordered by start date and each one ends the day before the next one
starts. The latest version stays open (null end date).
"""

from __future__ import annotations

import numpy as np
import pandas as pd

_POS = "__landing_pos"

ONE_DAY = pd.Timedelta(days=1)


def derive_end_dates(
    frame: pd.DataFrame,
    key: str,
    start: str,
    end: str,
) -> pd.DataFrame:
    """Fill ``end`` from the next version's ``start`` within each ``key``.

    Versions are ordered by ``start`` ascending; ties keep landing order and
    null start dates sort last. Rows with a null key form their own group.

    Args:
        frame: Rows with a datetime-like ``start`` column.
        key: Column identifying the entity whose versions are chained.
        start: Validity start column.
        end: Column to (over)write with the derived validity end.

    Returns:
        New DataFrame in the original row order with ``end`` populated.

    Examples:
        >>> df = pd.DataFrame({"k": ["A", "A", "B"],
        ...                    "s": pd.to_datetime(["2024-01-10", "2024-01-01", "2024-01-01"])})
        >>> derive_end_dates(df, "k", "s", "e")["e"].tolist()
        [NaT, Timestamp('2024-01-09 00:00:00'), NaT]
    """
    work = frame.copy()
    work[start] = pd.to_datetime(work[start])
    work[_POS] = np.arange(len(work))

    ordered = work.sort_values([start, _POS], na_position="last", kind="mergesort")
    next_start = ordered.groupby(key, dropna=False, sort=False)[start].shift(-1)
    ordered[end] = next_start - ONE_DAY

    return ordered.sort_values(_POS).drop(columns=[_POS]).reset_index(drop=True)
