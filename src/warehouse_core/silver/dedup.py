"""Deduplication resolver for records that share a natural key.

The CRM customer extract can carry several versions of the same customer.
Only the most recently created version reaches the silver layer.

Ordering rules:
    - Rows whose key is null are excluded before ranking.
    - The greatest ``order_by`` value wins; null ``order_by`` values rank last.
    - Exact ties are broken by landing order: the first row delivered wins.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

_POS = "__landing_pos"


def latest_per_key(frame: pd.DataFrame, key: str, order_by: str) -> pd.DataFrame:
    """Keep one row per non-null ``key``: the one with the latest ``order_by``.

    Args:
        frame: Landing rows.
        key: Natural key column.
        order_by: Column ranking versions of the same key (most recent wins).

    Returns:
        New DataFrame with at most one row per distinct non-null key, in the
        landing order of the surviving rows, with a fresh RangeIndex.

    Examples:
        >>> df = pd.DataFrame({"cst_id": [1, 1, 2],
        ...                    "cst_create_date": pd.to_datetime(
        ...                        ["2024-01-01", "2024-02-01", "2024-01-05"])})
        >>> latest_per_key(df, "cst_id", "cst_create_date")["cst_create_date"].dt.day.tolist()
        [1, 5]
    """
    work = frame.copy()
    work[_POS] = np.arange(len(work))

    keyed = work[work[key].notna()]
    dropped = len(work) - len(keyed)
    if dropped:
        logger.debug("Excluded %d rows with null %s", dropped, key)

    ranked = keyed.sort_values(
        [order_by, _POS],
        ascending=[False, True],
        na_position="last",
        kind="mergesort",
    )
    winners = ranked.drop_duplicates(subset=[key], keep="first")
    logger.debug(
        "Resolved %d rows to %d distinct %s values", len(keyed), len(winners), key
    )

    return winners.sort_values(_POS).drop(columns=[_POS]).reset_index(drop=True)
