"""Shared utilities for cleansing landing records.

This module provides the scalar building blocks used by every silver
cleansing rule: trimming text, normalizing and mapping categorical codes to
their business names, and validating compact ``YYYYMMDD`` integer dates.

Every helper treats ``None``/``NaN``/``pd.NA`` as "unknown" and never raises for
a data-quality problem, except ``parse_yyyymmdd`` on an 8-digit value that is
not a calendar date.

Examples:
    >>> from warehouse_core.silver.cleaning_utils import map_code, parse_yyyymmdd
    >>> map_code(" f ", CRM_GENDER_CODES)
    'Female'
    >>> map_code("X", CRM_GENDER_CODES)
    'n/a'
    >>> parse_yyyymmdd(20230115)
    datetime.date(2023, 1, 15)
    >>> parse_yyyymmdd(2023011) is None
    True
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

import pandas as pd

from warehouse_core.exceptions import MalformedDataError

# Placeholder for unmapped or unknown categorical values
SENTINEL = "n/a"

MARITAL_STATUS_CODES = {"S": "Single", "M": "Married"}

CRM_GENDER_CODES = {"F": "Female", "M": "Male"}

PRODUCT_LINE_CODES = {
    "M": "Mountain",
    "R": "Road",
    "S": "Other Sales",
    "T": "Touring",
}

ERP_GENDER_CODES = {
    "F": "Female",
    "FEMALE": "Female",
    "M": "Male",
    "MALE": "Male",
}

COUNTRY_CODES = {
    "DE": "Germany",
    "US": "United States",
    "USA": "United States",
}


def is_missing(x: Any) -> bool:
    """Return True for None, NaN, NaT and pd.NA."""
    if x is None:
        return True
    try:
        return bool(pd.isna(x))
    except (TypeError, ValueError):
        # array-likes are never a single missing value
        return False


def strip_text(x: Any) -> Optional[str]:
    """Trim leading/trailing whitespace.

    Args:
        x: Value to clean.

    Returns:
        Trimmed string, or None if input is missing.

    Examples:
        >>> strip_text("  Jon ")
        'Jon'
        >>> strip_text(None) is None
        True
    """
    if is_missing(x):
        return None
    return str(x).strip()


def normalize_code(x: Any) -> Optional[str]:
    """Upper-case and trim a categorical code, or None if missing."""
    s = strip_text(x)
    return s.upper() if s is not None else None


def map_code(x: Any, mapping: Mapping[str, str], default: str = SENTINEL) -> str:
    """Map a raw categorical code to its business name.

    The lookup is case-insensitive and ignores surrounding whitespace.

    Args:
        x: Raw code.
        mapping: Normalized (upper-case) code to business name.
        default: Value returned for missing or unmapped codes.

    Returns:
        The mapped name, or ``default``.

    Examples:
        >>> map_code("m", MARITAL_STATUS_CODES)
        'Married'
        >>> map_code(None, MARITAL_STATUS_CODES)
        'n/a'
    """
    code = normalize_code(x)
    if code is None:
        return default
    return mapping.get(code, default)


def map_country(x: Any) -> str:
    """Map a raw country value to a country name.

    Known codes map to full names, blank or missing values map to the
    sentinel, anything else passes through trimmed (case preserved).

    Examples:
        >>> map_country(" DE")
        'Germany'
        >>> map_country("   ")
        'n/a'
        >>> map_country(" France ")
        'France'
    """
    s = strip_text(x)
    if not s:
        return SENTINEL
    return COUNTRY_CODES.get(s, s)


def strip_prefix(x: Any, prefix: str) -> Optional[str]:
    """Drop a literal leading ``prefix`` (case-sensitive), or None if missing."""
    if is_missing(x):
        return None
    s = str(x)
    return s[len(prefix) :] if s.startswith(prefix) else s


def parse_yyyymmdd(x: Any) -> Optional[date]:
    """Validate and convert a compact integer date.

    Values that are missing, zero, or whose decimal text is not exactly eight
    digits (negative values included) are treated as invalid and return None.

    Args:
        x: Raw integer date such as ``20230115``.

    Returns:
        The calendar date, or None for an invalid value.

    Raises:
        MalformedDataError: If the value has eight digits but is not a real
            calendar date (e.g. ``20231345``) or is not an integer at all.

    Examples:
        >>> parse_yyyymmdd(20230115)
        datetime.date(2023, 1, 15)
        >>> parse_yyyymmdd(0) is None
        True
        >>> parse_yyyymmdd(32154) is None
        True
    """
    if is_missing(x):
        return None
    try:
        value = int(x)
    except (TypeError, ValueError) as e:
        raise MalformedDataError(f"Date value {x!r} is not an integer") from e
    if value != x:
        raise MalformedDataError(f"Date value {x!r} is not an integer")

    text = str(value)
    if value == 0 or len(text) != 8 or not text.isdigit():
        return None
    try:
        return datetime.strptime(text, "%Y%m%d").date()
    except ValueError as e:
        raise MalformedDataError(f"Date value {text} is not a valid YYYYMMDD date") from e


def to_date(x: Any) -> Optional[date]:
    """Cast a timestamp-like value to a calendar date, or None if missing."""
    if is_missing(x):
        return None
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    return pd.Timestamp(x).date()
