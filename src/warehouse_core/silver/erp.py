"""Silver layer: ERP cleansing rules.

Conforms the three ERP landing extracts:

- ``erp_cust_az12``: customer demographics (birth date, gender)
- ``erp_loc_a101``: customer location (country)
- ``erp_px_cat_g1v2``: product categories (loaded as delivered)

ERP customer ids are normalized so they join to the CRM ``cst_key``: the
demographics feed prefixes some ids with ``NAS`` and the location feed writes
them with hyphens.
"""

from __future__ import annotations

import logging
from datetime import datetime

import pandas as pd

from warehouse_core.silver.cleaning_utils import (
    ERP_GENDER_CODES,
    is_missing,
    map_code,
    map_country,
    strip_prefix,
)

logger = logging.getLogger(__name__)

LEGACY_ID_PREFIX = "NAS"

DEMOGRAPHIC_COLUMNS = ["cid", "bdate", "gen"]
LOCATION_COLUMNS = ["cid", "cntry"]
CATEGORY_COLUMNS = ["id", "cat", "subcat", "maintenance"]


def normalize_location_id(cid: object) -> str | None:
    """Remove every hyphen from a location customer id."""
    if is_missing(cid):
        return None
    return str(cid).replace("-", "")


def clean_customer_demographics(
    raw: pd.DataFrame,
    processing_time: datetime,
) -> pd.DataFrame:
    """Conform ERP customer demographics (``erp_cust_az12``).

    Args:
        raw: Landing rows from ``source_erp/cust_az12.csv``.
        processing_time: The run's processing time. Birth dates strictly after
            it are impossible and are nulled.

    Returns:
        One row per landing row with normalized id, birth date and gender.
    """
    bdate = pd.to_datetime(raw["bdate"]).dt.normalize()
    future = bdate > pd.Timestamp(processing_time)

    out = pd.DataFrame({
        "cid": raw["cid"].map(lambda v: strip_prefix(v, LEGACY_ID_PREFIX)),
        "bdate": bdate.mask(future),
        "gen": raw["gen"].map(lambda v: map_code(v, ERP_GENDER_CODES)),
    })
    if future.any():
        logger.debug("Demographics: nulled %d future birth dates", int(future.sum()))
    return out[DEMOGRAPHIC_COLUMNS].reset_index(drop=True)


def clean_customer_locations(raw: pd.DataFrame) -> pd.DataFrame:
    """Conform ERP customer locations (``erp_loc_a101``).

    Args:
        raw: Landing rows from ``source_erp/loc_a101.csv``.

    Returns:
        One row per landing row with hyphen-free id and country name.
    """
    out = pd.DataFrame({
        "cid": raw["cid"].map(normalize_location_id),
        "cntry": raw["cntry"].map(map_country),
    })
    return out[LOCATION_COLUMNS].reset_index(drop=True)


def clean_product_categories(raw: pd.DataFrame) -> pd.DataFrame:
    """Load ERP product categories (``erp_px_cat_g1v2``) unchanged."""
    return raw[CATEGORY_COLUMNS].reset_index(drop=True)
