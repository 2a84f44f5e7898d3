"""Tests for the CRM cleansing rules (customers, products, sales lines)."""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from warehouse_core.exceptions import MalformedDataError
from warehouse_core.silver.crm import (
    CUSTOMER_COLUMNS,
    PRODUCT_COLUMNS,
    SALES_COLUMNS,
    category_id,
    clean_customers,
    clean_products,
    clean_sales_details,
    product_key,
    repair_sales_amounts,
)

from test_utils import as_dates


class TestCleanCustomers:
    """Customer conformance."""

    @pytest.fixture
    def raw(self) -> pd.DataFrame:
        return pd.DataFrame({
            "cst_id": pd.array([11000, 11001, 11000, None], dtype="Int64"),
            "cst_key": ["AW00011000", "AW00011001", "AW00011000", "AW00011002"],
            "cst_firstname": [" Jon", "Eugene", "Jonathan", "Ruben"],
            "cst_lastname": ["Yang ", "Huang", "Yang", "Torres"],
            "cst_marital_status": ["M", "s", "S", "M"],
            "cst_gndr": ["M", None, "F", "M"],
            "cst_create_date": pd.to_datetime(
                ["2025-10-06", "2025-10-06", "2025-10-01", "2025-10-06"]
            ),
        })

    def test_one_row_per_customer(self, raw: pd.DataFrame) -> None:
        out = clean_customers(raw)
        assert out.columns.tolist() == CUSTOMER_COLUMNS
        assert out["cst_id"].tolist() == [11000, 11001]

    def test_latest_version_is_trimmed_and_mapped(self, raw: pd.DataFrame) -> None:
        jon = clean_customers(raw).iloc[0]
        assert jon["cst_firstname"] == "Jon"
        assert jon["cst_lastname"] == "Yang"
        assert jon["cst_marital_status"] == "Married"
        assert jon["cst_gndr"] == "Male"

    def test_missing_codes_become_sentinel(self, raw: pd.DataFrame) -> None:
        eugene = clean_customers(raw).iloc[1]
        assert eugene["cst_marital_status"] == "Single"
        assert eugene["cst_gndr"] == "n/a"


class TestProductKeys:
    """Splitting the raw product key."""

    @pytest.mark.parametrize(
        "raw_key, cat, key",
        [
            ("CO-RF-FR-R92B-58", "CO_RF", "FR-R92B-58"),
            ("AB-CD01-HX2000", "AB_CD", "1-HX2000"),
            ("AC-HE-HL-U509-R", "AC_HE", "HL-U509-R"),
        ],
    )
    def test_split(self, raw_key: str, cat: str, key: str) -> None:
        assert category_id(raw_key) == cat
        assert product_key(raw_key) == key

    def test_missing_key(self) -> None:
        assert category_id(None) is None
        assert product_key(None) is None


def test_clean_products() -> None:
    """Products get derived keys, defaulted cost, mapped line and end dates."""
    raw = pd.DataFrame({
        "prd_id": pd.array([212, 214, 213, 210], dtype="Int64"),
        "prd_key": ["AC-HE-HL-U509-R", "AC-HE-HL-U509-R", "AC-HE-HL-U509-R", "CO-RF-FR-R92B-58"],
        "prd_nm": ["Helmet", "Helmet", "Helmet", "HL Road Frame - Black- 58"],
        "prd_cost": pd.array([12, 13, 14, None], dtype="Int64"),
        "prd_line": ["S", "S ", "s", None],
        "prd_start_dt": pd.to_datetime(["2011-07-01", "2013-07-01", "2012-07-01", "2003-07-01"]),
        "prd_end_dt": pd.to_datetime(["2007-12-28", None, "2008-12-27", None]),
    })

    out = clean_products(raw)

    assert out.columns.tolist() == PRODUCT_COLUMNS
    assert out["prd_id"].tolist() == [212, 214, 213, 210]
    assert out["cat_id"].tolist() == ["AC_HE", "AC_HE", "AC_HE", "CO_RF"]
    assert out["prd_key"].tolist() == ["HL-U509-R"] * 3 + ["FR-R92B-58"]
    assert out["prd_cost"].tolist() == [12, 13, 14, 0]
    assert out["prd_line"].tolist() == ["Other Sales"] * 3 + ["n/a"]
    assert as_dates(out["prd_end_dt"]) == [date(2012, 6, 30), None, date(2013, 6, 30), None]


class TestRepairSalesAmounts:
    """Cross-derivation of sales amount and price."""

    def test_consistent_row_is_unchanged(self) -> None:
        sales, price = repair_sales_amounts(
            pd.Series([3578.0]), pd.Series([1]), pd.Series([3578.0])
        )
        assert sales.tolist() == [3578.0]
        assert price.tolist() == [3578.0]

    def test_missing_sales_uses_absolute_price(self) -> None:
        sales, price = repair_sales_amounts(
            pd.Series([np.nan]), pd.Series([2]), pd.Series([-13.0])
        )
        assert sales.tolist() == [26.0]
        assert price.tolist() == [13.0]

    def test_non_positive_sales_is_recomputed(self) -> None:
        sales, _ = repair_sales_amounts(pd.Series([-5.0]), pd.Series([3]), pd.Series([10.0]))
        assert sales.tolist() == [30.0]

    def test_price_uses_repaired_sales(self) -> None:
        sales, price = repair_sales_amounts(
            pd.Series([0.0]), pd.Series([4]), pd.Series([-2.5])
        )
        assert sales.tolist() == [10.0]
        assert price.tolist() == [2.5]

    def test_zero_quantity_gives_null_price(self) -> None:
        sales, price = repair_sales_amounts(pd.Series([50.0]), pd.Series([0]), pd.Series([np.nan]))
        assert sales.tolist() == [50.0]
        assert price.isna().all()


class TestCleanSalesDetails:
    """Sales line conformance."""

    @pytest.fixture
    def raw(self) -> pd.DataFrame:
        return pd.DataFrame({
            "sls_ord_num": ["SO43697", "SO43698"],
            "sls_prd_key": ["FR-R92R-58", "HL-U509-R"],
            "sls_cust_id": pd.array([11000, 11001], dtype="Int64"),
            "sls_order_dt": pd.array([20101229, 0], dtype="Int64"),
            "sls_ship_dt": pd.array([20110105, 2011015], dtype="Int64"),
            "sls_due_dt": pd.array([20110110, None], dtype="Int64"),
            "sls_sales": [3578.0, np.nan],
            "sls_quantity": pd.array([1, 2], dtype="Int64"),
            "sls_price": [3578.0, -13.0],
        })

    def test_dates_and_amounts(self, raw: pd.DataFrame) -> None:
        out = clean_sales_details(raw)
        assert out.columns.tolist() == SALES_COLUMNS
        assert as_dates(out["sls_order_dt"]) == [date(2010, 12, 29), None]
        assert as_dates(out["sls_ship_dt"]) == [date(2011, 1, 5), None]
        assert as_dates(out["sls_due_dt"]) == [date(2011, 1, 10), None]
        assert out["sls_sales"].tolist() == [3578.0, 26.0]
        assert out["sls_price"].tolist() == [3578.0, 13.0]
        assert out["sls_quantity"].tolist() == [1, 2]

    def test_invalid_calendar_date_is_fatal(self, raw: pd.DataFrame) -> None:
        raw["sls_due_dt"] = pd.array([20231345, None], dtype="Int64")
        with pytest.raises(MalformedDataError, match="20231345"):
            clean_sales_details(raw)
