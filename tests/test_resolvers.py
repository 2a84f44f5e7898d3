"""Tests for the deduplication and temporal conformance resolvers."""

from datetime import timedelta

import pandas as pd

from warehouse_core.silver.dedup import latest_per_key
from warehouse_core.silver.temporal import derive_end_dates

from test_utils import as_dates


class TestLatestPerKey:
    """Keeping the most recent version of each customer."""

    @staticmethod
    def _frame(ids, dates, names) -> pd.DataFrame:
        return pd.DataFrame({
            "cst_id": pd.array(ids, dtype="Int64"),
            "cst_create_date": pd.to_datetime(dates),
            "cst_firstname": names,
        })

    def test_latest_create_date_wins(self) -> None:
        df = self._frame([1, 1, 2], ["2024-01-01", "2024-02-01", "2024-01-05"], ["old", "new", "b"])
        out = latest_per_key(df, "cst_id", "cst_create_date")
        assert out["cst_firstname"].tolist() == ["new", "b"]
        assert out.index.tolist() == [0, 1]

    def test_null_keys_are_excluded(self) -> None:
        df = self._frame([None, 3, None], ["2024-01-01", "2024-01-01", "2024-03-01"], ["x", "c", "y"])
        out = latest_per_key(df, "cst_id", "cst_create_date")
        assert out["cst_id"].tolist() == [3]

    def test_exact_tie_keeps_first_landing_row(self) -> None:
        df = self._frame([7, 7, 7], ["2024-01-01", "2024-01-01", "2023-12-31"], ["first", "second", "older"])
        out = latest_per_key(df, "cst_id", "cst_create_date")
        assert out["cst_firstname"].tolist() == ["first"]

    def test_null_create_date_ranks_last(self) -> None:
        df = self._frame([5, 5], [None, "2020-01-01"], ["undated", "dated"])
        out = latest_per_key(df, "cst_id", "cst_create_date")
        assert out["cst_firstname"].tolist() == ["dated"]

    def test_input_is_not_modified(self) -> None:
        df = self._frame([1, 1], ["2024-01-01", "2024-02-01"], ["a", "b"])
        before = df.copy()
        latest_per_key(df, "cst_id", "cst_create_date")
        pd.testing.assert_frame_equal(df, before)


class TestDeriveEndDates:
    """Rebuilding validity intervals from successive start dates."""

    def test_versions_chain_without_gaps(self) -> None:
        df = pd.DataFrame({
            "prd_key": ["HL-U509-R", "HL-U509-R", "HL-U509-R"],
            "prd_start_dt": pd.to_datetime(["2011-07-01", "2012-07-01", "2013-07-01"]),
            "prd_end_dt": pd.to_datetime(["2007-12-28", "2008-12-27", None]),
        })
        out = derive_end_dates(df, "prd_key", "prd_start_dt", "prd_end_dt")
        ends = as_dates(out["prd_end_dt"])
        starts = as_dates(out["prd_start_dt"])
        assert ends[2] is None
        for end, next_start in zip(ends[:-1], starts[1:]):
            assert end == next_start - timedelta(days=1)

    def test_unordered_input_keeps_row_order(self) -> None:
        df = pd.DataFrame({
            "k": ["A", "B", "A"],
            "s": pd.to_datetime(["2024-01-10", "2024-01-01", "2024-01-01"]),
        })
        out = derive_end_dates(df, "k", "s", "e")
        assert out["k"].tolist() == ["A", "B", "A"]
        assert as_dates(out["e"]) == [None, None, pd.Timestamp("2024-01-09").date()]

    def test_single_version_stays_open(self) -> None:
        df = pd.DataFrame({"k": ["Z"], "s": pd.to_datetime(["2003-07-01"])})
        out = derive_end_dates(df, "k", "s", "e")
        assert out["e"].isna().all()

    def test_keys_are_partitioned(self) -> None:
        """A version never takes its end date from another key."""
        df = pd.DataFrame({
            "k": ["A", "B"],
            "s": pd.to_datetime(["2024-01-01", "2024-02-01"]),
        })
        out = derive_end_dates(df, "k", "s", "e")
        assert out["e"].isna().all()
