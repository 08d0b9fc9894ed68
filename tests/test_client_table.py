"""Tests for the client-side table engine."""

import pandas as pd
import polars as pl
import pytest

from tablekit.components.client_table import ClientTableEngine
from tablekit.core.base import STATUS_EMPTY, STATUS_READY
from tablekit.core.columns import ColumnDef
from tablekit.core.models import PaginationState, SortDescriptor, SortDirection
from tablekit.preprocessing.datasets import columns_from_dataset


class TestClientTablePipeline:
    """Tests for the filter -> sort -> paginate window."""

    def test_first_page_on_construction(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)

        assert engine.page_count == 3
        assert len(engine.rows) == 10
        assert engine.total_rows == 25
        assert engine.rows[0]["name"] == "user_00"

    def test_last_page_is_short(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)

        engine.next_page()
        engine.next_page()
        summary = engine.pagination_summary

        assert len(engine.rows) == 5
        assert (summary.start_row, summary.end_row, summary.total_rows) == (21, 25, 25)
        assert summary.page_number == 3
        assert engine.can_next_page is False

    def test_filter_change_returns_to_first_page(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)
        engine.next_page()

        engine.set_column_filter("status", "inactive")

        assert engine.pagination.page_index == 0
        assert engine.total_rows == 5
        assert [r["name"] for r in engine.rows] == [
            "user_00", "user_05", "user_10", "user_15", "user_20",
        ]

    def test_sort_change_returns_to_first_page(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)
        engine.next_page()

        engine.toggle_sort("name")
        assert engine.pagination.page_index == 0
        assert engine.sort_direction("name") is SortDirection.ASC

        engine.toggle_sort("name")
        assert engine.rows[0]["name"] == "user_24"

        engine.toggle_sort("name")
        assert engine.sorting is None
        assert engine.rows[0]["name"] == "user_00"

    def test_unsortable_column_does_not_notify(self, user_columns, user_rows):
        results = []
        engine = ClientTableEngine(user_columns, data=user_rows, on_change=results.append)

        engine.toggle_sort("actions")

        assert engine.sorting is None
        assert results == []

    def test_global_filter(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)

        engine.set_global_filter("USER_1")

        assert engine.total_rows == 10
        assert engine.page_count == 1

    def test_clear_all_restores_full_dataset(self, user_columns, user_rows):
        """Column filters and the global filter are cleared together."""
        engine = ClientTableEngine(user_columns, data=user_rows)
        engine.set_column_filter("status", "inactive")
        engine.set_global_filter("user_1")
        assert engine.total_rows == 2

        engine.clear_all_filters()

        assert engine.active_filters == []
        assert engine.global_filter == ""
        assert engine.total_rows == 25
        assert engine.pagination.page_index == 0

    def test_remove_single_filter(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)
        engine.set_column_filter("status", "inactive")
        engine.set_column_filter("age", (20, 21))

        engine.remove_filter("status")

        assert [f.id for f in engine.active_filters] == ["age"]
        assert engine.total_rows == 6

    def test_on_change_notified_per_recompute(self, user_columns, user_rows):
        results = []
        engine = ClientTableEngine(user_columns, data=user_rows, on_change=results.append)

        engine.next_page()
        engine.set_page_size(20)

        assert len(results) == 2
        assert results[-1] is engine.result
        assert len(results[-1].rows) == 20


class TestClientTableData:
    """Tests for dataset replacement and supported inputs."""

    def test_shrinking_dataset_clamps_page(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)
        engine.last_page()

        engine.set_data(user_rows[:12])

        assert engine.pagination.page_index == 1
        assert [r["name"] for r in engine.rows] == ["user_10", "user_11"]

    def test_empty_dataset(self, user_columns):
        engine = ClientTableEngine(user_columns, data=[])

        summary = engine.pagination_summary

        assert engine.status == STATUS_EMPTY
        assert summary.start_row == 0
        assert summary.display_page_count == 1

    def test_status_ready_with_rows(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)

        assert engine.status == STATUS_READY
        assert engine.is_loading is False
        assert engine.skeleton_rows == 10
        assert engine.page_size_options == (10, 20, 30, 50, 100)

    def test_polars_dataframe_input(self, sample_table_data):
        columns = columns_from_dataset(sample_table_data)
        engine = ClientTableEngine(columns, data=sample_table_data)

        engine.set_column_filter("category_id", (100, 100))

        assert [c.header for c in engine.columns] == ["Id", "Category Id", "Unit Price", "Name"]
        assert [r["name"] for r in engine.rows] == ["widget_a", "widget_b"]

    def test_polars_lazyframe_input(self, sample_table_data):
        columns = columns_from_dataset(sample_table_data)
        engine = ClientTableEngine(columns, data=sample_table_data.lazy())

        engine.set_sort("unit_price", "desc")

        assert engine.rows[0]["name"] == "widget_e"

    def test_pandas_dataframe_input(self):
        frame = pd.DataFrame({"name": ["x", "y", "z"], "score": [3.0, None, 1.0]})
        engine = ClientTableEngine(columns_from_dataset(frame), data=frame)

        engine.toggle_sort("score")

        assert [r["name"] for r in engine.rows] == ["z", "x", "y"]
        assert engine.rows[2]["score"] is None

    def test_compute_over_other_dataset(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)
        engine.set_column_filter("status", "inactive")

        result = engine.compute(pl.DataFrame(user_rows[:6]))

        assert [r["name"] for r in result.rows] == ["user_00", "user_05"]

    def test_compute_over_other_dataset_keeps_engine_pagination(self, user_columns, user_rows):
        """Windowing a foreign dataset leaves the engine's own paging intact."""
        engine = ClientTableEngine(user_columns, data=user_rows)
        engine.last_page()

        result = engine.compute(user_rows[:3])

        assert result.page_count == 1
        assert [r["name"] for r in result.rows] == ["user_00", "user_01", "user_02"]
        assert engine.page_count == engine.result.page_count == 3
        assert engine.pagination.page_index == 2

        engine.first_page()
        engine.next_page()
        assert engine.pagination.page_index == 1

    def test_reused_filter_list_is_a_new_filter(self):
        """A host mutating its selection list and passing it again recomputes."""
        rows = [
            {"name": "a", "tags": ["red"]},
            {"name": "b", "tags": ["blue"]},
            {"name": "c", "tags": ["green"]},
        ]
        engine = ClientTableEngine([ColumnDef("name"), ColumnDef("tags")], data=rows)
        selection = ["red"]

        assert engine.set_column_filter("tags", selection) is True
        before = engine.state
        assert [r["name"] for r in engine.rows] == ["a"]

        selection.append("blue")
        assert engine.set_column_filter("tags", selection) is True

        assert [r["name"] for r in engine.rows] == ["a", "b"]
        assert before.filter_value("tags") == ("red",)
        assert engine.state.filter_value("tags") == ("red", "blue")

    def test_single_number_on_numeric_column_matches_exactly(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)

        engine.set_column_filter("age", 21)

        assert [r["name"] for r in engine.rows] == ["user_01", "user_11", "user_21"]


class TestClientTableConfiguration:
    """Tests for construction options and lifecycle."""

    def test_duplicate_column_ids_raise(self, user_rows):
        with pytest.raises(ValueError):
            ClientTableEngine([ColumnDef("name"), ColumnDef("name")], data=user_rows)

    def test_non_positive_page_size_raises(self, user_columns):
        with pytest.raises(ValueError):
            ClientTableEngine(user_columns, data=[], initial_page_size=0)

    def test_page_size_from_environment(self, user_columns, user_rows, monkeypatch):
        monkeypatch.setenv("TABLEKIT_PAGE_SIZE", "20")

        engine = ClientTableEngine(user_columns, data=user_rows)

        assert engine.pagination.page_size == 20

    def test_initial_state_from_dict(self, user_columns, user_rows):
        engine = ClientTableEngine(
            user_columns,
            data=user_rows,
            initial_state={
                "pagination": {"page_index": 1, "page_size": 5},
                "sorting": [{"id": "name", "desc": True}],
                "column_filters": [{"id": "status", "value": "active"}],
            },
        )

        assert engine.pagination == PaginationState(page_index=1, page_size=5)
        assert engine.sorting == SortDescriptor("name", SortDirection.DESC)
        assert engine.rows[0]["name"] == "user_19"

    def test_show_clear_all_needs_two_filters(self, user_columns, user_rows):
        engine = ClientTableEngine(user_columns, data=user_rows)

        engine.set_column_filter("status", "active")
        assert engine.show_clear_all is False
        assert engine.has_active_filters is True

        engine.set_column_filter("age", (20, 25))
        assert engine.show_clear_all is True

    def test_dispose_turns_operations_into_no_ops(self, user_columns, user_rows):
        results = []
        with ClientTableEngine(user_columns, data=user_rows, on_change=results.append) as engine:
            engine.next_page()

        engine.next_page()
        engine.set_global_filter("x")

        assert engine.disposed is True
        assert len(results) == 1
        assert engine.pagination.page_index == 1
