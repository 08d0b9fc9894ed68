"""Pytest configuration and shared fixtures for tablekit tests."""

from typing import Any, Dict, List
from unittest.mock import patch

import polars as pl
import pytest

from tablekit.core.columns import ColumnDef


class MockSessionState(dict):
    """Mock Streamlit session_state that behaves like a dict."""
    pass


class FakeClock:
    """Manually advanced monotonic clock for driving debounce windows."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture
def mock_streamlit():
    """
    Mock Streamlit's session_state for testing the session store.

    This fixture patches st.session_state to allow testing without running a
    full Streamlit server.
    """
    mock_session_state = MockSessionState()

    with patch('streamlit.session_state', mock_session_state):
        yield mock_session_state


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def user_columns() -> List[ColumnDef]:
    """Columns for the user rows below."""
    return [
        ColumnDef("name", "Name"),
        ColumnDef("status", "Status"),
        ColumnDef("age", "Age"),
        ColumnDef("actions", header=lambda: "Actions", sortable=False, filterable=False),
    ]


@pytest.fixture
def user_rows() -> List[Dict[str, Any]]:
    """25 users; every fifth is inactive and ages cycle through 20..29."""
    return [
        {
            "name": f"user_{i:02d}",
            "status": "inactive" if i % 5 == 0 else "active",
            "age": 20 + (i % 10),
            "actions": None,
        }
        for i in range(25)
    ]


@pytest.fixture
def sample_table_data() -> pl.DataFrame:
    """Create a small polars product catalogue for table engines."""
    return pl.DataFrame({
        "id": [1, 2, 3, 4, 5],
        "category_id": [100, 100, 200, 200, 300],
        "unit_price": [5.5, 6.25, 7.0, 8.75, 9.9],
        "name": ["widget_a", "widget_b", "widget_c", "widget_d", "widget_e"],
    })
