"""Tests for the table engine registry."""

import pytest

import tablekit
from tablekit.components.client_table import ClientTableEngine
from tablekit.components.server_table import ServerTableEngine
from tablekit.core.registry import (
    create_engine,
    get_engine_class,
    is_registered,
    list_registered_engines,
    register_engine,
)


class TestEngineRegistry:
    """Tests for mode registration and lookup."""

    def test_builtin_modes_registered(self):
        assert get_engine_class("client") is ClientTableEngine
        assert get_engine_class("server") is ServerTableEngine
        assert ClientTableEngine._engine_mode == "client"
        assert set(list_registered_engines()) >= {"client", "server"}

    def test_unknown_mode_raises(self):
        assert is_registered("spreadsheet") is False
        with pytest.raises(KeyError):
            get_engine_class("spreadsheet")

    def test_duplicate_mode_raises(self):
        with pytest.raises(ValueError):
            register_engine("client")(ServerTableEngine)

    def test_create_engine(self, user_columns, user_rows):
        engine = create_engine("client", columns=user_columns, data=user_rows)

        assert isinstance(engine, ClientTableEngine)
        assert engine.total_rows == 25

    def test_package_exports(self):
        assert tablekit.__version__ == "0.1.0"
        for name in tablekit.__all__:
            assert hasattr(tablekit, name)
