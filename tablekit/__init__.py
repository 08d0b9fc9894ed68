"""
tablekit - Pagination, sorting and filtering state for data tables.

This package provides client-side engines that compute the visible row window
of an in-memory dataset, and server-side engines that turn table interactions
into debounced fetch requests for the host application.
"""

from .components.client_table import ClientTableEngine
from .components.filter_session import FilterSession
from .components.server_table import ServerTableEngine
from .core.base import BaseTableEngine
from .core.columns import ColumnDef
from .core.debounce import AsyncioDebounceScheduler, DebounceScheduler
from .core.models import (
    ActiveFilterView,
    ColumnFilter,
    PageResult,
    PaginationState,
    PaginationSummary,
    SortDescriptor,
    SortDirection,
    TableState,
)
from .core.registry import create_engine, get_engine_class, register_engine
from .core.state import TableStateStore, get_default_store
from .preprocessing.datasets import columns_from_dataset
from .preprocessing.filtering import register_filter_fn

__version__ = "0.1.0"

__all__ = [
    # Core
    "BaseTableEngine",
    "ColumnDef",
    "TableStateStore",
    "get_default_store",
    "register_engine",
    "get_engine_class",
    "create_engine",
    "DebounceScheduler",
    "AsyncioDebounceScheduler",
    # Engines
    "ClientTableEngine",
    "ServerTableEngine",
    "FilterSession",
    # Models
    "ActiveFilterView",
    "ColumnFilter",
    "PageResult",
    "PaginationState",
    "PaginationSummary",
    "SortDescriptor",
    "SortDirection",
    "TableState",
    # Utilities
    "columns_from_dataset",
    "register_filter_fn",
]
