"""Core infrastructure for tablekit."""

from .base import BaseTableEngine
from .columns import ColumnDef
from .debounce import AsyncioDebounceScheduler, DebounceScheduler
from .filters import FilterModel
from .models import (
    ActiveFilterView,
    ColumnFilter,
    PageResult,
    PaginationState,
    PaginationSummary,
    SortDescriptor,
    SortDirection,
    TableState,
)
from .pagination import PaginationModel
from .registry import create_engine, get_engine_class, register_engine
from .sorting import SortModel
from .state import TableStateStore

__all__ = [
    "BaseTableEngine",
    "ColumnDef",
    "DebounceScheduler",
    "AsyncioDebounceScheduler",
    "PaginationModel",
    "SortModel",
    "FilterModel",
    "TableStateStore",
    "register_engine",
    "get_engine_class",
    "create_engine",
    # Models
    "ActiveFilterView",
    "ColumnFilter",
    "PageResult",
    "PaginationState",
    "PaginationSummary",
    "SortDescriptor",
    "SortDirection",
    "TableState",
]
