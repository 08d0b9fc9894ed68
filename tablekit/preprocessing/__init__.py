"""Row filtering, sorting and dataset conversion."""

from .datasets import columns_from_dataset, columns_from_schema, rows_from_dataset
from .filtering import (
    build_row_predicate,
    filter_rows,
    get_filter_fn,
    list_filter_fns,
    register_filter_fn,
)
from .sorting import default_sort_key, sort_rows

__all__ = [
    "filter_rows",
    "build_row_predicate",
    "register_filter_fn",
    "get_filter_fn",
    "list_filter_fns",
    "sort_rows",
    "default_sort_key",
    "rows_from_dataset",
    "columns_from_dataset",
    "columns_from_schema",
]
