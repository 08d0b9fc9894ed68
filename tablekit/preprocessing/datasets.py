"""Normalisation of host datasets into row sequences, and column inference."""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd
import polars as pl

from ..core.columns import ColumnDef

Dataset = Union[Sequence[Any], pl.DataFrame, pl.LazyFrame, pd.DataFrame]

_NUMERIC_DTYPES = (
    pl.Int8,
    pl.Int16,
    pl.Int32,
    pl.Int64,
    pl.UInt8,
    pl.UInt16,
    pl.UInt32,
    pl.UInt64,
    pl.Float32,
    pl.Float64,
)


def rows_from_dataset(data: Optional[Dataset]) -> List[Any]:
    """
    Turn any supported dataset into a list of rows.

    Polars and pandas frames become lists of dicts (one per row, keyed by
    column name). Any other iterable is copied into a list as-is, so rows
    may be mappings or arbitrary objects.

    Args:
        data: Sequence of rows, polars DataFrame/LazyFrame or pandas DataFrame

    Returns:
        A new list of rows
    """
    if data is None:
        return []
    if isinstance(data, pl.LazyFrame):
        return data.collect().to_dicts()
    if isinstance(data, pl.DataFrame):
        return data.to_dicts()
    if isinstance(data, pd.DataFrame):
        # Missing pandas values become None so filters treat them uniformly
        return data.astype(object).where(pd.notna(data), None).to_dict("records")
    return list(data)


def _header_for(name: str) -> str:
    return name.replace("_", " ").title()


def _filter_fn_for_dtype(dtype: pl.DataType) -> str:
    if dtype in _NUMERIC_DTYPES:
        return "in_number_range"
    if dtype == pl.Boolean:
        return "equals"
    if dtype in (pl.Date, pl.Datetime, pl.Time):
        return "equals"
    if isinstance(dtype, pl.List):
        return "arr_includes"
    return "includes_string"


def columns_from_schema(
    schema: Union[pl.Schema, Mapping],
    headers: Optional[Dict[str, str]] = None,
    unsortable: Sequence[str] = (),
) -> List[ColumnDef]:
    """
    Generate column definitions from a polars schema.

    Headers are derived from column names ("unit_price" -> "Unit Price") unless
    given in ``headers``; the filter function follows the column dtype.

    Args:
        schema: polars Schema or mapping of column name to dtype
        headers: Optional header overrides by column name
        unsortable: Column names that must not be sortable

    Returns:
        List of ColumnDef in schema order
    """
    headers = headers or {}
    columns: List[ColumnDef] = []
    for name, dtype in schema.items():
        columns.append(
            ColumnDef(
                id=name,
                header=headers.get(name, _header_for(name)),
                sortable=name not in unsortable and not isinstance(dtype, (pl.List, pl.Struct)),
                filter_fn=_filter_fn_for_dtype(dtype),
            )
        )
    return columns


def columns_from_dataset(
    data: Dataset,
    headers: Optional[Dict[str, str]] = None,
) -> List[ColumnDef]:
    """
    Generate column definitions for a dataset.

    Frames use their schema. Sequences of mappings use the keys of the first
    row with the ``"auto"`` filter function.
    """
    if isinstance(data, pl.LazyFrame):
        return columns_from_schema(data.collect_schema(), headers)
    if isinstance(data, pl.DataFrame):
        return columns_from_schema(data.schema, headers)
    if isinstance(data, pd.DataFrame):
        return _columns_from_pandas(data, headers)

    headers = headers or {}
    rows = list(data)
    if not rows or not isinstance(rows[0], Mapping):
        return []
    return [
        ColumnDef(id=str(name), header=headers.get(str(name), _header_for(str(name))))
        for name in rows[0].keys()
    ]


def _columns_from_pandas(
    data: pd.DataFrame,
    headers: Optional[Dict[str, str]] = None,
) -> List[ColumnDef]:
    headers = headers or {}
    columns: List[ColumnDef] = []
    for name, dtype in data.dtypes.items():
        name = str(name)
        if pd.api.types.is_bool_dtype(dtype):
            filter_fn = "equals"
        elif pd.api.types.is_numeric_dtype(dtype):
            filter_fn = "in_number_range"
        elif pd.api.types.is_datetime64_any_dtype(dtype):
            filter_fn = "equals"
        else:
            filter_fn = "auto"
        columns.append(
            ColumnDef(id=name, header=headers.get(name, _header_for(name)), filter_fn=filter_fn)
        )
    return columns
