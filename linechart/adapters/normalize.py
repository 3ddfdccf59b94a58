from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import numpy as np
import torch

from linechart.errors import SeriesDataError
from linechart.series import ArraySeries


try:
    import pandas as pd
except ImportError:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


def series_from_values(
    y: Any = None,
    *,
    x: Any = None,
    data: Any = None,
    title: str | None = None,
) -> ArraySeries:
    """Build an `ArraySeries` from lists, numpy arrays, pandas columns or torch tensors.

    With `data` (a DataFrame), `x` and `y` may name columns. Missing x values
    default to 0..n-1. The title falls back to the y column name when known.
    """

    y_values = _resolve_input(y, key="y", data=data)
    if y_values is None:
        raise SeriesDataError("y input is required")
    if title is None:
        title = _column_title(y_values)

    y_arr = _coerce_1d_numeric(y_values, label="y")
    if y_arr.size == 0:
        raise SeriesDataError("empty series")

    if x is None:
        x_arr = np.arange(y_arr.size, dtype=np.int64)
    else:
        x_values = _resolve_input(x, key="x", data=data)
        x_float = _coerce_1d_numeric(x_values, label="x")
        if not np.all(np.isfinite(x_float)):
            raise SeriesDataError("x contains non-finite values")
        x_arr = x_float.astype(np.int64)
        if not np.array_equal(x_arr.astype(np.float64), x_float):
            raise SeriesDataError("x values must be integers")

    if x_arr.shape != y_arr.shape:
        raise SeriesDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")

    return ArraySeries(title=title if title is not None else "", x_values=x_arr, y_values=y_arr)


def _column_title(values: Any) -> str | None:
    if pd is not None and isinstance(values, pd.Series) and values.name is not None:
        return str(values.name)
    return None


def _resolve_input(value: Any, key: str, data: Any) -> Any:
    if data is not None:
        if pd is None:
            raise SeriesDataError("pandas is required when using `data=`")
        if not isinstance(data, pd.DataFrame):
            raise SeriesDataError("`data` must be a pandas DataFrame")
        if isinstance(value, str):
            if value not in data.columns:
                raise SeriesDataError(f"column not found: {value}")
            return data[value]
        if value is None and key == "y":
            numeric_cols = [c for c in data.columns if pd.api.types.is_numeric_dtype(data[c])]
            if len(numeric_cols) != 1:
                raise SeriesDataError("when y is omitted, data must have exactly one numeric column")
            return data[numeric_cols[0]]
        return value

    if pd is not None and isinstance(value, pd.DataFrame):
        numeric_cols = [c for c in value.columns if pd.api.types.is_numeric_dtype(value[c])]
        if len(numeric_cols) != 1:
            raise SeriesDataError("DataFrame input must contain exactly one numeric column")
        return value[numeric_cols[0]]

    return value


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise SeriesDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise SeriesDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        arr = np.asarray(value, dtype=object)
        if arr.ndim != 1:
            raise SeriesDataError(f"{label} must be 1-D")
        return _coerce_ndarray(arr, label=label)

    raise SeriesDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise SeriesDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
