from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from anomaly_rangebar.errors import ChartDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_rows(
    data: Any,
    *,
    timestamp: str | None = None,
    columns: Sequence[str] | None = None,
) -> list[tuple[Any, ...]]:
    """Turn chart input into ``(timestamp, value, ...)`` row tuples.

    Accepts row sequences, 2-D numpy arrays, 2-D torch tensors and pandas
    DataFrames. For a DataFrame, ``timestamp`` names the x column (default:
    the first column) and ``columns`` the value columns in order (default:
    every other column). Datetime columns become epoch seconds.
    """
    if pd is not None and isinstance(data, pd.DataFrame):
        return _rows_from_frame(data, timestamp=timestamp, columns=columns)
    if timestamp is not None or columns is not None:
        raise ChartDataError("timestamp/columns selection requires a pandas DataFrame")

    if torch is not None and isinstance(data, torch.Tensor):
        tensor = data.detach()
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return _rows_from_ndarray(tensor.to(torch.float64).numpy())

    if isinstance(data, np.ndarray):
        return _rows_from_ndarray(data)

    if isinstance(data, (str, bytes, bytearray)):
        raise ChartDataError(f"unsupported chart data type: {type(data)!r}")
    try:
        rows = list(data)
    except TypeError as exc:
        raise ChartDataError(f"unsupported chart data type: {type(data)!r}") from exc
    out: list[tuple[Any, ...]] = []
    for i, row in enumerate(rows):
        if isinstance(row, (str, bytes, bytearray)) or not isinstance(row, Sequence):
            raise ChartDataError(f"row {i} is not a sequence: {row!r}")
        out.append(tuple(_coerce_cell(raw, row=i, column=j) for j, raw in enumerate(row)))
    return out


def _coerce_cell(raw: Any, *, row: int, column: int) -> float | None:
    if raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"row {row} contains non-numeric value at column {column}: {raw!r}") from exc


def _rows_from_ndarray(arr: np.ndarray) -> list[tuple[Any, ...]]:
    if arr.ndim != 2:
        raise ChartDataError(f"array data must be 2-D, got {arr.ndim}-D")
    if arr.shape[1] == 0:
        raise ChartDataError("rows must contain a timestamp")
    if arr.dtype.kind not in {"i", "u", "f", "b"}:
        raise ChartDataError(f"array data must be numeric, got dtype {arr.dtype}")
    return [tuple(row) for row in arr.astype(np.float64, copy=False).tolist()]


def _rows_from_frame(frame: Any, *, timestamp: str | None, columns: Sequence[str] | None) -> list[tuple[Any, ...]]:
    if frame.shape[1] == 0:
        raise ChartDataError("DataFrame has no columns")
    ts_name = frame.columns[0] if timestamp is None else timestamp
    value_names = [c for c in frame.columns if c != ts_name] if columns is None else list(columns)
    for name in [ts_name, *value_names]:
        if name not in frame.columns:
            raise ChartDataError(f"column not found: {name}")

    arrays = [_column_values(frame[name], label=str(name)) for name in [ts_name, *value_names]]
    return [tuple(None if np.isnan(v) else float(v) for v in values) for values in zip(*arrays)]


def _column_values(series: Any, *, label: str) -> np.ndarray:
    if pd.api.types.is_datetime64_any_dtype(series):
        epoch = pd.Timestamp(0, tz=series.dt.tz)
        return ((series - epoch) / pd.Timedelta(seconds=1)).to_numpy(dtype=np.float64, na_value=np.nan)
    if pd.api.types.is_numeric_dtype(series):
        return series.to_numpy(dtype=np.float64, na_value=np.nan)
    raise ChartDataError(f"column {label} is not numeric")
