from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from qplot.errors import PlotDataError
from qplot.series import Series


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_xy(
    y: Any = None,
    *,
    x: Any = None,
    data: Any = None,
    label: str | None = None,
) -> Series:
    """Coerce array-likes into a float64 ``Series`` ready to be plotted.

    ``y`` may be a list, numpy array, torch tensor, pandas Series, a single
    numeric column DataFrame, or a column name when ``data`` is a DataFrame.
    An ``(N, 2)`` array without ``x`` is read as xy pairs. Without ``x`` the
    sample index is used.
    """
    y_values = _resolve_input(y, key="y", data=data)
    if y_values is None:
        raise PlotDataError("y input is required")
    if label is None:
        label = _infer_label(y, y_values)

    if x is None:
        pairs = _split_pairs(y_values)
        if pairs is not None:
            x_arr, y_arr = pairs
        else:
            y_arr = _coerce_1d_numeric(y_values, label="y")
            x_arr = np.arange(y_arr.size, dtype=np.float64)
    else:
        y_arr = _coerce_1d_numeric(y_values, label="y")
        x_values = _resolve_input(x, key="x", data=data)
        x_arr = _coerce_1d_numeric(x_values, label="x")

    if y_arr.size == 0:
        raise PlotDataError("empty series")
    if x_arr.shape != y_arr.shape:
        raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")

    mask = np.isfinite(x_arr) & np.isfinite(y_arr)
    if not np.any(mask):
        raise PlotDataError("series contains no finite points")

    return Series(x=x_arr, y=y_arr, mask=mask, label=label)


def _resolve_input(value: Any, key: str, data: Any) -> Any:
    if data is not None:
        if pd is None:
            raise PlotDataError("pandas is required when using `data=`")
        if not isinstance(data, pd.DataFrame):
            raise PlotDataError("`data` must be a pandas DataFrame")
        if isinstance(value, str):
            if value not in data.columns:
                raise PlotDataError(f"column not found: {value}")
            return data[value]
        if value is None and key == "y":
            return _single_numeric_column(data, "when y is omitted, data must have exactly one numeric column")
        return value

    if pd is not None and isinstance(value, pd.DataFrame):
        return _single_numeric_column(value, "DataFrame input must contain exactly one numeric column")
    return value


def _single_numeric_column(frame: Any, message: str) -> Any:
    numeric_cols = [c for c in frame.columns if bool(pd.api.types.is_numeric_dtype(frame[c]))]
    if len(numeric_cols) != 1:
        raise PlotDataError(message)
    return frame[numeric_cols[0]]


def _infer_label(raw: Any, resolved: Any) -> str | None:
    if isinstance(raw, str):
        return raw
    if pd is not None and isinstance(resolved, pd.Series) and resolved.name is not None:
        return str(resolved.name)
    return None


def _split_pairs(value: Any) -> tuple[np.ndarray, np.ndarray] | None:
    if torch is not None and isinstance(value, torch.Tensor):
        value = value.detach().cpu().to(torch.float64).numpy()
    if not isinstance(value, np.ndarray) or value.ndim != 2:
        return None
    if value.shape[1] != 2:
        raise PlotDataError(f"2-D input must have shape (N, 2), got {value.shape}")
    pairs = _coerce_ndarray(value.reshape(-1), label="xy").reshape(-1, 2)
    return np.ascontiguousarray(pairs[:, 0]), np.ascontiguousarray(pairs[:, 1])


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        arr = np.asarray(value, dtype=object)
        if arr.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(arr, label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


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
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
