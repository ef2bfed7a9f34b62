from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, eq=False)
class Series:
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    label: str | None = None

    @classmethod
    def from_xy(cls, y: Any = None, *, x: Any = None, data: Any = None, label: str | None = None) -> "Series":
        from qplot.adapters.normalize import normalize_xy

        return normalize_xy(y, x=x, data=data, label=label)

    @property
    def size(self) -> int:
        return int(self.x.size)

    def finite_xy(self) -> tuple[np.ndarray, np.ndarray]:
        return self.x[self.mask], self.y[self.mask]

    def gapped_y(self) -> np.ndarray:
        """y with masked samples replaced by NaN, so line renderers break there."""
        return np.where(self.mask, self.y, np.nan)

    def runs(self) -> list[tuple[int, int]]:
        """Half-open index ranges of consecutive finite samples."""
        idx = np.flatnonzero(self.mask)
        if idx.size == 0:
            return []
        runs: list[tuple[int, int]] = []
        start = int(idx[0])
        prev = int(idx[0])
        for v in idx[1:]:
            iv = int(v)
            if iv == prev + 1:
                prev = iv
                continue
            runs.append((start, prev + 1))
            start = iv
            prev = iv
        runs.append((start, prev + 1))
        return runs
