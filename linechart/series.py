from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Callable, Iterator, Protocol, Sequence, runtime_checkable

import numpy as np

from linechart.errors import ConfigurationError, SeriesDataError


DEGENERATE_Y_EPSILON = 0.1


@runtime_checkable
class DataSeries(Protocol):
    """Indexable source of (x, y) points with a display title."""

    @property
    def title(self) -> str:
        ...

    @property
    def size(self) -> int:
        ...

    def x(self, i: int) -> int:
        ...

    def y(self, i: int) -> float:
        ...


@dataclass(frozen=True, eq=False)
class ArraySeries:
    title: str
    x_values: np.ndarray
    y_values: np.ndarray

    def __post_init__(self) -> None:
        xs = np.asarray(self.x_values, dtype=np.int64)
        ys = np.asarray(self.y_values, dtype=np.float64)
        if xs.ndim != 1 or ys.ndim != 1:
            raise SeriesDataError("x and y must be 1-D")
        if xs.shape != ys.shape:
            raise SeriesDataError(f"x and y length mismatch: {xs.size} != {ys.size}")
        object.__setattr__(self, "x_values", xs)
        object.__setattr__(self, "y_values", ys)

    @property
    def size(self) -> int:
        return int(self.x_values.size)

    def x(self, i: int) -> int:
        return int(self.x_values[i])

    def y(self, i: int) -> float:
        return float(self.y_values[i])


class FunctionSeries:
    """Series whose y values are computed on access from its x values."""

    def __init__(self, title: str, x_values: Sequence[int], func: Callable[[int], float]) -> None:
        self._title = title
        self._x_values = x_values
        self._func = func

    @property
    def title(self) -> str:
        return self._title

    @property
    def size(self) -> int:
        return len(self._x_values)

    def x(self, i: int) -> int:
        return int(self._x_values[i])

    def y(self, i: int) -> float:
        return float(self._func(self.x(i)))


def series_arrays(series: DataSeries) -> tuple[np.ndarray, np.ndarray]:
    if isinstance(series, ArraySeries):
        return series.x_values, series.y_values
    n = series.size
    xs = np.fromiter((series.x(i) for i in range(n)), dtype=np.int64, count=n)
    ys = np.fromiter((series.y(i) for i in range(n)), dtype=np.float64, count=n)
    return xs, ys


@dataclass(frozen=True)
class Boundaries:
    x_min: float = math.inf
    x_max: float = -math.inf
    y_min: float = math.inf
    y_max: float = -math.inf
    x_fixed: bool = False
    y_fixed: bool = False
    y_adjusted: bool = False

    @property
    def is_resolved(self) -> bool:
        return all(math.isfinite(v) for v in (self.x_min, self.x_max, self.y_min, self.y_max))

    @property
    def x_span(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_span(self) -> float:
        return self.y_max - self.y_min


def extend_boundaries(boundaries: Boundaries, series: DataSeries) -> Boundaries:
    """Return boundaries widened to cover `series` on every non-pinned axis."""
    if boundaries.x_fixed and boundaries.y_fixed:
        return boundaries
    xs, ys = series_arrays(series)
    out = boundaries
    if not out.x_fixed and xs.size > 0:
        out = replace(
            out,
            x_min=min(out.x_min, int(np.min(xs))),
            x_max=max(out.x_max, int(np.max(xs))),
        )
    if not out.y_fixed:
        finite = ys[np.isfinite(ys)]
        if finite.size > 0:
            out = replace(
                out,
                y_min=min(out.y_min, float(np.min(finite))),
                y_max=max(out.y_max, float(np.max(finite))),
            )
        if not out.y_adjusted and math.isfinite(out.y_min) and out.y_min == out.y_max:
            out = replace(
                out,
                y_min=out.y_min - DEGENERATE_Y_EPSILON,
                y_max=out.y_max + DEGENERATE_Y_EPSILON,
                y_adjusted=True,
            )
    return out


class SeriesCollection:
    """Ordered data series sharing one set of axis boundaries.

    Insertion order is draw order and legend order. Boundaries are either
    pinned with `set_x_boundaries` / `set_y_boundaries` or widened from the
    points of each series as it is added.
    """

    def __init__(self) -> None:
        self._series: list[DataSeries] = []
        self._boundaries = Boundaries()

    def set_x_boundaries(self, lower: int, upper: int) -> None:
        if lower > upper:
            raise ConfigurationError(f"x boundaries are inverted: {lower} > {upper}")
        self._boundaries = replace(self._boundaries, x_min=int(lower), x_max=int(upper), x_fixed=True)

    def set_y_boundaries(self, lower: float, upper: float) -> None:
        if lower > upper:
            raise ConfigurationError(f"y boundaries are inverted: {lower} > {upper}")
        self._boundaries = replace(self._boundaries, y_min=float(lower), y_max=float(upper), y_fixed=True)

    def add_series(self, series: DataSeries) -> Boundaries:
        self._series.append(series)
        self._boundaries = extend_boundaries(self._boundaries, series)
        return self._boundaries

    def titles(self) -> list[str]:
        return [s.title for s in self._series]

    @property
    def size(self) -> int:
        return len(self._series)

    def __len__(self) -> int:
        return len(self._series)

    def __iter__(self) -> Iterator[DataSeries]:
        return iter(self._series)

    @property
    def boundaries(self) -> Boundaries:
        return self._boundaries

    @property
    def x_min(self) -> float:
        return self._boundaries.x_min

    @property
    def x_max(self) -> float:
        return self._boundaries.x_max

    @property
    def y_min(self) -> float:
        return self._boundaries.y_min

    @property
    def y_max(self) -> float:
        return self._boundaries.y_max
