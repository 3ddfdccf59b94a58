from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterator

import numpy as np

from linechart.errors import DegenerateRangeError
from linechart.series import Boundaries


SIN_45 = math.sin(math.pi / 4)


@dataclass(frozen=True)
class PlotRect:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass(frozen=True)
class AxisTransform:
    """Affine map from data space onto a plot rectangle (y grows downwards)."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float
    rect: PlotRect

    def screen_x(self, x: float) -> float:
        return self.rect.left + (self.rect.width * (x - self.x_min)) / (self.x_max - self.x_min)

    def screen_y(self, y: float) -> float:
        return self.rect.top + (self.rect.height * (self.y_max - y)) / (self.y_max - self.y_min)

    def map_points(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        px = self.rect.left + (self.rect.width * (xs.astype(np.float64) - self.x_min)) / (self.x_max - self.x_min)
        py = self.rect.top + (self.rect.height * (self.y_max - ys.astype(np.float64))) / (self.y_max - self.y_min)
        return px, py


def build_transform(boundaries: Boundaries, rect: PlotRect) -> AxisTransform:
    if boundaries.x_max == boundaries.x_min:
        raise DegenerateRangeError("x", boundaries.x_min)
    if boundaries.y_max == boundaries.y_min:
        raise DegenerateRangeError("y", boundaries.y_min)
    return AxisTransform(
        x_min=float(boundaries.x_min),
        x_max=float(boundaries.x_max),
        y_min=float(boundaries.y_min),
        y_max=float(boundaries.y_max),
        rect=rect,
    )


def step_values(start: float, stop: float, step: float) -> Iterator[float]:
    """Yield start, start + step, ... up to and including stop."""
    if step <= 0:
        raise ValueError("step must be > 0")
    eps = max(1e-12, step * 1e-9)
    i = 0
    while True:
        value = start + i * step
        if value > stop + eps:
            return
        yield value
        i += 1


def int_step_values(start: int, stop: int, step: int) -> range:
    if step <= 0:
        raise ValueError("step must be > 0")
    return range(int(start), int(stop) + 1, int(step))


def floor_to_step(value: float, step: float) -> float:
    """Largest multiple of `step` that is <= value.

    Values within float drift of a multiple are returned unchanged, so
    `floor_to_step(1.0, 0.1)` is 1.0 rather than 0.9.
    """
    if step <= 0:
        raise ValueError("step must be > 0")
    eps = max(1e-12, step * 1e-9)
    remainder = value % step
    if remainder <= eps or step - remainder <= eps:
        return value
    return value - remainder


def rotated_extent_45(width: float, height: float) -> tuple[float, float]:
    """Vertical contributions of a text box's height and width after a 45 degree turn."""
    return (SIN_45 * height, SIN_45 * width)
