from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Protocol


RGBA = tuple[int, int, int, int]

DEFAULT_FONT_FAMILY = "DejaVu Sans"


@dataclass(frozen=True)
class Stroke:
    color: RGBA
    width: float = 1.0
    fill: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("Stroke `width` must be > 0")


@dataclass(frozen=True)
class TextPaint:
    color: RGBA
    size_px: float
    font_family: str = DEFAULT_FONT_FAMILY

    def __post_init__(self) -> None:
        if self.size_px <= 0:
            raise ValueError("TextPaint `size_px` must be > 0")


class Canvas(Protocol):
    """Drawing surface consumed by the chart renderer.

    Coordinates are pixels with the origin at the top-left corner. Text is
    positioned by its left baseline point. `rotate` concatenates a rotation
    (positive degrees turn clockwise on screen) about a pivot onto the current
    transform; callers undo it by rotating back by the opposite angle.
    """

    @property
    def width(self) -> int:
        ...

    @property
    def height(self) -> int:
        ...

    def measure_text(self, text: str, paint: TextPaint) -> tuple[float, float]:
        ...

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, stroke: Stroke) -> None:
        ...

    def draw_text(self, text: str, x: float, y: float, paint: TextPaint) -> None:
        ...

    def draw_rect(self, left: float, top: float, right: float, bottom: float, stroke: Stroke) -> None:
        ...

    def rotate(self, degrees: float, pivot_x: float, pivot_y: float) -> None:
        ...


@contextmanager
def rotated(canvas: Canvas, degrees: float, pivot_x: float, pivot_y: float) -> Iterator[Canvas]:
    canvas.rotate(degrees, pivot_x, pivot_y)
    try:
        yield canvas
    finally:
        canvas.rotate(-degrees, pivot_x, pivot_y)
