from __future__ import annotations

import math
from pathlib import Path

import numpy as np
import torch
from PIL import Image

from linechart.canvas import RGBA, Stroke, TextPaint
from linechart.compile import compile_frame_tensor
from linechart.raster.draw_lines import draw_segment
from linechart.raster.draw_text import IDENTITY, Affine, draw_text, text_size
from linechart.raster.pixels import fill_rect, new_canvas


def rotation_about(degrees: float, pivot_x: float, pivot_y: float) -> Affine:
    """Rotation about a pivot; positive angles turn clockwise in y-down pixel space."""
    rad = math.radians(degrees)
    cos = math.cos(rad)
    sin = math.sin(rad)
    return (
        cos,
        -sin,
        pivot_x - cos * pivot_x + sin * pivot_y,
        sin,
        cos,
        pivot_y - sin * pivot_x - cos * pivot_y,
    )


def concat(m: Affine, n: Affine) -> Affine:
    """Matrix product m * n (apply n first, then m)."""
    a1, b1, c1, d1, e1, f1 = m
    a2, b2, c2, d2, e2, f2 = n
    return (
        a1 * a2 + b1 * d2,
        a1 * b2 + b1 * e2,
        a1 * c2 + b1 * f2 + c1,
        d1 * a2 + e1 * d2,
        d1 * b2 + e1 * e2,
        d1 * c2 + e1 * f2 + f1,
    )


def _snap_identity(m: Affine) -> Affine:
    if all(abs(v - i) < 1e-9 for v, i in zip(m, IDENTITY)):
        return IDENTITY
    return m


class RasterCanvas:
    """numpy RGBA surface implementing the chart `Canvas` protocol."""

    def __init__(self, width: int, height: int, background: RGBA = (255, 255, 255, 255)) -> None:
        self._pixels = new_canvas(width, height, background)
        self._background = background
        self._matrix: Affine = IDENTITY

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def matrix(self) -> Affine:
        return self._matrix

    def clear(self, color: RGBA | None = None) -> None:
        self._pixels[:, :] = np.asarray(self._background if color is None else color, dtype=np.uint8)
        self._matrix = IDENTITY

    def measure_text(self, text: str, paint: TextPaint) -> tuple[float, float]:
        w, h = text_size(text, font_family=paint.font_family, font_size_px=paint.size_px)
        return (float(w), float(h))

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, stroke: Stroke) -> None:
        ax, ay = self._apply(x0, y0)
        bx, by = self._apply(x1, y1)
        draw_segment(
            self._pixels,
            int(round(ax)),
            int(round(ay)),
            int(round(bx)),
            int(round(by)),
            color=stroke.color,
            width=max(1, int(round(stroke.width))),
        )

    def draw_rect(self, left: float, top: float, right: float, bottom: float, stroke: Stroke) -> None:
        if stroke.fill and self._matrix == IDENTITY:
            fill_rect(self._pixels, int(round(left)), int(round(top)), int(round(right)), int(round(bottom)), stroke.color)
            return
        self.draw_line(left, top, right, top, stroke)
        self.draw_line(right, top, right, bottom, stroke)
        self.draw_line(right, bottom, left, bottom, stroke)
        self.draw_line(left, bottom, left, top, stroke)

    def draw_text(self, text: str, x: float, y: float, paint: TextPaint) -> None:
        draw_text(
            self._pixels,
            x,
            y,
            text,
            paint.color,
            font_family=paint.font_family,
            font_size_px=paint.size_px,
            matrix=self._matrix,
        )

    def rotate(self, degrees: float, pivot_x: float, pivot_y: float) -> None:
        self._matrix = _snap_identity(concat(self._matrix, rotation_about(degrees, pivot_x, pivot_y)))

    def to_rgba(self) -> np.ndarray:
        return self._pixels.copy()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._pixels.copy())

    def save_png(self, path: str | Path) -> Path:
        out = Path(path)
        self.to_image().save(out, format="PNG")
        return out

    def to_tensor(self) -> torch.Tensor:
        return compile_frame_tensor(self._pixels)

    def _apply(self, x: float, y: float) -> tuple[float, float]:
        a, b, c, d, e, f = self._matrix
        return (a * x + b * y + c, d * x + e * y + f)
