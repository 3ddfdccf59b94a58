from __future__ import annotations

from typing import Any, Callable

import numpy as np

from linechart.canvas import RGBA
from linechart.formatters import Formatter
from linechart.raster import RasterCanvas
from linechart.renderer import ChartRenderer
from linechart.series import SeriesCollection
from linechart.style import ChartStyle

LabelFormatter = Formatter | Callable[[Any], str] | str


def render_chart(
    collection: SeriesCollection,
    *,
    width: int,
    height: int,
    domain_step: int = 1,
    range_step: float = 1.0,
    domain_formatter: LabelFormatter | None = None,
    range_formatter: LabelFormatter | None = None,
    title: str = "title",
    style: ChartStyle | None = None,
    background: RGBA = (255, 255, 255, 255),
) -> np.ndarray:
    """Render `collection` onto a fresh raster canvas and return its RGBA pixels.

    `style` must carry one series style per series in `collection`; the default
    style has none, so it only renders an empty collection (title only).
    Otherwise `ConfigurationError` is raised before anything is drawn.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be > 0")
    canvas = RasterCanvas(width, height, background=background)
    renderer = ChartRenderer(title=title, style=style)
    renderer.attach(collection, domain_step, domain_formatter, range_step, range_formatter)
    renderer.paint(canvas)
    return canvas.to_rgba()
