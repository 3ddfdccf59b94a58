from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import math
from typing import Any, Callable

from linechart.canvas import Canvas, Stroke, TextPaint, rotated
from linechart.errors import ConfigurationError, DegenerateRangeError, LayoutError, SeriesDataError
from linechart.formatters import DecimalFormatter, Formatter, IntegerFormatter, as_formatter
from linechart.legend import LegendLayout, build_legend_layout
from linechart.scales import (
    AxisTransform,
    PlotRect,
    build_transform,
    floor_to_step,
    int_step_values,
    rotated_extent_45,
    step_values,
)
from linechart.series import SeriesCollection, series_arrays
from linechart.style import ChartConfig, ChartStyle

LOGGER = logging.getLogger(__name__)

MARGIN = 20
X_LABEL_ROTATION_DEG = -45.0


class RendererState(Enum):
    EMPTY = "empty"
    POPULATED = "populated"


@dataclass(frozen=True)
class AxisBinding:
    collection: SeriesCollection
    domain_step: int
    domain_formatter: Formatter
    range_step: float
    range_formatter: Formatter


@dataclass(frozen=True)
class TextPlacement:
    text: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class AxisLabel:
    value: float
    placement: TextPlacement


@dataclass(frozen=True)
class ChartLayout:
    title: TextPlacement
    legend: LegendLayout
    y_label_width: float
    x_label_height: float
    plot: PlotRect
    transform: AxisTransform
    domain_step_px: float
    range_step_px: float
    grid_offset: float
    y_labels: tuple[AxisLabel, ...]
    x_labels: tuple[AxisLabel, ...]


class ChartRenderer:
    """Lays out and draws a multi-series line chart onto a `Canvas`.

    `attach` and `detach` only swap state and ask the host for a redraw through
    `on_invalidate`; all drawing happens in `paint`, which recomputes the full
    layout every time.
    """

    def __init__(
        self,
        title: str = "title",
        domain_title: str = "domain",
        range_title: str = "range",
        style: ChartStyle | None = None,
        *,
        on_invalidate: Callable[[], None] | None = None,
    ) -> None:
        self.title = title
        self.domain_title = domain_title
        self.range_title = range_title
        self.style = style if style is not None else ChartStyle()
        self._on_invalidate = on_invalidate
        self._binding: AxisBinding | None = None
        self._dirty = True

        s = self.style
        self._title_paint = TextPaint(s.title_color, s.title_size, s.font_family)
        self._label_paint = TextPaint(s.label_color, s.label_size, s.font_family)
        self._legend_paint = TextPaint(s.legend_color, s.legend_size, s.font_family)
        self._axis_stroke = Stroke(s.axis_color, s.axis_width)
        self._grid_stroke = Stroke(s.grid_color, s.grid_width)
        self._line_strokes = tuple(Stroke(ss.line_color, s.line_width) for ss in s.series_styles)

    @classmethod
    def from_config(cls, config: ChartConfig, *, on_invalidate: Callable[[], None] | None = None) -> "ChartRenderer":
        return cls(
            title=config.title,
            domain_title=config.domain_title,
            range_title=config.range_title,
            style=config.style,
            on_invalidate=on_invalidate,
        )

    @property
    def state(self) -> RendererState:
        if self._binding is None or self._binding.collection.size == 0:
            return RendererState.EMPTY
        return RendererState.POPULATED

    @property
    def needs_redraw(self) -> bool:
        return self._dirty

    @property
    def binding(self) -> AxisBinding | None:
        return self._binding

    def attach(
        self,
        collection: SeriesCollection,
        domain_step: int = 1,
        domain_formatter: Formatter | Callable[[Any], str] | str | None = None,
        range_step: float = 1.0,
        range_formatter: Formatter | Callable[[Any], str] | str | None = None,
    ) -> None:
        if isinstance(domain_step, bool) or int(domain_step) != domain_step or domain_step <= 0:
            raise ConfigurationError(f"domain step must be a positive integer: {domain_step!r}")
        if not math.isfinite(range_step) or range_step <= 0:
            raise ConfigurationError(f"range step must be a positive number: {range_step!r}")
        binding = AxisBinding(
            collection=collection,
            domain_step=int(domain_step),
            domain_formatter=IntegerFormatter() if domain_formatter is None else as_formatter(domain_formatter),
            range_step=float(range_step),
            range_formatter=DecimalFormatter(range_step) if range_formatter is None else as_formatter(range_formatter),
        )
        self._validate(binding)
        self._binding = binding
        LOGGER.debug("attached %d series (domain step %d, range step %s)", collection.size, binding.domain_step, range_step)
        self._invalidate()

    def detach(self) -> None:
        self._binding = None
        LOGGER.debug("detached series")
        self._invalidate()

    def paint(self, canvas: Canvas) -> None:
        binding = self._binding
        if binding is None or binding.collection.size == 0:
            title = self._place_title(canvas)
            canvas.draw_text(title.text, title.x, title.y, self._title_paint)
            self._dirty = False
            return
        layout = self._compute_layout(canvas, binding)
        self._draw_title(canvas, layout)
        self._draw_legend(canvas, layout)
        self._draw_y_labels(canvas, layout)
        self._draw_x_labels(canvas, layout)
        self._draw_grid(canvas, layout)
        self._draw_series(canvas, layout, binding)
        self._dirty = False

    def layout(self, canvas: Canvas) -> ChartLayout | None:
        binding = self._binding
        if binding is None or binding.collection.size == 0:
            return None
        return self._compute_layout(canvas, binding)

    def _invalidate(self) -> None:
        self._dirty = True
        if self._on_invalidate is not None:
            self._on_invalidate()

    def _validate(self, binding: AxisBinding) -> None:
        count = binding.collection.size
        if count > len(self._line_strokes):
            raise ConfigurationError(
                f"{count} series attached but only {len(self._line_strokes)} series styles configured"
            )
        if count == 0:
            return
        bounds = binding.collection.boundaries
        if not bounds.is_resolved:
            raise SeriesDataError("series collection holds no points to derive boundaries from")
        if bounds.x_max == bounds.x_min:
            raise DegenerateRangeError("x", bounds.x_min)
        if bounds.y_max == bounds.y_min:
            raise DegenerateRangeError("y", bounds.y_min)

    def _place_title(self, canvas: Canvas) -> TextPlacement:
        w, h = canvas.measure_text(self.title, self._title_paint)
        return TextPlacement(self.title, (canvas.width - w) / 2, h, w, h)

    def _compute_layout(self, canvas: Canvas, binding: AxisBinding) -> ChartLayout:
        self._validate(binding)
        collection = binding.collection
        bounds = collection.boundaries
        width = float(canvas.width)
        height = float(canvas.height)

        title = self._place_title(canvas)
        plot_top = title.height + MARGIN

        legend = build_legend_layout(
            collection.titles(),
            canvas_width=width,
            canvas_height=height,
            max_columns=self.style.legend_columns,
            measure=lambda text: canvas.measure_text(text, self._legend_paint),
        )

        def measure_label(text: str) -> tuple[float, float]:
            return canvas.measure_text(text, self._label_paint)

        range_texts = [
            binding.range_formatter.format(v) for v in step_values(bounds.y_min, bounds.y_max, binding.range_step)
        ]
        y_label_width = max((measure_label(t)[0] for t in range_texts), default=0.0) + MARGIN * 2

        domain_values = int_step_values(int(bounds.x_min), int(bounds.x_max), binding.domain_step)
        x_label_height = 0.0
        for v in domain_values:
            h1, h2 = rotated_extent_45(*measure_label(binding.domain_formatter.format(v)))
            x_label_height = max(x_label_height, h1 + h2)
        x_label_height += MARGIN

        plot = PlotRect(left=y_label_width, top=plot_top, right=width, bottom=legend.top - x_label_height)
        if plot.width <= 0 or plot.height <= 0:
            raise LayoutError(f"canvas {canvas.width}x{canvas.height} leaves no room for the plot area")
        transform = build_transform(bounds, plot)

        range_step_px = plot.height * binding.range_step / bounds.y_span
        domain_step_px = plot.width * binding.domain_step / bounds.x_span
        first_step = floor_to_step(bounds.y_max, binding.range_step)
        grid_offset = (bounds.y_max - first_step) / binding.range_step * range_step_px

        y_labels = self._place_y_labels(binding, plot, range_step_px, first_step, grid_offset, measure_label)
        x_labels = []
        for i, v in enumerate(domain_values):
            text = binding.domain_formatter.format(v)
            w, h = measure_label(text)
            h1, h2 = rotated_extent_45(w, h)
            xx = plot.left + i * domain_step_px
            x_labels.append(AxisLabel(float(v), TextPlacement(text, xx - h2 + h1, plot.bottom + h1 + h2, w, h)))

        LOGGER.debug(
            "layout: legend %dx%d, plot (%.1f, %.1f)-(%.1f, %.1f)",
            legend.columns,
            legend.rows,
            plot.left,
            plot.top,
            plot.right,
            plot.bottom,
        )
        return ChartLayout(
            title=title,
            legend=legend,
            y_label_width=y_label_width,
            x_label_height=x_label_height,
            plot=plot,
            transform=transform,
            domain_step_px=domain_step_px,
            range_step_px=range_step_px,
            grid_offset=grid_offset,
            y_labels=tuple(y_labels),
            x_labels=tuple(x_labels),
        )

    def _place_y_labels(
        self,
        binding: AxisBinding,
        plot: PlotRect,
        step_px: float,
        first_step: float,
        offset: float,
        measure: Callable[[str], tuple[float, float]],
    ) -> list[AxisLabel]:
        bounds = binding.collection.boundaries
        step = binding.range_step
        labels: list[AxisLabel] = []

        def place(value: float, y: float) -> float:
            text = binding.range_formatter.format(value)
            w, h = measure(text)
            labels.append(AxisLabel(value, TextPlacement(text, plot.left - w - MARGIN, y + h / 2, w, h)))
            return h

        # Edge labels show the exact extremes; step labels next to them are
        # dropped when they would overlap.
        last_h = place(bounds.y_max, plot.top)
        if offset >= last_h:
            place(first_step, plot.top + offset)
        i = 1
        value = first_step - step
        while value >= bounds.y_min:
            y = plot.top + offset + i * step_px
            if value - step >= bounds.y_min or plot.bottom - y >= last_h:
                last_h = place(value, y)
            i += 1
            value = first_step - i * step
        place(bounds.y_min, plot.bottom)
        return labels

    def _draw_title(self, canvas: Canvas, layout: ChartLayout) -> None:
        title = layout.title
        canvas.draw_text(title.text, title.x, title.y, self._title_paint)

    def _draw_legend(self, canvas: Canvas, layout: ChartLayout) -> None:
        legend = layout.legend
        for cell in legend.cells:
            left, top, right, bottom = legend.swatch_rect(cell)
            canvas.draw_rect(left, top, right, bottom, self._axis_stroke)
            canvas.draw_line(left, bottom, right, top, self._line_strokes[cell.index])
            if cell.text:
                canvas.draw_text(cell.text, right, bottom, self._legend_paint)

    def _draw_y_labels(self, canvas: Canvas, layout: ChartLayout) -> None:
        for label in layout.y_labels:
            p = label.placement
            canvas.draw_text(p.text, p.x, p.y, self._label_paint)

    def _draw_x_labels(self, canvas: Canvas, layout: ChartLayout) -> None:
        for label in layout.x_labels:
            p = label.placement
            with rotated(canvas, X_LABEL_ROTATION_DEG, p.x, p.y):
                canvas.draw_text(p.text, p.x, p.y, self._label_paint)

    def _draw_grid(self, canvas: Canvas, layout: ChartLayout) -> None:
        plot = layout.plot
        i = 0
        y = plot.top + layout.grid_offset
        while y < plot.bottom:
            canvas.draw_line(plot.left, y, plot.right, y, self._grid_stroke)
            i += 1
            y = plot.top + layout.grid_offset + i * layout.range_step_px
        for i in range(len(layout.x_labels)):
            xx = plot.left + i * layout.domain_step_px
            canvas.draw_line(xx, plot.top, xx, plot.bottom, self._grid_stroke)
        canvas.draw_line(plot.left, plot.top, plot.left, plot.bottom, self._axis_stroke)
        canvas.draw_line(plot.left, plot.bottom, plot.right, plot.bottom, self._axis_stroke)

    def _draw_series(self, canvas: Canvas, layout: ChartLayout, binding: AxisBinding) -> None:
        for idx, series in enumerate(binding.collection):
            if series.size < 2:
                continue
            stroke = self._line_strokes[idx]
            xs, ys = series_arrays(series)
            px, py = layout.transform.map_points(xs, ys)
            for i in range(1, px.size):
                if not (math.isfinite(py[i - 1]) and math.isfinite(py[i])):
                    continue
                canvas.draw_line(float(px[i - 1]), float(py[i - 1]), float(px[i]), float(py[i]), stroke)
