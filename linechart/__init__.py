from linechart.api import render_chart
from linechart.canvas import Canvas, Stroke, TextPaint, rotated
from linechart.errors import ChartError, ConfigurationError, DegenerateRangeError, LayoutError, SeriesDataError
from linechart.formatters import (
    CallableFormatter,
    DecimalFormatter,
    Formatter,
    IntegerFormatter,
    PatternFormatter,
    TimestampFormatter,
)
from linechart.raster import RasterCanvas
from linechart.renderer import ChartLayout, ChartRenderer, RendererState
from linechart.series import ArraySeries, Boundaries, DataSeries, FunctionSeries, SeriesCollection
from linechart.style import ChartConfig, ChartStyle, SeriesStyle, load_chart_config, validate_chart_style

__all__ = [
    "ArraySeries",
    "Boundaries",
    "CallableFormatter",
    "Canvas",
    "ChartConfig",
    "ChartError",
    "ChartLayout",
    "ChartRenderer",
    "ChartStyle",
    "ConfigurationError",
    "DataSeries",
    "DecimalFormatter",
    "DegenerateRangeError",
    "Formatter",
    "FunctionSeries",
    "IntegerFormatter",
    "LayoutError",
    "PatternFormatter",
    "RasterCanvas",
    "RendererState",
    "SeriesCollection",
    "SeriesDataError",
    "SeriesStyle",
    "Stroke",
    "TextPaint",
    "TimestampFormatter",
    "load_chart_config",
    "render_chart",
    "rotated",
    "validate_chart_style",
]
