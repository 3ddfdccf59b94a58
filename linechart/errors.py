from __future__ import annotations


class ChartError(Exception):
    """Base class for errors raised by the chart engine."""


class ConfigurationError(ChartError, ValueError):
    pass


class SeriesDataError(ChartError, ValueError):
    pass


class LayoutError(ChartError):
    pass


class DegenerateRangeError(ChartError, ArithmeticError):
    """An axis spans zero width, so data cannot be mapped to pixels."""

    def __init__(self, axis: str, value: float) -> None:
        super().__init__(f"degenerate {axis} range: min == max == {value!r}")
        self.axis = axis
        self.value = value
