from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Callable, Sequence

from linechart.errors import ConfigurationError


Measure = Callable[[str], tuple[float, float]]


@dataclass(frozen=True)
class LegendCell:
    index: int
    row: int
    column: int
    text: str
    text_width: float


@dataclass(frozen=True)
class LegendLayout:
    columns: int
    rows: int
    column_width: float
    swatch_size: float
    column_text_widths: tuple[float, ...]
    cells: tuple[LegendCell, ...]
    top: float

    @property
    def height(self) -> float:
        # One spare row of padding below the entries.
        return self.swatch_size * (self.rows + 1)

    def swatch_rect(self, cell: LegendCell) -> tuple[float, float, float, float]:
        dx = (self.column_width - self.column_text_widths[cell.column] - self.swatch_size) / 2
        left = cell.column * self.column_width + dx
        top = self.top + cell.row * self.swatch_size
        return (left, top, left + self.swatch_size, top + self.swatch_size)


def fit_title(title: str, column_width: float, swatch_size: float, measure: Measure) -> tuple[int, float, float]:
    """Shrink `title` one character at a time until it fits beside the swatch.

    Returns the kept length with the width and height of the last measured
    prefix. A title that fits is never shortened.
    """

    length = len(title)
    width, height = measure(title)
    while length > 0 and width + swatch_size >= column_width:
        length -= 1
        if length:
            width, height = measure(title[:length])
        else:
            width = 0.0
    return length, width, height


def build_legend_layout(
    titles: Sequence[str],
    *,
    canvas_width: float,
    canvas_height: float,
    max_columns: int,
    measure: Measure,
) -> LegendLayout:
    if max_columns < 1:
        raise ConfigurationError("legend needs at least one column")
    if not titles:
        return LegendLayout(
            columns=0,
            rows=0,
            column_width=float(canvas_width),
            swatch_size=0.0,
            column_text_widths=(),
            cells=(),
            top=float(canvas_height),
        )
    columns = min(max_columns, len(titles))
    rows = math.ceil(len(titles) / columns)
    column_width = canvas_width / columns
    widths = [0.0] * columns
    swatch = 0.0
    cells: list[LegendCell] = []
    for idx, title in enumerate(titles):
        row, column = divmod(idx, columns)
        length, width, height = fit_title(title, column_width, swatch, measure)
        cells.append(LegendCell(index=idx, row=row, column=column, text=title[:length], text_width=width))
        widths[column] = max(widths[column], width)
        swatch = max(swatch, height)
    return LegendLayout(
        columns=columns,
        rows=rows,
        column_width=column_width,
        swatch_size=swatch,
        column_text_widths=tuple(widths),
        cells=tuple(cells),
        top=canvas_height - swatch * (rows + 1),
    )
