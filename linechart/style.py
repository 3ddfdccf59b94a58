from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping, Sequence

from linechart.canvas import DEFAULT_FONT_FAMILY, RGBA
from linechart.errors import ConfigurationError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

NAMED_COLORS: dict[str, RGBA] = {
    "black": (0, 0, 0, 255),
    "darkgray": (68, 68, 68, 255),
    "darkgrey": (68, 68, 68, 255),
    "gray": (136, 136, 136, 255),
    "grey": (136, 136, 136, 255),
    "lightgray": (204, 204, 204, 255),
    "lightgrey": (204, 204, 204, 255),
    "white": (255, 255, 255, 255),
    "red": (255, 0, 0, 255),
    "green": (0, 255, 0, 255),
    "blue": (0, 0, 255, 255),
    "yellow": (255, 255, 0, 255),
    "cyan": (0, 255, 255, 255),
    "magenta": (255, 0, 255, 255),
    "aqua": (0, 255, 255, 255),
    "fuchsia": (255, 0, 255, 255),
    "lime": (0, 255, 0, 255),
    "maroon": (128, 0, 0, 255),
    "navy": (0, 0, 128, 255),
    "olive": (128, 128, 0, 255),
    "purple": (128, 0, 128, 255),
    "silver": (192, 192, 192, 255),
    "teal": (0, 128, 128, 255),
}

BLACK: RGBA = NAMED_COLORS["black"]
GRAY: RGBA = NAMED_COLORS["gray"]


def parse_color(value: str | Sequence[int]) -> RGBA:
    """Parse `#RRGGBB`, `#RRGGBBAA`, a color name or an RGB(A) tuple."""
    if isinstance(value, str):
        text = value.strip()
        named = NAMED_COLORS.get(text.lower())
        if named is not None:
            return named
        if not _HEX_COLOR.match(text):
            raise ConfigurationError(f"unknown color: {value!r}")
        r, g, b = (int(text[i : i + 2], 16) for i in (1, 3, 5))
        a = int(text[7:9], 16) if len(text) == 9 else 255
        return (r, g, b, a)
    if not isinstance(value, Sequence):
        raise ConfigurationError(f"unknown color: {value!r}")
    parts = tuple(value)
    if len(parts) not in (3, 4) or not all(isinstance(p, int) and 0 <= p <= 255 for p in parts):
        raise ConfigurationError(f"color tuple must hold 3 or 4 ints in [0, 255]: {value!r}")
    if len(parts) == 3:
        return (parts[0], parts[1], parts[2], 255)
    return (parts[0], parts[1], parts[2], parts[3])


@dataclass(frozen=True)
class SeriesStyle:
    line_color: RGBA
    point_color: RGBA


def parse_series_style(value: str) -> SeriesStyle:
    """Parse a `"<line color>,<point color>"` pair."""
    colors = value.split(",")
    if len(colors) != 2:
        raise ConfigurationError(f"series style must be `line,point`: {value!r}")
    return SeriesStyle(line_color=parse_color(colors[0]), point_color=parse_color(colors[1]))


_COLOR_KEYS = ("title_color", "label_color", "legend_color", "axis_color", "grid_color")
_SIZE_KEYS = ("title_size", "label_size", "legend_size", "axis_width", "grid_width", "line_width")


@dataclass(frozen=True)
class ChartStyle:
    """Resolved colors, sizes and per-series styles for one chart.

    Colors may be given as anything `parse_color` accepts and series styles as
    `SeriesStyle` values or `"line,point"` strings; both are normalised on
    construction. Malformed values raise `ConfigurationError`.
    """

    title_color: RGBA = BLACK
    title_size: float = 50.0
    label_color: RGBA = BLACK
    label_size: float = 50.0
    legend_color: RGBA = BLACK
    legend_size: float = 50.0
    legend_columns: int = 2
    series_styles: tuple[SeriesStyle, ...] = ()
    font_family: str = DEFAULT_FONT_FAMILY
    axis_color: RGBA = BLACK
    axis_width: float = 3.0
    grid_color: RGBA = GRAY
    grid_width: float = 2.0
    line_width: float = 3.0

    def __post_init__(self) -> None:
        for key in _COLOR_KEYS:
            object.__setattr__(self, key, parse_color(getattr(self, key)))

        for key in _SIZE_KEYS:
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or float(value) <= 0:
                raise ConfigurationError(f"Option `{key}` must be a positive number")
            object.__setattr__(self, key, float(value))

        columns = self.legend_columns
        if isinstance(columns, bool) or not isinstance(columns, int) or columns < 1:
            raise ConfigurationError("Option `legend_columns` must be an integer >= 1")

        if not isinstance(self.font_family, str) or not self.font_family.strip():
            raise ConfigurationError("Option `font_family` must be a non-empty string")

        styles = self.series_styles
        if isinstance(styles, str) or not isinstance(styles, Sequence):
            raise ConfigurationError("Option `series_styles` must be a list")
        object.__setattr__(
            self,
            "series_styles",
            tuple(s if isinstance(s, SeriesStyle) else parse_series_style(str(s)) for s in styles),
        )


DEFAULT_STYLE = ChartStyle()


def validate_chart_style(overrides: Mapping[str, Any] | None = None) -> ChartStyle:
    """Merge overrides onto the default style, rejecting unknown or malformed values.

    `line_colors` is accepted as an alias for `series_styles`.
    """

    raw: dict[str, Any] = {f.name: getattr(DEFAULT_STYLE, f.name) for f in fields(ChartStyle)}
    if overrides:
        for key, value in overrides.items():
            if key == "line_colors":
                key = "series_styles"
            if key not in raw:
                raise ConfigurationError(f"Unknown style option: {key}")
            raw[key] = value
    return ChartStyle(**raw)


@dataclass(frozen=True)
class ChartConfig:
    title: str = "title"
    domain_title: str = "domain"
    range_title: str = "range"
    style: ChartStyle = field(default_factory=ChartStyle)


def load_chart_config(path: str | Path) -> ChartConfig:
    """Load a chart configuration from a TOML file.

    Titles live in a `[chart]` table and style options in a `[style]` table::

        [chart]
        title = "Weekly load"

        [style]
        legend_columns = 3
        line_colors = ["#ff0000,#aa0000", "blue,navy"]
    """

    with Path(path).open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"invalid chart config {path}: {exc}") from exc
    unknown = set(raw) - {"chart", "style"}
    if unknown:
        raise ConfigurationError(f"Unknown config table: {sorted(unknown)[0]}")
    chart = raw.get("chart", {})
    defaults = ChartConfig()
    titles: dict[str, str] = {}
    for key, value in chart.items():
        if key not in ("title", "domain_title", "range_title"):
            raise ConfigurationError(f"Unknown chart option: {key}")
        if not isinstance(value, str):
            raise ConfigurationError(f"Option `{key}` must be a string")
        titles[key] = value
    return ChartConfig(
        title=titles.get("title", defaults.title),
        domain_title=titles.get("domain_title", defaults.domain_title),
        range_title=titles.get("range_title", defaults.range_title),
        style=validate_chart_style(raw.get("style")),
    )
