from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
import math
from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class Formatter(Protocol):
    def format(self, value: Any) -> str:
        ...


class IntegerFormatter:
    def format(self, value: Any) -> str:
        return str(int(value))


class DecimalFormatter:
    """Fixed-decimal labels derived from the axis step, trailing zeros trimmed."""

    def __init__(self, step: float | None = None) -> None:
        self.step = step

    def format(self, value: Any) -> str:
        return format_tick(float(value), step=self.step)


class PatternFormatter:
    def __init__(self, pattern: str) -> None:
        self.pattern = pattern

    def format(self, value: Any) -> str:
        return self.pattern.format(value)


_UNIT_SECONDS = {"s": 1, "ms": 1e-3, "min": 60, "h": 3600, "d": 86400}


class TimestampFormatter:
    """Formats integer offsets from the Unix epoch as dates."""

    def __init__(self, pattern: str = "%Y-%m-%d", *, unit: str = "s", tz: timezone = timezone.utc) -> None:
        if unit not in _UNIT_SECONDS:
            raise ValueError(f"unknown timestamp unit: {unit}")
        self.pattern = pattern
        self.unit = unit
        self.tz = tz

    def format(self, value: Any) -> str:
        epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        moment = epoch + timedelta(seconds=float(value) * _UNIT_SECONDS[self.unit])
        return moment.astimezone(self.tz).strftime(self.pattern)


class CallableFormatter:
    def __init__(self, func: Callable[[Any], str]) -> None:
        self.func = func

    def format(self, value: Any) -> str:
        return str(self.func(value))


def as_formatter(value: Formatter | Callable[[Any], str] | str) -> Formatter:
    if isinstance(value, str):
        return PatternFormatter(value)
    if isinstance(value, Formatter):
        return value
    if callable(value):
        return CallableFormatter(value)
    raise TypeError(f"cannot use {type(value)!r} as a label formatter")


# Magnitudes outside these bounds are labelled in scientific notation.
SCIENTIFIC_ABOVE = 1e6
SCIENTIFIC_BELOW = 1e-6
SCIENTIFIC_BELOW_STEP = 1e-4


def format_tick(value: float, *, step: float | None = None) -> str:
    if not math.isfinite(value):
        return str(value)
    if step is not None and math.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    tiny_step = step is not None and abs(step) < SCIENTIFIC_BELOW_STEP
    if abs_v != 0 and (abs_v >= SCIENTIFIC_ABOVE or abs_v < SCIENTIFIC_BELOW or tiny_step):
        return f"{value:.4e}"
    decimals = _decimals_from_step(step) if step is not None else 6

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not math.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
