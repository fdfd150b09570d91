"""
Chart geometry for the Portfolio Tracker Dashboard
Projects the snapshot series onto a line-chart viewport and the stocks/crypto split onto donut sweeps.
Everything here is pure; rendering lives in frontend.charts.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from .. import config
from . import models

GRID_LINES = config.GRID_LINES

Point = Tuple[float, float]


@dataclass(frozen=True)
class Viewport:
    """Plot rectangle in pixels, y growing downwards."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @classmethod
    def from_canvas(cls, width: float, height: float, padding: Optional[Dict[str, float]] = None) -> "Viewport":
        padding = padding or {}
        left = padding.get("left", 0)
        top = padding.get("top", 0)
        return cls(
            left=left,
            top=top,
            width=max(width - left - padding.get("right", 0), 0),
            height=max(height - top - padding.get("bottom", 0), 0),
        )


@dataclass(frozen=True)
class LineProjection:
    points: Tuple[Point, ...]
    min_value: float
    max_value: float
    min_date: date
    max_date: date

    @property
    def day_span(self) -> int:
        return max(1, (self.max_date - self.min_date).days)


@dataclass(frozen=True)
class DonutProjection:
    stocks_sweep: float
    crypto_sweep: float
    stocks_value: float
    crypto_value: float

    @property
    def total(self) -> float:
        return self.stocks_value + self.crypto_value

    @property
    def stocks_share(self) -> float:
        return self.stocks_value / self.total

    @property
    def crypto_share(self) -> float:
        return self.crypto_value / self.total


def _x_for(day: date, min_date: date, day_span: int, viewport: Viewport) -> float:
    return viewport.left + ((day - min_date).days / day_span) * viewport.width


def project_line(series: Sequence[models.Snapshot], viewport: Viewport) -> Optional[LineProjection]:
    """Map an ascending snapshot series to pixel points inside ``viewport``.

    Returns None for an empty series. A flat series gets its value range widened
    by one so the vertical divisor never becomes zero; the day span is floored
    to one day for the same reason on the horizontal axis.
    """
    if not series:
        return None

    values = [s.total for s in series]
    min_value = min(values)
    max_value = max(values)
    if min_value == max_value:
        max_value = min_value + 1
    value_range = max_value - min_value

    min_date = series[0].date
    max_date = series[-1].date
    day_span = max(1, (max_date - min_date).days)

    points = []
    for snapshot in series:
        x = _x_for(snapshot.date, min_date, day_span, viewport)
        norm = (snapshot.total - min_value) / value_range
        y = viewport.bottom - norm * viewport.height
        points.append((x, y))

    return LineProjection(
        points=tuple(points),
        min_value=min_value,
        max_value=max_value,
        min_date=min_date,
        max_date=max_date,
    )


def value_gridlines(projection: LineProjection, viewport: Viewport, count: int = GRID_LINES) -> List[Tuple[float, float]]:
    """(y, value) pairs for ``count + 1`` evenly spaced horizontal gridlines, bottom first."""
    lines = []
    for i in range(count + 1):
        y = viewport.bottom - i * viewport.height / count
        value = projection.min_value + i * (projection.max_value - projection.min_value) / count
        lines.append((y, value))
    return lines


def date_labels(projection: LineProjection, viewport: Viewport) -> List[Tuple[float, date]]:
    """(x, date) for the first, middle and last date of the series."""
    span = projection.day_span
    mid_date = projection.min_date + timedelta(days=span // 2)
    return [
        (_x_for(day, projection.min_date, span, viewport), day)
        for day in (projection.min_date, mid_date, projection.max_date)
    ]


def svg_path(points: Sequence[Point]) -> str:
    if not points:
        return ""
    head, *tail = points
    parts = [f"M {head[0]:.2f},{head[1]:.2f}"]
    parts.extend(f"L {x:.2f},{y:.2f}" for x, y in tail)
    return " ".join(parts)


def project_donut(stocks: float, crypto: float) -> Optional[DonutProjection]:
    """Split 360 degrees between stocks and crypto.

    Negative inputs count as zero. The crypto sweep is derived by subtraction so
    the two sweeps always add up to exactly 360.
    """
    stocks = max(0.0, stocks)
    crypto = max(0.0, crypto)
    total = stocks + crypto
    if total <= 0:
        return None
    stocks_sweep = 360.0 * (stocks / total)
    return DonutProjection(
        stocks_sweep=stocks_sweep,
        crypto_sweep=360.0 - stocks_sweep,
        stocks_value=stocks,
        crypto_value=crypto,
    )
