"""
Data processing and calculation functions for the Portfolio Tracker Dashboard
Period changes over the snapshot series, position aggregation and input validation.
"""

from datetime import date
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from .. import config
from . import models

TOTAL_TOLERANCE = config.TOTAL_TOLERANCE
CHANGE_PERIODS = config.CHANGE_PERIODS


class PeriodUnit(str, Enum):
    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"

    def shift_back(self, start: date, amount: int) -> date:
        # relativedelta clamps to the last day of shorter months (Mar 31 - 1 month = Feb 28/29).
        try:
            return start - relativedelta(**{self.value: amount})
        except (ValueError, OverflowError):
            # Before year 1; the earliest snapshot is then the nearest one.
            return date.min


def make_delta(now: float, then: float) -> models.Delta:
    diff = now - then
    relative = 0.0 if then == 0 else diff / then
    return models.Delta(absolute=diff, relative=relative)


def nearest_snapshot_index(series: Sequence[models.Snapshot], target: date) -> Optional[int]:
    """Index of the snapshot closest to ``target`` in days.

    Full linear scan; on equal distance the first snapshot seen wins, which for
    an ascending series is the earlier date.
    """
    best_index = None
    best_distance = None
    for idx, snapshot in enumerate(series):
        distance = abs((snapshot.date - target).days)
        if best_distance is None or distance < best_distance:
            best_index = idx
            best_distance = distance
    return best_index


def compute_delta(series: Sequence[models.Snapshot], unit, amount: int) -> Optional[models.Delta]:
    """Change of the latest snapshot against the one nearest to ``amount`` units earlier.

    ``series`` must already be sorted ascending by date. Returns None when the
    series is empty or the nearest snapshot is the latest one itself.
    """
    if not series:
        return None
    unit = PeriodUnit(unit)
    reference_index = len(series) - 1
    reference = series[reference_index]
    target = unit.shift_back(reference.date, amount)
    nearest_index = nearest_snapshot_index(series, target)
    if nearest_index is None or nearest_index == reference_index:
        return None
    return make_delta(reference.total, series[nearest_index].total)


def compute_period_changes(series: Sequence[models.Snapshot]) -> Dict[str, Optional[models.Delta]]:
    frozen = tuple(series)
    return {key: compute_delta(frozen, unit, amount) for key, _label, unit, amount in CHANGE_PERIODS}


def total_value(positions: Sequence[models.Position]) -> float:
    return sum((p.value for p in positions), 0.0)


def total_by_category(positions: Sequence[models.Position], category: models.Category) -> float:
    return sum((p.value for p in positions if p.category == category), 0.0)


def weighted_average_buy_price(positions: Sequence[models.Position]) -> Optional[float]:
    """Unit-weighted buy price; None when there are no units at all."""
    sum_cost = 0.0
    sum_units = 0.0
    for p in positions:
        sum_cost += p.buy_price * p.units
        sum_units += p.units
    if sum_units == 0:
        return None
    return sum_cost / sum_units


def allocation_split(
    snapshots: Sequence[models.Snapshot],
    positions: Sequence[models.Position],
) -> Tuple[float, float]:
    if snapshots:
        latest = snapshots[-1]
        return latest.stocks, latest.crypto
    return (
        total_by_category(positions, models.Category.STOCK),
        total_by_category(positions, models.Category.CRYPTO),
    )


def validate_snapshot_values(total: float, stocks: float, crypto: float) -> models.ValidationResult:
    if total < 0 or stocks < 0 or crypto < 0:
        return models.ValidationResult(models.ValidationStatus.REJECT, "Negative values are not allowed.")
    if abs((stocks + crypto) - total) > TOTAL_TOLERANCE:
        return models.ValidationResult(
            models.ValidationStatus.WARN,
            f"Stocks + crypto ({stocks + crypto:.2f}) differs from total ({total:.2f}).",
        )
    return models.ValidationResult(models.ValidationStatus.OK)


def validate_position_values(units: float, buy_price: float, current_price: float) -> models.ValidationResult:
    if units < 0 or buy_price < 0 or current_price < 0:
        return models.ValidationResult(models.ValidationStatus.REJECT, "Negative values are not allowed.")
    return models.ValidationResult(models.ValidationStatus.OK)
