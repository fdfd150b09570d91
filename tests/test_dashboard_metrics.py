from datetime import date

import pytest

from portfolio_dashboard.backend import data_processor
from portfolio_dashboard.backend.models import Category, Position, Snapshot, ValidationStatus


def snap(day: str, total: float, stocks: float = 0.0, crypto: float = 0.0) -> Snapshot:
    return Snapshot(date=date.fromisoformat(day), total=total, stocks=stocks, crypto=crypto)


def pos(units: float, buy: float, current: float = 0.0, category: Category = Category.STOCK) -> Position:
    return Position(category=category, name="", ticker="", units=units, buy_price=buy, current_price=current)


def test_week_delta_on_two_weekly_snapshots():
    series = [snap("2024-01-01", 100), snap("2024-01-08", 110)]
    delta = data_processor.compute_delta(series, "days", 7)
    assert delta.absolute == pytest.approx(10)
    assert delta.relative == pytest.approx(0.10)


def test_empty_series_has_no_delta():
    assert data_processor.compute_delta([], "days", 7) is None


@pytest.mark.parametrize("unit, amount", [("days", 7), ("months", 1), ("years", 1), ("days", 0), ("years", 5)])
def test_single_snapshot_has_no_delta(unit, amount):
    assert data_processor.compute_delta([snap("2024-01-08", 110)], unit, amount) is None


@pytest.mark.parametrize("unit, amount", [("days", 7), ("months", 1), ("years", 1), ("days", 365)])
def test_two_or_more_snapshots_always_yield_a_delta(unit, amount):
    series = [snap("2023-05-01", 50), snap("2024-01-02", 80), snap("2024-01-08", 110)]
    assert data_processor.compute_delta(series, unit, amount) is not None


def test_delta_against_itself_is_absent():
    series = [snap("2024-01-01", 100), snap("2024-01-08", 110)]
    assert data_processor.compute_delta(series, "days", 0) is None


def test_equidistant_candidates_pick_the_earlier_one():
    # Target is 2024-01-02; 01-01 and 01-03 are both one day away.
    series = [snap("2024-01-01", 100), snap("2024-01-03", 200), snap("2024-01-09", 300)]
    assert data_processor.nearest_snapshot_index(series, date(2024, 1, 2)) == 0
    delta = data_processor.compute_delta(series, "days", 7)
    assert delta.absolute == pytest.approx(200)
    assert delta.relative == pytest.approx(2.0)


def test_month_delta_uses_calendar_months():
    # 2024-03-31 minus one month is 2024-02-29, not 30 days back (2024-03-01).
    series = [snap("2024-02-29", 100), snap("2024-03-01", 120), snap("2024-03-31", 150)]
    delta = data_processor.compute_delta(series, data_processor.PeriodUnit.MONTHS, 1)
    assert delta.absolute == pytest.approx(50)
    assert delta.relative == pytest.approx(0.5)


def test_year_delta_from_leap_day():
    series = [snap("2023-02-28", 80), snap("2023-03-01", 90), snap("2024-02-29", 100)]
    delta = data_processor.compute_delta(series, "years", 1)
    assert delta.absolute == pytest.approx(20)
    assert delta.relative == pytest.approx(0.25)


def test_zero_baseline_gives_zero_relative_change():
    series = [snap("2024-01-01", 0), snap("2024-01-08", 50)]
    delta = data_processor.compute_delta(series, "days", 7)
    assert delta.absolute == pytest.approx(50)
    assert delta.relative == 0


def test_unknown_unit_is_rejected():
    with pytest.raises(ValueError):
        data_processor.compute_delta([snap("2024-01-01", 1), snap("2024-01-08", 2)], "weeks", 1)


def test_period_changes_keys():
    series = [snap("2023-01-08", 50), snap("2023-12-08", 100), snap("2024-01-01", 100), snap("2024-01-08", 110)]
    changes = data_processor.compute_period_changes(series)
    assert set(changes) == {"week", "month", "year"}
    assert changes["week"].absolute == pytest.approx(10)
    assert changes["month"].absolute == pytest.approx(10)
    assert changes["year"].absolute == pytest.approx(60)


def test_period_changes_on_empty_series():
    assert data_processor.compute_period_changes([]) == {"week": None, "month": None, "year": None}


def test_weighted_average_buy_price():
    positions = [pos(units=2, buy=10), pos(units=3, buy=20)]
    assert data_processor.weighted_average_buy_price(positions) == pytest.approx(16)


def test_weighted_average_buy_price_without_units_is_no_data():
    assert data_processor.weighted_average_buy_price([pos(units=0, buy=10)]) is None
    assert data_processor.weighted_average_buy_price([]) is None


def test_totals_by_category():
    positions = [
        pos(units=2, buy=10, current=15),
        pos(units=0.5, buy=100, current=200, category=Category.CRYPTO),
        pos(units=1, buy=5, current=5),
    ]
    assert data_processor.total_value(positions) == pytest.approx(135)
    assert data_processor.total_by_category(positions, Category.STOCK) == pytest.approx(35)
    assert data_processor.total_by_category(positions, Category.CRYPTO) == pytest.approx(100)
    assert data_processor.total_value([]) == 0


def test_position_derived_values():
    p = pos(units=4, buy=10, current=12)
    assert p.value == pytest.approx(48)
    assert p.pnl_percent == pytest.approx(0.2)
    assert p.pnl == pytest.approx(8)
    assert pos(units=4, buy=0, current=12).pnl_percent == 0


def test_allocation_prefers_latest_snapshot():
    series = [snap("2024-01-01", 100, 70, 30), snap("2024-01-08", 110, 60, 50)]
    positions = [pos(units=1, buy=1, current=999)]
    assert data_processor.allocation_split(series, positions) == (60, 50)


def test_allocation_falls_back_to_positions():
    positions = [pos(units=2, buy=1, current=10), pos(units=1, buy=1, current=5, category=Category.CRYPTO)]
    assert data_processor.allocation_split([], positions) == (20, 5)


def test_snapshot_validation():
    assert data_processor.validate_snapshot_values(100, 60, 40).status is ValidationStatus.OK
    assert data_processor.validate_snapshot_values(100, 60, 40.005).ok

    warn = data_processor.validate_snapshot_values(100, 60, 30)
    assert warn.needs_confirmation
    assert "differs" in warn.reason

    reject = data_processor.validate_snapshot_values(100, -1, 101)
    assert reject.rejected


def test_position_validation():
    assert data_processor.validate_position_values(1, 2, 3).ok
    assert data_processor.validate_position_values(-1, 2, 3).rejected


def test_period_reaching_before_year_one_uses_earliest_snapshot():
    series = [snap("2024-01-01", 100), snap("2024-01-08", 110)]
    assert data_processor.PeriodUnit.YEARS.shift_back(date(2024, 1, 8), 10000) == date.min
    delta = data_processor.compute_delta(series, "years", 10000)
    assert delta.absolute == pytest.approx(10)
    assert data_processor.compute_delta(series, "days", 10 ** 9).absolute == pytest.approx(10)
