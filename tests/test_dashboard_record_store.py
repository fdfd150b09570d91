from datetime import date

import pytest

from portfolio_dashboard.backend import data_loader
from portfolio_dashboard.backend.models import Category, Position, Snapshot
from portfolio_dashboard.backend.record_store import PortfolioStore


def snap(day: str, total: float) -> Snapshot:
    return Snapshot(date=date.fromisoformat(day), total=total, stocks=total, crypto=0.0)


@pytest.fixture
def store():
    return PortfolioStore(snapshots=[snap("2024-01-15", 3), snap("2024-01-01", 1), snap("2024-01-08", 2)])


def test_snapshots_are_sorted_on_load(store):
    assert [s.total for s in store.snapshots] == [1, 2, 3]


def test_latest_and_previous(store):
    assert store.latest_snapshot().total == 3
    assert store.previous_snapshot().total == 2


def test_latest_on_empty_store():
    empty = PortfolioStore()
    assert empty.latest_snapshot() is None
    assert empty.previous_snapshot() is None
    assert empty.snapshots == ()


def test_add_snapshot_keeps_order(store):
    store.add_snapshot(snap("2024-01-04", 1.5))
    assert [s.date.day for s in store.snapshots] == [1, 4, 8, 15]


def test_editing_a_date_resorts(store):
    store.update_snapshot(0, snap("2024-02-01", 1))
    assert [s.total for s in store.snapshots] == [2, 3, 1]
    assert store.latest_snapshot().date == date(2024, 2, 1)


def test_batch_update_uses_indices_from_before_the_edit(store):
    store.update_snapshots([(0, snap("2024-03-01", 10)), (1, snap("2024-01-02", 20))])
    assert [s.total for s in store.snapshots] == [20, 3, 10]


def test_remove_snapshot(store):
    removed = store.remove_snapshot(1)
    assert removed.total == 2
    assert [s.total for s in store.snapshots] == [1, 3]


def test_views_are_read_only_copies(store):
    view = store.snapshots
    store.add_snapshot(snap("2024-02-01", 4))
    assert len(view) == 3
    with pytest.raises(AttributeError):
        view.append(snap("2024-03-01", 5))


def test_positions_keep_insertion_order():
    store = PortfolioStore()
    store.add_position(Position(Category.CRYPTO, "Bitcoin", "BTC", 1, 1, 1))
    store.add_position(Position(Category.STOCK, "Apple", "AAPL", 1, 1, 1))
    store.update_position(1, Position(Category.STOCK, "Apple", "AAPL", 2, 1, 1))
    assert [p.ticker for p in store.positions] == ["BTC", "AAPL"]
    assert store.positions[1].units == 2
    assert store.remove_position(0).ticker == "BTC"
    assert len(store.positions) == 1


def test_save_and_reload(tmp_path):
    store = PortfolioStore(app_dir=tmp_path)
    store.add_snapshot(snap("2024-01-08", 110))
    store.add_snapshot(snap("2024-01-01", 100))
    store.add_position(Position(Category.STOCK, "Apple", "AAPL", 1.5, 100, 120))
    store.save_snapshots()
    store.save_positions()

    reloaded = PortfolioStore.from_storage(tmp_path)
    assert [s.total for s in reloaded.snapshots] == [100, 110]
    assert reloaded.positions[0].value == pytest.approx(180)
    assert reloaded.app_dir == tmp_path


def test_from_storage_after_bootstrap_is_empty(tmp_path):
    data_loader.ensure_storage(tmp_path)
    store = PortfolioStore.from_storage(tmp_path)
    assert store.snapshots == ()
    assert store.positions == ()
