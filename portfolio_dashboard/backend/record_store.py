"""
Record store for the Portfolio Tracker Dashboard
Owns the snapshot and position collections for a session and keeps snapshots sorted by date.
"""

from pathlib import Path
from typing import Iterable, Optional, Tuple

from . import data_loader, models


class PortfolioStore:
    """Single owner of the snapshot and position lists.

    Readers get tuples, never the live lists, so a computation cannot observe
    an edit half way through.
    """

    def __init__(
        self,
        snapshots: Iterable[models.Snapshot] = (),
        positions: Iterable[models.Position] = (),
        app_dir: Optional[Path] = None,
    ):
        self._snapshots = list(snapshots)
        self._positions = list(positions)
        self.app_dir = app_dir
        self._sort_snapshots()

    @classmethod
    def from_storage(cls, app_dir: Optional[Path] = None) -> "PortfolioStore":
        return cls(
            snapshots=data_loader.load_snapshots(app_dir),
            positions=data_loader.load_positions(app_dir),
            app_dir=app_dir,
        )

    def _sort_snapshots(self) -> None:
        self._snapshots.sort(key=lambda s: s.date)

    @property
    def snapshots(self) -> Tuple[models.Snapshot, ...]:
        return tuple(self._snapshots)

    @property
    def positions(self) -> Tuple[models.Position, ...]:
        return tuple(self._positions)

    def latest_snapshot(self) -> Optional[models.Snapshot]:
        return self._snapshots[-1] if self._snapshots else None

    def previous_snapshot(self) -> Optional[models.Snapshot]:
        return self._snapshots[-2] if len(self._snapshots) >= 2 else None

    def add_snapshot(self, snapshot: models.Snapshot) -> None:
        self._snapshots.append(snapshot)
        self._sort_snapshots()

    def update_snapshot(self, index: int, snapshot: models.Snapshot) -> None:
        self.update_snapshots([(index, snapshot)])

    def update_snapshots(self, changes: Iterable[Tuple[int, models.Snapshot]]) -> None:
        """Apply several edits addressed by the current order, then re-sort once."""
        for index, snapshot in changes:
            self._snapshots[index] = snapshot
        self._sort_snapshots()

    def remove_snapshot(self, index: int) -> models.Snapshot:
        return self._snapshots.pop(index)

    def add_position(self, position: models.Position) -> None:
        self._positions.append(position)

    def update_position(self, index: int, position: models.Position) -> None:
        self._positions[index] = position

    def remove_position(self, index: int) -> models.Position:
        return self._positions.pop(index)

    def save_snapshots(self) -> None:
        data_loader.save_snapshots(self._snapshots, self.app_dir)

    def save_positions(self) -> None:
        data_loader.save_positions(self._positions, self.app_dir)
