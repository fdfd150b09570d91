"""
Data models for the Portfolio Tracker Dashboard
Snapshots, positions and the derived values computed from them.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class Category(str, Enum):
    STOCK = "STOCK"
    CRYPTO = "CRYPTO"

    @property
    def label(self) -> str:
        return "Stock" if self is Category.STOCK else "Crypto"


@dataclass(frozen=True)
class Snapshot:
    date: date
    total: float
    stocks: float
    crypto: float


@dataclass(frozen=True)
class Position:
    category: Category
    name: str
    ticker: str
    units: float
    buy_price: float
    current_price: float

    @property
    def value(self) -> float:
        return self.units * self.current_price

    @property
    def pnl_percent(self) -> float:
        """Relative gain as a fraction; 0 when there is no buy price."""
        if self.buy_price == 0:
            return 0.0
        return (self.current_price - self.buy_price) / self.buy_price

    @property
    def pnl(self) -> float:
        return (self.current_price - self.buy_price) * self.units


@dataclass(frozen=True)
class Delta:
    absolute: float
    relative: float


class ValidationStatus(str, Enum):
    OK = "ok"
    WARN = "warn"
    REJECT = "reject"


@dataclass(frozen=True)
class ValidationResult:
    status: ValidationStatus
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ValidationStatus.OK

    @property
    def needs_confirmation(self) -> bool:
        return self.status is ValidationStatus.WARN

    @property
    def rejected(self) -> bool:
        return self.status is ValidationStatus.REJECT
