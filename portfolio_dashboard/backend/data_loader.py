"""
Data loading functions for the Portfolio Tracker Dashboard
Handles the flat CSV files for snapshots and positions and the parsing of user input.
"""

import math
import re
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from . import models
from .. import config
from ..logging_setup import get_logger

APP_DIR = config.APP_DIR
SNAPSHOTS_FILE = config.SNAPSHOTS_FILE
POSITIONS_FILE = config.POSITIONS_FILE
SNAPSHOT_COLUMNS = config.SNAPSHOT_COLUMNS
POSITION_COLUMNS = config.POSITION_COLUMNS
DATE_FORMAT = config.DATE_FORMAT

_GROUPED_THOUSANDS = re.compile(r"^[+-]?\d{1,3}(\.\d{3})+$")

logger = get_logger(__name__)


class StorageError(Exception):
    """Raised when the storage directory or one of its files cannot be read or written."""


def parse_number(value) -> float:
    """Parse a user or file supplied number.

    Accepts the German convention ("1.234,56") as well as plain decimals
    ("1234.56"). Blank input is 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        if math.isnan(number):
            return 0.0
        if math.isinf(number):
            raise ValueError(f"Not a finite number: {value!r}")
        return number

    text = str(value).strip().replace(config.CURRENCY_SYMBOL, "")
    text = text.replace("\u00a0", "").replace(" ", "")
    if not text:
        return 0.0
    if config.DECIMAL_SEPARATOR in text:
        text = text.replace(config.THOUSANDS_SEPARATOR, "").replace(config.DECIMAL_SEPARATOR, ".")
    elif _GROUPED_THOUSANDS.match(text):
        text = text.replace(config.THOUSANDS_SEPARATOR, "")
    try:
        number = float(text)
    except ValueError:
        raise ValueError(f"Not a number: {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"Not a finite number: {value!r}")
    return number


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"Invalid date {text!r}, expected YYYY-MM-DD") from None


def parse_category(value) -> models.Category:
    if isinstance(value, models.Category):
        return value
    text = str(value or "").strip().upper()
    for category in models.Category:
        if text in (category.value, category.label.upper()):
            return category
    raise ValueError(f"Unknown category {value!r}")


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_snapshot_row(snapshot: models.Snapshot) -> Dict[str, str]:
    digits = config.MONEY_DECIMALS
    return {
        "date": format_date(snapshot.date),
        "total": f"{snapshot.total:.{digits}f}",
        "stocks": f"{snapshot.stocks:.{digits}f}",
        "crypto": f"{snapshot.crypto:.{digits}f}",
    }


def format_position_row(position: models.Position) -> Dict[str, str]:
    return {
        "category": position.category.value,
        "name": position.name or "",
        "ticker": position.ticker or "",
        "units": f"{position.units:.{config.UNITS_DECIMALS}f}",
        "buyPrice": f"{position.buy_price:.{config.PRICE_DECIMALS}f}",
        "currentPrice": f"{position.current_price:.{config.PRICE_DECIMALS}f}",
    }


def resolve_app_dir(app_dir: Optional[Path] = None) -> Path:
    return Path(app_dir) if app_dir is not None else APP_DIR


def get_snapshots_path(app_dir: Optional[Path] = None) -> Path:
    return resolve_app_dir(app_dir) / SNAPSHOTS_FILE


def get_positions_path(app_dir: Optional[Path] = None) -> Path:
    return resolve_app_dir(app_dir) / POSITIONS_FILE


def ensure_storage(app_dir: Optional[Path] = None) -> Path:
    """Create the storage directory and header-only CSV files where missing."""
    root = resolve_app_dir(app_dir)
    try:
        if not root.exists():
            root.mkdir(parents=True, exist_ok=True)
            logger.info("Created storage directory %s", root)
        for path, columns in (
            (get_snapshots_path(root), SNAPSHOT_COLUMNS),
            (get_positions_path(root), POSITION_COLUMNS),
        ):
            if not path.exists():
                path.write_text(",".join(columns) + "\n", encoding="utf-8")
                logger.info("Created %s", path)
    except OSError as exc:
        logger.error("Could not prepare storage directory %s: %s", root, exc)
        raise StorageError(f"Could not create storage directory {root}: {exc}") from exc
    return root


def _read_table(path: Path, columns: List[str]) -> pd.DataFrame:
    if not path.exists():
        return pd.DataFrame(columns=columns)

    def fit_row(fields: List[str]) -> List[str]:
        # Only called for rows wider than the header; extra fields (trailing commas) are dropped.
        logger.warning("Ignoring %d extra field(s) in %s: %s", len(fields) - len(columns), path, fields)
        return fields[:len(columns)]

    try:
        return pd.read_csv(
            path,
            header=0,
            names=columns,
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines=fit_row,
            engine="python",
            encoding="utf-8",
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=columns)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        logger.error("Could not read %s: %s", path, exc)
        raise StorageError(f"Could not read {path}: {exc}") from exc


def _write_table(path: Path, rows: List[Dict[str, str]], columns: List[str]) -> None:
    df = pd.DataFrame(rows, columns=columns)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False, columns=columns, lineterminator="\n", encoding="utf-8")
    except OSError as exc:
        logger.error("Could not write %s: %s", path, exc)
        raise StorageError(f"Could not write {path}: {exc}") from exc
    logger.info("Saved %d rows to %s", len(rows), path)


def _complete(row: Dict[str, object], columns: List[str]) -> bool:
    return all(isinstance(row[col], str) for col in columns)


def load_snapshots(app_dir: Optional[Path] = None) -> List[models.Snapshot]:
    path = get_snapshots_path(app_dir)
    df = _read_table(path, SNAPSHOT_COLUMNS)
    snapshots: List[models.Snapshot] = []
    for line, row in enumerate(df.to_dict("records"), start=2):
        if not _complete(row, SNAPSHOT_COLUMNS):
            logger.warning("Skipping incomplete snapshot row %s in %s", line, path)
            continue
        try:
            snapshots.append(models.Snapshot(
                date=parse_date(row["date"]),
                total=parse_number(row["total"]),
                stocks=parse_number(row["stocks"]),
                crypto=parse_number(row["crypto"]),
            ))
        except ValueError as exc:
            logger.warning("Skipping snapshot row %s in %s: %s", line, path, exc)
    snapshots.sort(key=lambda s: s.date)
    return snapshots


def save_snapshots(snapshots: Iterable[models.Snapshot], app_dir: Optional[Path] = None) -> None:
    rows = [format_snapshot_row(s) for s in snapshots]
    _write_table(get_snapshots_path(app_dir), rows, SNAPSHOT_COLUMNS)


def load_positions(app_dir: Optional[Path] = None) -> List[models.Position]:
    path = get_positions_path(app_dir)
    df = _read_table(path, POSITION_COLUMNS)
    positions: List[models.Position] = []
    for line, row in enumerate(df.to_dict("records"), start=2):
        if not _complete(row, POSITION_COLUMNS):
            logger.warning("Skipping incomplete position row %s in %s", line, path)
            continue
        try:
            positions.append(models.Position(
                category=parse_category(row["category"]),
                name=row["name"].strip(),
                ticker=row["ticker"].strip(),
                units=parse_number(row["units"]),
                buy_price=parse_number(row["buyPrice"]),
                current_price=parse_number(row["currentPrice"]),
            ))
        except ValueError as exc:
            logger.warning("Skipping position row %s in %s: %s", line, path, exc)
    return positions


def save_positions(positions: Iterable[models.Position], app_dir: Optional[Path] = None) -> None:
    rows = [format_position_row(p) for p in positions]
    _write_table(get_positions_path(app_dir), rows, POSITION_COLUMNS)
