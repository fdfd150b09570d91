"""
Table rendering functions for the Portfolio Tracker Dashboard
Field accessors per record type and the editable snapshot/position grids.
"""

import dataclasses
import math
from enum import Enum
from typing import Any, List, Sequence, Tuple

import pandas as pd
import streamlit as st

from ..backend import data_loader, models


class SnapshotField(Enum):
    DATE = ("date", "Date", "date", True)
    TOTAL = ("total", "Total", "money", True)
    STOCKS = ("stocks", "Stocks", "money", True)
    CRYPTO = ("crypto", "Crypto", "money", True)

    def __init__(self, attr: str, label: str, kind: str, editable: bool):
        self.attr = attr
        self.label = label
        self.kind = kind
        self.editable = editable

    def get(self, record: models.Snapshot) -> Any:
        return getattr(record, self.attr)


class PositionField(Enum):
    CATEGORY = ("category", "Category", "category", True)
    NAME = ("name", "Name", "text", True)
    TICKER = ("ticker", "Ticker", "text", True)
    UNITS = ("units", "Units", "quantity", True)
    BUY_PRICE = ("buy_price", "Buy price", "money", True)
    CURRENT_PRICE = ("current_price", "Current price", "money", True)
    VALUE = ("value", "Value", "money", False)
    PNL_PERCENT = ("pnl_percent", "P/L %", "percent", False)
    PNL = ("pnl", "P/L", "money", False)

    def __init__(self, attr: str, label: str, kind: str, editable: bool):
        self.attr = attr
        self.label = label
        self.kind = kind
        self.editable = editable

    def get(self, record: models.Position) -> Any:
        value = getattr(record, self.attr)
        if isinstance(value, models.Category):
            return value.label
        return value


def _parse_text(raw) -> str:
    if raw is None or (isinstance(raw, float) and math.isnan(raw)):
        return ""
    return str(raw).strip()


def _parse_amount(raw) -> float:
    value = data_loader.parse_number(raw)
    if value < 0:
        raise ValueError("Negative values are not allowed.")
    return value


_PARSERS = {
    "date": data_loader.parse_date,
    "money": _parse_amount,
    "quantity": _parse_amount,
    "text": _parse_text,
    "category": data_loader.parse_category,
}


def records_frame(records: Sequence, fields: Sequence[Enum]) -> pd.DataFrame:
    rows = [{field.label: field.get(record) for field in fields} for record in records]
    return pd.DataFrame(rows, columns=[field.label for field in fields])


def apply_edit(record, field, raw):
    """Return a copy of ``record`` with ``field`` set from the raw cell value."""
    if not field.editable:
        raise ValueError(f"{field.label} is read-only")
    value = _PARSERS[field.kind](raw)
    return dataclasses.replace(record, **{field.attr: value})


def apply_frame_edits(records: Sequence, edited: pd.DataFrame, fields: Sequence[Enum]) -> Tuple[List[Tuple[int, Any]], List[str]]:
    """Diff an edited grid against the records it was built from.

    Returns (index, updated record) pairs for changed rows and a list of
    messages for cells that could not be parsed; those cells keep their old value.
    """
    changes = []
    errors = []
    for idx, record in enumerate(records):
        if idx >= len(edited):
            break
        row = edited.iloc[idx]
        updated = record
        for field in fields:
            if not field.editable:
                continue
            try:
                updated = apply_edit(updated, field, row[field.label])
            except ValueError as exc:
                errors.append(f"Row {idx + 1}, {field.label}: {exc}")
        if updated != record:
            changes.append((idx, updated))
    return changes, errors


def _editor_key(name: str) -> str:
    version = st.session_state.get(f"{name}_version", 0)
    return f"{name}_{version}"


def reset_editor(name: str) -> None:
    st.session_state[f"{name}_version"] = st.session_state.get(f"{name}_version", 0) + 1


def render_snapshots_editor(snapshots: Sequence[models.Snapshot]) -> pd.DataFrame:
    fields = list(SnapshotField)
    df = records_frame(snapshots, fields)
    if df.empty:
        st.info("No snapshots yet")
    return st.data_editor(
        df,
        key=_editor_key("snapshots_editor"),
        num_rows="fixed",
        use_container_width=True,
        column_config={
            SnapshotField.DATE.label: st.column_config.DateColumn(format="YYYY-MM-DD", required=True),
            SnapshotField.TOTAL.label: st.column_config.NumberColumn(format="%.2f", min_value=0.0),
            SnapshotField.STOCKS.label: st.column_config.NumberColumn(format="%.2f", min_value=0.0),
            SnapshotField.CRYPTO.label: st.column_config.NumberColumn(format="%.2f", min_value=0.0),
        },
    )


def render_positions_editor(positions: Sequence[models.Position]) -> pd.DataFrame:
    fields = list(PositionField)
    df = records_frame(positions, fields)
    if df.empty:
        st.info("No positions yet")
    return st.data_editor(
        df,
        key=_editor_key("positions_editor"),
        num_rows="fixed",
        use_container_width=True,
        disabled=[f.label for f in fields if not f.editable],
        column_config={
            PositionField.CATEGORY.label: st.column_config.SelectboxColumn(
                options=[c.label for c in models.Category],
                required=True,
            ),
            PositionField.UNITS.label: st.column_config.NumberColumn(format="%.6f", min_value=0.0),
            PositionField.BUY_PRICE.label: st.column_config.NumberColumn(format="%.4f", min_value=0.0),
            PositionField.CURRENT_PRICE.label: st.column_config.NumberColumn(format="%.4f", min_value=0.0),
            PositionField.VALUE.label: st.column_config.NumberColumn(format="%.2f"),
            PositionField.PNL_PERCENT.label: st.column_config.NumberColumn(format="percent"),
            PositionField.PNL.label: st.column_config.NumberColumn(format="%.2f"),
        },
    )


def render_row_picker(label: str, rows: Sequence[str], key: str):
    """Selectbox over row descriptions; returns the chosen index or None."""
    if not rows:
        return None
    return st.selectbox(label, list(range(len(rows))), format_func=lambda i: rows[i], key=key)
