"""
UI Components for the Portfolio Tracker Dashboard
Number formatting, metric cards and the add-snapshot form.
"""

import math
from datetime import date
from typing import Callable, List, Optional, Sequence, Tuple

import streamlit as st

from .. import config
from ..logging_setup import get_logger
from ..backend import data_loader, data_processor, models

COLORS = config.COLORS
PLACEHOLDER = config.PLACEHOLDER
PENDING_SNAPSHOT_KEY = "pending_snapshot"

logger = get_logger(__name__)


def _localize(value: float, decimals: int = 2) -> str:
    rounded = round(value, decimals)
    text = f"{abs(rounded):,.{decimals}f}"
    text = text.replace(",", "\0").replace(".", config.DECIMAL_SEPARATOR).replace("\0", config.THOUSANDS_SEPARATOR)
    return f"-{text}" if rounded < 0 else text


def format_number(value: Optional[float], decimals: int = 2) -> str:
    if value is None or math.isnan(value) or math.isinf(value):
        return PLACEHOLDER
    return _localize(value, decimals)


def format_currency(value: float) -> str:
    return f"{_localize(value)} {config.CURRENCY_SYMBOL}"


def format_signed_currency(value: float) -> str:
    text = format_currency(value)
    return text if text.startswith("-") else f"+{text}"


def format_percent(fraction: float, signed: bool = True) -> str:
    text = f"{_localize(fraction * 100)}%"
    if signed and not text.startswith("-"):
        return f"+{text}"
    return text


def format_delta(delta: Optional[models.Delta]) -> str:
    if delta is None:
        return PLACEHOLDER
    return f"{format_signed_currency(delta.absolute)}  ({format_percent(delta.relative)})"


def delta_tone(delta: Optional[models.Delta]) -> str:
    if delta is None:
        return "neutral"
    return "positive" if delta.absolute >= 0 else "negative"


def get_global_styles() -> str:
    return f"""
    <style>
    @import url('https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@400;600&display=swap');
    html, body, [class*="css"] {{ font-family: 'Space Grotesk', sans-serif; }}
    .metrics-row {{ display:flex; gap:12px; margin-bottom:16px; }}
    .metrics-card {{ flex:1; background:{COLORS['surface']}; border:1px solid #e1e1e1; border-radius:4px; padding:12px; }}
    .metrics-card .title {{ color:{COLORS['text_secondary']}; font-size:0.85rem; }}
    .metrics-card .value {{ font-size:1.25rem; font-weight:600; }}
    </style>
    """


def build_metric_cards_html(cards: Sequence[Tuple[str, str, str]]) -> str:
    """``cards`` are (title, value, tone) with tone one of the COLORS keys."""
    items = []
    for title, value, tone in cards:
        color = COLORS.get(tone, COLORS["text"])
        items.append(
            f'<div class="metrics-card"><div class="title">{title}</div>'
            f'<div class="value" style="color:{color};">{value}</div></div>'
        )
    return f'<div class="metrics-row">{"".join(items)}</div>'


def build_dashboard_cards(snapshots: Sequence[models.Snapshot]) -> List[Tuple[str, str, str]]:
    latest = snapshots[-1] if snapshots else None
    cards = [("Current total value", format_currency(latest.total) if latest else PLACEHOLDER, "text")]
    changes = data_processor.compute_period_changes(snapshots)
    for key, label, _unit, _amount in config.CHANGE_PERIODS:
        delta = changes[key]
        cards.append((label, format_delta(delta), delta_tone(delta)))
    return cards


def build_position_total_cards(positions: Sequence[models.Position]) -> List[Tuple[str, str, str]]:
    return [
        ("Total position value", format_currency(data_processor.total_value(positions)), "text"),
        ("Stocks total", format_currency(data_processor.total_by_category(positions, models.Category.STOCK)), "text"),
        ("Crypto total", format_currency(data_processor.total_by_category(positions, models.Category.CRYPTO)), "text"),
        ("Avg. buy price (weighted)", format_number(data_processor.weighted_average_buy_price(positions)), "text"),
    ]


def render_metric_cards(cards: Sequence[Tuple[str, str, str]]) -> None:
    st.markdown(build_metric_cards_html(cards), unsafe_allow_html=True)


def snapshot_from_input(date_text: str, total_text: str, stocks_text: str, crypto_text: str) -> models.Snapshot:
    return models.Snapshot(
        date=data_loader.parse_date(date_text),
        total=data_loader.parse_number(total_text),
        stocks=data_loader.parse_number(stocks_text),
        crypto=data_loader.parse_number(crypto_text),
    )


def render_add_snapshot_form(on_commit: Callable[[models.Snapshot], None]) -> None:
    with st.form("add_snapshot", clear_on_submit=False):
        st.markdown("**Add new snapshot**")
        col_date, col_total, col_stocks, col_crypto = st.columns(4)
        date_text = col_date.text_input("Date (YYYY-MM-DD)", value=data_loader.format_date(date.today()))
        total_text = col_total.text_input("Total")
        stocks_text = col_stocks.text_input("Stocks")
        crypto_text = col_crypto.text_input("Crypto")
        submitted = st.form_submit_button("Save")

    if submitted:
        st.session_state.pop(PENDING_SNAPSHOT_KEY, None)
        try:
            snapshot = snapshot_from_input(date_text, total_text, stocks_text, crypto_text)
        except ValueError as exc:
            st.error(f"Check input: {exc}")
            return
        result = data_processor.validate_snapshot_values(snapshot.total, snapshot.stocks, snapshot.crypto)
        if result.rejected:
            st.error(f"Check input: {result.reason}")
            return
        if result.needs_confirmation:
            st.session_state[PENDING_SNAPSHOT_KEY] = (snapshot, result.reason)
        else:
            on_commit(snapshot)

    pending = st.session_state.get(PENDING_SNAPSHOT_KEY)
    if pending is None:
        return
    snapshot, reason = pending
    st.warning(f"{reason} Save anyway?")
    col_yes, col_no = st.columns(2)
    if col_yes.button("Save anyway", key="confirm_snapshot"):
        st.session_state.pop(PENDING_SNAPSHOT_KEY, None)
        logger.info("Saving snapshot for %s despite mismatch: %s", snapshot.date, reason)
        on_commit(snapshot)
    elif col_no.button("Cancel", key="cancel_snapshot"):
        st.session_state.pop(PENDING_SNAPSHOT_KEY, None)
        st.rerun()
