"""
Main Streamlit application for the Portfolio Tracker Dashboard
"""

import os
import sys
from datetime import date

import streamlit as st

try:
    from . import config
    from .logging_setup import get_logger, setup_logging
    from .backend import data_processor, models
    from .backend.data_loader import StorageError, ensure_storage
    from .backend.record_store import PortfolioStore
    from .frontend.components import (
        build_dashboard_cards,
        build_position_total_cards,
        format_currency,
        get_global_styles,
        render_add_snapshot_form,
        render_metric_cards,
    )
    from .frontend.charts import render_donut_chart, render_line_chart
    from .frontend.tables import (
        PositionField,
        SnapshotField,
        apply_frame_edits,
        render_positions_editor,
        render_row_picker,
        render_snapshots_editor,
        reset_editor,
    )
except ImportError:
    sys.path.append(os.path.dirname(os.path.dirname(__file__)))
    from portfolio_dashboard import config
    from portfolio_dashboard.logging_setup import get_logger, setup_logging
    from portfolio_dashboard.backend import data_processor, models
    from portfolio_dashboard.backend.data_loader import StorageError, ensure_storage
    from portfolio_dashboard.backend.record_store import PortfolioStore
    from portfolio_dashboard.frontend.components import (
        build_dashboard_cards,
        build_position_total_cards,
        format_currency,
        get_global_styles,
        render_add_snapshot_form,
        render_metric_cards,
    )
    from portfolio_dashboard.frontend.charts import render_donut_chart, render_line_chart
    from portfolio_dashboard.frontend.tables import (
        PositionField,
        SnapshotField,
        apply_frame_edits,
        render_positions_editor,
        render_row_picker,
        render_snapshots_editor,
        reset_editor,
    )

STORE_KEY = "portfolio_store"
FLASH_KEY = "flash_messages"

logger = get_logger(__name__)


def flash(kind: str, text: str) -> None:
    st.session_state.setdefault(FLASH_KEY, []).append((kind, text))


def render_flash_messages() -> None:
    for kind, text in st.session_state.pop(FLASH_KEY, []):
        getattr(st, kind)(text)


def get_store() -> PortfolioStore:
    if STORE_KEY in st.session_state:
        return st.session_state[STORE_KEY]
    try:
        ensure_storage(config.APP_DIR)
    except StorageError as exc:
        st.error(f"Could not create storage folder: {exc}")
    try:
        store = PortfolioStore.from_storage(config.APP_DIR)
        logger.info("Loaded %d snapshots and %d positions from %s", len(store.snapshots), len(store.positions), config.APP_DIR)
    except StorageError as exc:
        st.warning(f"Could not load saved data, starting empty: {exc}")
        store = PortfolioStore(app_dir=config.APP_DIR)
    st.session_state[STORE_KEY] = store
    return store


def persist(save, message: str) -> None:
    """Write through to storage and rerun so every tab shows the new state."""
    try:
        save()
    except StorageError as exc:
        flash("warning", f"Changes kept for this session but not saved: {exc}")
    else:
        flash("success", message)
    st.rerun()


def saved_message(what: str, errors) -> str:
    if not errors:
        return f"{what} saved."
    return f"{what} saved; {len(errors)} invalid cell(s) were not applied."


def render_dashboard_tab(store: PortfolioStore) -> None:
    snapshots = store.snapshots
    render_metric_cards(build_dashboard_cards(snapshots))

    col_line, col_donut = st.columns(2)
    with col_line:
        st.markdown("##### Total value history")
        render_line_chart(snapshots)
    with col_donut:
        st.markdown("##### Stocks vs. crypto")
        stocks, crypto = data_processor.allocation_split(snapshots, store.positions)
        render_donut_chart(stocks, crypto)

    def commit(snapshot: models.Snapshot) -> None:
        store.add_snapshot(snapshot)
        reset_editor("snapshots_editor")
        persist(store.save_snapshots, "Snapshot saved.")

    render_add_snapshot_form(commit)


def render_snapshots_tab(store: PortfolioStore) -> None:
    snapshots = store.snapshots
    edited = render_snapshots_editor(snapshots)

    col_save, col_add, col_remove = st.columns([1, 1, 2])
    with col_remove:
        rows = [f"{s.date.isoformat()}  {format_currency(s.total)}" for s in snapshots]
        selected = render_row_picker("Row", rows, key="snapshot_row")
        if st.button("Remove selected", key="remove_snapshot", disabled=selected is None):
            store.remove_snapshot(selected)
            reset_editor("snapshots_editor")
            st.rerun()
    with col_add:
        if st.button("Add row", key="add_snapshot_row"):
            store.add_snapshot(models.Snapshot(date=date.today(), total=0.0, stocks=0.0, crypto=0.0))
            reset_editor("snapshots_editor")
            st.rerun()
    with col_save:
        if st.button("Save changes", key="save_snapshots", type="primary"):
            changes, errors = apply_frame_edits(snapshots, edited, list(SnapshotField))
            for error in errors:
                flash("error", f"Invalid input: {error}")
            store.update_snapshots(changes)
            reset_editor("snapshots_editor")
            persist(store.save_snapshots, saved_message("Snapshots", errors))


def render_positions_tab(store: PortfolioStore) -> None:
    positions = store.positions
    edited = render_positions_editor(positions)

    col_save, col_add, col_remove = st.columns([1, 1, 2])
    with col_remove:
        rows = [f"{p.category.label}  {p.name or '-'}  {p.ticker}" for p in positions]
        selected = render_row_picker("Position", rows, key="position_row")
        if st.button("Remove selected", key="remove_position", disabled=selected is None):
            store.remove_position(selected)
            reset_editor("positions_editor")
            st.rerun()
    with col_add:
        if st.button("Add position", key="add_position_row"):
            store.add_position(models.Position(
                category=models.Category.STOCK, name="", ticker="", units=0.0, buy_price=0.0, current_price=0.0,
            ))
            reset_editor("positions_editor")
            st.rerun()
    with col_save:
        if st.button("Save changes", key="save_positions", type="primary"):
            changes, errors = apply_frame_edits(positions, edited, list(PositionField))
            for error in errors:
                flash("error", f"Invalid input: {error}")
            for index, position in changes:
                store.update_position(index, position)
            reset_editor("positions_editor")
            persist(store.save_positions, saved_message("Positions", errors))

    render_metric_cards(build_position_total_cards(store.positions))


def main() -> None:
    st.set_page_config(**config.PAGE_CONFIG)
    setup_logging(config.DEFAULT_LOG_LEVEL)
    st.markdown(get_global_styles(), unsafe_allow_html=True)
    st.caption(f"Data folder: {config.APP_DIR}")
    render_flash_messages()

    store = get_store()

    tabs = st.tabs(["Dashboard", "Snapshots", "Positions"])
    with tabs[0]:
        render_dashboard_tab(store)
    with tabs[1]:
        render_snapshots_tab(store)
    with tabs[2]:
        render_positions_tab(store)


if __name__ == "__main__":
    main()
