"""
Chart rendering functions for the Portfolio Tracker Dashboard
Draws the projected line and donut geometry with Plotly.
"""

from typing import Sequence

import plotly.graph_objects as go
import streamlit as st

from .. import config
from ..backend import chart_geometry, data_loader, models
from .components import format_currency, format_percent

CHART_SIZES = config.CHART_SIZES
COLORS = config.COLORS


def build_line_figure(
    series: Sequence[models.Snapshot],
    projection: chart_geometry.LineProjection,
    viewport: chart_geometry.Viewport,
    width: int,
    height: int,
) -> go.Figure:
    """Plot the projection in pixel space: x in [0, width], y in [0, height] growing downwards."""
    fig = go.Figure()

    shapes = []
    annotations = []
    for y, value in chart_geometry.value_gridlines(projection, viewport):
        shapes.append(dict(
            type="line", x0=viewport.left, x1=viewport.right, y0=y, y1=y,
            line=dict(color=COLORS["grid"], width=1), layer="below",
        ))
        annotations.append(dict(
            x=6, y=y, text=format_currency(value), showarrow=False,
            xanchor="left", yanchor="middle", font=dict(size=11, color=COLORS["label"]),
        ))
    shapes.append(dict(
        type="line", x0=viewport.left, x1=viewport.right, y0=viewport.bottom, y1=viewport.bottom,
        line=dict(color=COLORS["axis"], width=1),
    ))
    shapes.append(dict(
        type="line", x0=viewport.left, x1=viewport.left, y0=viewport.bottom, y1=viewport.top,
        line=dict(color=COLORS["axis"], width=1),
    ))
    shapes.append(dict(
        type="path", path=chart_geometry.svg_path(projection.points),
        line=dict(color=COLORS["stocks"], width=2),
    ))

    for x, day in chart_geometry.date_labels(projection, viewport):
        annotations.append(dict(
            x=x, y=viewport.bottom + 18, text=data_loader.format_date(day), showarrow=False,
            xanchor="center", yanchor="middle", font=dict(size=11, color=COLORS["label"]),
        ))

    fig.add_trace(go.Scatter(
        x=[p[0] for p in projection.points],
        y=[p[1] for p in projection.points],
        mode="markers",
        marker=dict(size=6, color=COLORS["stocks"]),
        text=[f"{data_loader.format_date(s.date)}: {format_currency(s.total)}" for s in series],
        hoverinfo="text",
        showlegend=False,
    ))

    fig.update_layout(
        width=width,
        height=height,
        margin=dict(l=0, r=0, t=0, b=0),
        paper_bgcolor=COLORS["background"],
        plot_bgcolor=COLORS["background"],
        shapes=shapes,
        annotations=annotations,
        showlegend=False,
    )
    fig.update_xaxes(range=[0, width], visible=False, fixedrange=True)
    fig.update_yaxes(range=[height, 0], visible=False, fixedrange=True)
    return fig


def build_donut_figure(projection: chart_geometry.DonutProjection, height: int) -> go.Figure:
    fig = go.Figure()
    # Slices start at 12 o'clock and run clockwise, stocks first.
    fig.add_trace(go.Pie(
        labels=["Stocks", "Crypto"],
        values=[projection.stocks_sweep, projection.crypto_sweep],
        hole=config.DONUT_HOLE,
        sort=False,
        direction="clockwise",
        rotation=0,
        marker=dict(colors=[COLORS["stocks"], COLORS["crypto"]]),
        textinfo="none",
        hoverinfo="label+percent",
    ))
    legend = (
        f"Stocks: {format_currency(projection.stocks_value)}  ({format_percent(projection.stocks_share, signed=False)})"
        f"<br>Crypto: {format_currency(projection.crypto_value)}  ({format_percent(projection.crypto_share, signed=False)})"
    )
    fig.update_layout(
        height=height,
        margin=dict(l=10, r=10, t=10, b=10),
        paper_bgcolor=COLORS["background"],
        showlegend=False,
        annotations=[
            dict(text=f"<b>{format_currency(projection.total)}</b>", x=0.5, y=0.55, showarrow=False,
                 font=dict(size=18, color=COLORS["text"])),
            dict(text=legend, x=0.5, y=0.42, showarrow=False,
                 font=dict(size=12, color=COLORS["text"])),
        ],
    )
    return fig


def render_line_chart(series: Sequence[models.Snapshot]) -> None:
    width, height = CHART_SIZES["line"]
    viewport = chart_geometry.Viewport.from_canvas(width, height, config.LINE_CHART_PADDING)
    projection = chart_geometry.project_line(series, viewport)
    if projection is None:
        st.info("No data yet - add a snapshot.")
        return
    st.plotly_chart(build_line_figure(series, projection, viewport, width, height), use_container_width=False)


def render_donut_chart(stocks: float, crypto: float) -> None:
    projection = chart_geometry.project_donut(stocks, crypto)
    if projection is None:
        st.info("No allocation available.")
        return
    _, height = CHART_SIZES["donut"]
    st.plotly_chart(build_donut_figure(projection, height), use_container_width=True)
