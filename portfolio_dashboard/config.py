"""
Configuration constants for the Portfolio Tracker Dashboard
"""

import os
from pathlib import Path

APP_TITLE = "Portfolio Tracker"
DEFAULT_APP_DIR = Path.home() / ".portfolio-tracker"
APP_DIR = Path(os.getenv("PORTFOLIO_TRACKER_HOME", str(DEFAULT_APP_DIR))).expanduser()
SNAPSHOTS_FILE = "snapshots.csv"
POSITIONS_FILE = "positions.csv"

SNAPSHOT_COLUMNS = ["date", "total", "stocks", "crypto"]
POSITION_COLUMNS = ["category", "name", "ticker", "units", "buyPrice", "currentPrice"]

DATE_FORMAT = "%Y-%m-%d"
MONEY_DECIMALS = 2
UNITS_DECIMALS = 6
PRICE_DECIMALS = 4

# Max allowed gap between stocks + crypto and the entered total before a warning.
TOTAL_TOLERANCE = 0.01

# (key, label, unit, amount) for the change cards on the dashboard.
CHANGE_PERIODS = [
    ("week", "Weekly change", "days", 7),
    ("month", "Monthly change", "months", 1),
    ("year", "Yearly change", "years", 1),
]

DECIMAL_SEPARATOR = ","
THOUSANDS_SEPARATOR = "."
CURRENCY_SYMBOL = "€"
PLACEHOLDER = "—"

PAGE_CONFIG = {
    "page_title": "Portfolio Tracker",
    "page_icon": None,
    "layout": "wide",
    "initial_sidebar_state": "collapsed",
}

CHART_SIZES = {
    "line": (500, 340),
    "donut": (400, 340),
}

LINE_CHART_PADDING = {
    "left": 60,
    "right": 20,
    "top": 20,
    "bottom": 40,
}

GRID_LINES = 5
DONUT_HOLE = 0.56

COLORS = {
    "positive": "#1f7a6d",
    "negative": "#b42318",
    "neutral": "#9a9a9a",
    "stocks": "#3c78ff",
    "crypto": "#ffa53c",
    "grid": "#f0f0f5",
    "axis": "#e6e6eb",
    "label": "#787882",
    "background": "#fcfcff",
    "surface": "#ffffff",
    "text": "#28282d",
    "text_secondary": "#6b6b6b",
}

DEFAULT_LOG_LEVEL = os.getenv("PORTFOLIO_TRACKER_LOG_LEVEL", "INFO")
