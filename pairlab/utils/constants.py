"""Enums and constants for the pair-trading research scripts."""

import math
from enum import Enum


class DataSource(str, Enum):
    HYPERLIQUID = "hyperliquid"
    BINANCE = "binance"
    CRYPTOCOMPARE = "cryptocompare"


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


# Fallback order for daily candles
SOURCE_CHAIN = [DataSource.HYPERLIQUID, DataSource.BINANCE, DataSource.CRYPTOCOMPARE]

# Extra candles requested on top of the lookback (weekends, in-progress day)
CANDLE_PADDING = 5
CRYPTOCOMPARE_MAX_LIMIT = 2000

# --- Beta drift report ---

REPORTS_DIR = "backtest_reports"
REPORT_PREFIX = "backtest_ALL_"
REPORT_SUFFIX = ".md"
REPORT_TABLE_HEADER = "| Pair | Entry Time |"
REPORT_MIN_COLUMNS = 12
DRIFT_REPORT_PREFIX = "beta_drift_analysis_"

# (label, min, max) half-open [min, max)
ABSOLUTE_DRIFT_BUCKETS = [
    ("0.00-0.01", 0.0, 0.01),
    ("0.01-0.05", 0.01, 0.05),
    ("0.05-0.10", 0.05, 0.10),
    ("0.10-0.20", 0.10, 0.20),
    ("0.20+", 0.20, math.inf),
]

PERCENT_DRIFT_BUCKETS = [
    ("0-5%", 0.0, 5.0),
    ("5-10%", 5.0, 10.0),
    ("10-20%", 10.0, 20.0),
    ("20-50%", 20.0, 50.0),
    ("50%+", 50.0, math.inf),
]

TOP_DRIFT_COUNT = 10

# --- Pair statistics ---

ZSCORE_WINDOW = 30
COINTEGRATION_ADF_THRESHOLD = -2.5
MEAN_REVERSION_THRESHOLD = 0.5
AUTOCORR_THRESHOLD = 0.3
HALF_LIFE_MIN_DIFFS = 10
HALF_LIFE_MAX = 1000.0
# Spread std at or below this fraction of its magnitude is treated as constant
SPREAD_FLAT_RTOL = 1e-10
GAMMA_MIN_RETURNS = 6
GAMMA_SHORT_MIN_RETURNS = 15
GAMMA_SHORT_WINDOW_MIN = 7

# --- Snapshot / history ---

SNAPSHOT_FILE = "pair_snapshot.md"
PAIRS_CONFIG_FILE = "config/pairs.yaml"
HISTORY_FILE = "config/trade_history.json"
HISTORY_RECENT_COUNT = 20
