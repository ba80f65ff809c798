"""Daily candle sources (public HTTP APIs, no API key required).

Every source returns daily closes as a pd.Series indexed by UTC date
(normalized DatetimeIndex), oldest first. The last entry is the in-progress day.

Endpoints:
- Hyperliquid:   POST https://api.hyperliquid.xyz/info  (type=candleSnapshot)
- Binance:       GET  https://api.binance.com/api/v3/klines, /ticker/price
- CryptoCompare: GET  https://min-api.cryptocompare.com/data/v2/histoday
"""

import logging
import time
from abc import ABC, abstractmethod

import pandas as pd
import requests

from pairlab.utils.constants import CANDLE_PADDING, CRYPTOCOMPARE_MAX_LIMIT, DataSource

logger = logging.getLogger(__name__)

HYPERLIQUID_INFO_URL = "https://api.hyperliquid.xyz/info"
BINANCE_SPOT_API = "https://api.binance.com/api/v3"
BINANCE_KLINES_ENDPOINT = f"{BINANCE_SPOT_API}/klines"
BINANCE_TICKER_ENDPOINT = f"{BINANCE_SPOT_API}/ticker/price"
CRYPTOCOMPARE_HISTODAY_URL = "https://min-api.cryptocompare.com/data/v2/histoday"

MS_PER_DAY = 24 * 60 * 60 * 1000


class DataSourceError(RuntimeError):
    """A source returned no usable data for a symbol."""


def closes_from_records(times, closes, unit: str) -> pd.Series:
    """Build a date-indexed close series; duplicate dates keep the last value."""
    idx = pd.to_datetime(pd.Series(times, dtype="int64"), unit=unit, utc=True).dt.tz_localize(None)
    s = pd.Series(pd.to_numeric(pd.Series(closes), errors="coerce").values,
                  index=pd.DatetimeIndex(idx).normalize(), name="close")
    s = s[~s.index.duplicated(keep="last")].sort_index()
    return s.dropna()


class CandleSource(ABC):
    """Base interface for a daily candle provider."""

    name: DataSource

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    @abstractmethod
    def fetch_closes(self, symbol: str, quote: str, days: int) -> pd.Series:
        """Fetch roughly days + 5 daily closes for symbol (in-progress day last)."""
        ...

    def fetch_current(self, symbol: str, quote: str) -> float | None:
        """Current price from a ticker endpoint; None if the source has none."""
        return None

    def _check(self, symbol: str, closes: pd.Series) -> pd.Series:
        if closes.empty:
            raise DataSourceError(f"No data from {self.name.value} for {symbol}")
        logger.debug(f"{self.name.value}: {len(closes)} daily closes for {symbol}")
        return closes


class HyperliquidSource(CandleSource):
    """Hyperliquid perpetuals info endpoint; coins are addressed by bare symbol."""

    name = DataSource.HYPERLIQUID

    def fetch_closes(self, symbol: str, quote: str, days: int) -> pd.Series:
        end_ms = int(time.time() * 1000)
        start_ms = end_ms - (days + CANDLE_PADDING) * MS_PER_DAY
        payload = {
            "type": "candleSnapshot",
            "req": {"coin": symbol, "interval": "1d", "startTime": start_ms, "endTime": end_ms},
        }
        response = requests.post(HYPERLIQUID_INFO_URL, json=payload, timeout=self.timeout)
        response.raise_for_status()
        candles = response.json()

        if not isinstance(candles, list) or not candles:
            raise DataSourceError(f"No data from Hyperliquid for {symbol}")

        try:
            # {"t": open_ms, "T": close_ms, "o", "h", "l", "c", "v", ...}
            times = [int(c["t"]) for c in candles]
            closes = [c["c"] for c in candles]
        except (KeyError, TypeError, ValueError) as e:
            raise DataSourceError(f"Malformed Hyperliquid candle for {symbol}: {e}") from e

        return self._check(symbol, closes_from_records(times, closes, unit="ms"))


class BinanceSource(CandleSource):
    """Binance spot klines; the current price comes from the ticker endpoint."""

    name = DataSource.BINANCE

    def fetch_closes(self, symbol: str, quote: str, days: int) -> pd.Series:
        market = f"{symbol}{quote}"
        params = {"symbol": market, "interval": "1d", "limit": days + CANDLE_PADDING}
        response = requests.get(BINANCE_KLINES_ENDPOINT, params=params, timeout=self.timeout)
        response.raise_for_status()
        klines = response.json()

        if not isinstance(klines, list) or not klines:
            raise DataSourceError(f"No data from Binance for {market}")

        try:
            # Kline format: [open_time, open, high, low, close, volume, close_time, ...]
            times = [int(k[0]) for k in klines]
            closes = [k[4] for k in klines]
        except (IndexError, KeyError, TypeError, ValueError) as e:
            raise DataSourceError(f"Malformed Binance kline for {market}: {e}") from e

        return self._check(market, closes_from_records(times, closes, unit="ms"))

    def fetch_current(self, symbol: str, quote: str) -> float | None:
        market = f"{symbol}{quote}"
        response = requests.get(BINANCE_TICKER_ENDPOINT, params={"symbol": market}, timeout=self.timeout)
        response.raise_for_status()
        try:
            return float(response.json()["price"])
        except (KeyError, TypeError, ValueError) as e:
            raise DataSourceError(f"Malformed Binance ticker for {market}: {e}") from e


class CryptoCompareSource(CandleSource):
    """CryptoCompare daily history, always quoted in USD."""

    name = DataSource.CRYPTOCOMPARE

    def fetch_closes(self, symbol: str, quote: str, days: int) -> pd.Series:
        params = {
            "fsym": symbol,
            "tsym": "USD",
            "limit": min(days + CANDLE_PADDING, CRYPTOCOMPARE_MAX_LIMIT),
            "toTs": int(time.time()),
        }
        response = requests.get(CRYPTOCOMPARE_HISTODAY_URL, params=params, timeout=self.timeout)
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise DataSourceError(f"Unexpected CryptoCompare payload for {symbol}")

        if body.get("Response") == "Error":
            raise DataSourceError(f"CryptoCompare error for {symbol}: {body.get('Message')}")

        data = body.get("Data") or {}
        if not isinstance(data, dict):
            raise DataSourceError(f"Unexpected CryptoCompare payload for {symbol}: Data is {type(data).__name__}")
        rows = data.get("Data") or []
        if not isinstance(rows, list):
            raise DataSourceError(f"Unexpected CryptoCompare payload for {symbol}: rows are {type(rows).__name__}")
        if not rows:
            raise DataSourceError(f"No data from CryptoCompare for {symbol}")

        try:
            times = [int(r["time"]) for r in rows]
            closes = [r["close"] for r in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise DataSourceError(f"Malformed CryptoCompare row for {symbol}: {e}") from e

        return self._check(symbol, closes_from_records(times, closes, unit="s"))


_REGISTRY: dict[DataSource, type[CandleSource]] = {
    DataSource.HYPERLIQUID: HyperliquidSource,
    DataSource.BINANCE: BinanceSource,
    DataSource.CRYPTOCOMPARE: CryptoCompareSource,
}


def create_source(name: str | DataSource, timeout: float = 30.0) -> CandleSource:
    """Create a candle source by name (e.g. "binance")."""
    key = DataSource(name) if isinstance(name, str) else name
    if key not in _REGISTRY:
        raise ValueError(f"Unknown data source: {name!r}. Available: {list(_REGISTRY)}")
    return _REGISTRY[key](timeout=timeout)
