"""Pair price fetching with a sequential source fallback chain.

Order: Hyperliquid -> Binance -> CryptoCompare. Within one source both legs
are requested concurrently. When only the base leg succeeds, the other leg is
looked up on the remaining sources in order before giving up on the source.
A source is never retried.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import pandas as pd
import requests

from pairlab.data.alignment import InsufficientDataError, PairSeries, align_closes, split_history
from pairlab.data.sources import CandleSource, DataSourceError, create_source
from pairlab.spread.pair import PairSpec
from pairlab.utils.constants import SOURCE_CHAIN

logger = logging.getLogger(__name__)

# Failures that move the chain on to the next source
FETCH_ERRORS = (requests.exceptions.RequestException, DataSourceError, InsufficientDataError, ValueError)


class PriceFetcher:
    """Fetch aligned daily closes for a pair, falling back across sources."""

    def __init__(self, sources: list[CandleSource] | None = None, timeout: float = 30.0):
        self.sources = sources if sources is not None else [
            create_source(name, timeout=timeout) for name in SOURCE_CHAIN
        ]

    def _fetch_leg(self, source: CandleSource, symbol: str, quote: str, days: int) -> tuple[pd.Series, float | None]:
        closes = source.fetch_closes(symbol, quote, days)
        return closes, source.fetch_current(symbol, quote)

    def _fetch_both(self, source: CandleSource, pair: PairSpec, days: int):
        """Request both legs from one source concurrently; returns (leg1, leg2, errors)."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            fut_1 = pool.submit(self._fetch_leg, source, pair.symbol1, pair.quote, days)
            fut_2 = pool.submit(self._fetch_leg, source, pair.symbol2, pair.quote, days)
        legs, errors = [], []
        for symbol, fut in ((pair.symbol1, fut_1), (pair.symbol2, fut_2)):
            try:
                legs.append(fut.result())
            except FETCH_ERRORS as e:
                legs.append(None)
                errors.append(f"{source.name.value} {symbol}: {e}")
        return legs[0], legs[1], errors

    def _fallback_leg(self, start: int, symbol: str, quote: str, days: int, errors: list[str]):
        """Try sources[start:] in order for a single leg."""
        for source in self.sources[start:]:
            try:
                return source, self._fetch_leg(source, symbol, quote, days)
            except FETCH_ERRORS as e:
                logger.warning(f"    {source.name.value} failed for {symbol}: {e}")
                errors.append(f"{source.name.value} {symbol}: {e}")
        return None, None

    @staticmethod
    def _build(pair: PairSpec, days: int, leg_1, leg_2, source_name: str) -> PairSeries:
        closes_1, current_1 = leg_1
        closes_2, current_2 = leg_2
        merged = align_closes(closes_1, closes_2)
        history, last = split_history(merged, days)

        # Legs without a ticker price use the in-progress aligned close
        if current_1 is None:
            current_1 = float(last["close_1"])
        if current_2 is None:
            current_2 = float(last["close_2"])

        return PairSeries(pair=pair, df=history, current_1=current_1, current_2=current_2, source=source_name)

    def fetch_pair(self, pair: PairSpec, days: int) -> PairSeries:
        """Return `days` aligned historical closes for both legs plus current prices.

        Raises
        ------
        InsufficientDataError
            If every source (and per-leg fallback) fails or yields fewer than
            days + 1 aligned dates.
        """
        errors: list[str] = []

        for i, source in enumerate(self.sources):
            logger.info(f"    Trying {source.name.value} for {pair.name} ({days}d)...")
            leg_1, leg_2, leg_errors = self._fetch_both(source, pair, days)
            errors.extend(leg_errors)
            source_name = source.name.value

            if leg_1 is not None and leg_2 is None:
                logger.warning(f"    {source_name} has no data for {pair.symbol2}, trying other sources")
                fallback, leg_2 = self._fallback_leg(i + 1, pair.symbol2, pair.quote, days, errors)
                if fallback is not None:
                    source_name = f"{source_name}+{fallback.name.value}"

            if leg_1 is None or leg_2 is None:
                logger.warning(f"    {source.name.value} failed, trying next source")
                continue

            try:
                series = self._build(pair, days, leg_1, leg_2, source_name)
            except InsufficientDataError as e:
                logger.warning(f"    {source_name}: {e}")
                errors.append(f"{source_name}: {e}")
                continue

            logger.info(f"    {pair.name} {days}d: {series.days} aligned days from {source_name}")
            return series

        raise InsufficientDataError(
            f"Insufficient data for {pair.name} ({days}d): " + "; ".join(errors)
        )
