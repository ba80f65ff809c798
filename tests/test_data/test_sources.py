"""Tests for the HTTP candle sources (mocked with requests-mock)."""

import pandas as pd
import pytest
import requests

from pairlab.data.sources import (
    BINANCE_KLINES_ENDPOINT,
    BINANCE_TICKER_ENDPOINT,
    CRYPTOCOMPARE_HISTODAY_URL,
    HYPERLIQUID_INFO_URL,
    BinanceSource,
    CryptoCompareSource,
    DataSourceError,
    HyperliquidSource,
    closes_from_records,
    create_source,
)

JAN_1_MS = 1735689600000   # 2025-01-01 00:00 UTC
DAY_MS = 86_400_000


def _kline(i: int, close: str) -> list:
    open_ms = JAN_1_MS + i * DAY_MS
    return [open_ms, "1.0", "2.0", "0.5", close, "1000", open_ms + DAY_MS - 1]


def test_closes_from_records_normalizes_and_dedupes():
    times = [JAN_1_MS + 3_600_000, JAN_1_MS + DAY_MS, JAN_1_MS + 7_200_000]
    s = closes_from_records(times, ["1.0", "2.0", "1.5"], unit="ms")

    assert list(s.index) == [pd.Timestamp("2025-01-01"), pd.Timestamp("2025-01-02")]
    assert s.tolist() == [1.5, 2.0]


def test_hyperliquid_candles(requests_mock):
    candles = [{"t": JAN_1_MS + i * DAY_MS, "c": str(10 + i)} for i in range(4)]
    requests_mock.post(HYPERLIQUID_INFO_URL, json=candles)

    s = HyperliquidSource().fetch_closes("HYPE", "USDT", 3)

    assert s.tolist() == [10.0, 11.0, 12.0, 13.0]
    body = requests_mock.last_request.json()
    assert body["type"] == "candleSnapshot"
    assert body["req"]["coin"] == "HYPE"
    assert body["req"]["interval"] == "1d"
    assert body["req"]["endTime"] - body["req"]["startTime"] == 8 * DAY_MS


def test_hyperliquid_empty_raises(requests_mock):
    requests_mock.post(HYPERLIQUID_INFO_URL, json=[])
    with pytest.raises(DataSourceError, match="No data from Hyperliquid"):
        HyperliquidSource().fetch_closes("ZEC", "USDT", 30)


def test_binance_klines(requests_mock):
    requests_mock.get(BINANCE_KLINES_ENDPOINT, json=[_kline(i, f"{100 + i}.5") for i in range(3)])

    s = BinanceSource().fetch_closes("LTC", "USDT", 30)

    assert s.tolist() == [100.5, 101.5, 102.5]
    assert s.index[-1] == pd.Timestamp("2025-01-03")
    url = requests_mock.last_request.url
    assert "symbol=LTCUSDT" in url
    assert "limit=35" in url


def test_binance_http_error(requests_mock):
    requests_mock.get(BINANCE_KLINES_ENDPOINT, status_code=400, json={"code": -1121, "msg": "Invalid symbol."})
    with pytest.raises(requests.exceptions.HTTPError):
        BinanceSource().fetch_closes("HYPE", "USDT", 30)


def test_binance_klines_as_objects_raise_source_error(requests_mock):
    requests_mock.get(BINANCE_KLINES_ENDPOINT, json=[{"open": 1, "close": "2"}])
    with pytest.raises(DataSourceError, match="Malformed Binance kline for HYPEUSDT"):
        BinanceSource().fetch_closes("HYPE", "USDT", 30)


def test_binance_ticker(requests_mock):
    requests_mock.get(BINANCE_TICKER_ENDPOINT, json={"symbol": "BTCUSDT", "price": "97000.50"})
    assert BinanceSource().fetch_current("BTC", "USDT") == pytest.approx(97000.5)


def test_cryptocompare_histoday(requests_mock):
    rows = [{"time": JAN_1_MS // 1000 + i * 86400, "close": 1.0 + i} for i in range(3)]
    requests_mock.get(CRYPTOCOMPARE_HISTODAY_URL, json={"Response": "Success", "Data": {"Data": rows}})

    s = CryptoCompareSource().fetch_closes("TAO", "USDT", 30)

    assert s.tolist() == [1.0, 2.0, 3.0]
    url = requests_mock.last_request.url
    assert "fsym=TAO" in url
    assert "tsym=USD" in url
    assert "limit=35" in url


def test_cryptocompare_limit_capped(requests_mock):
    rows = [{"time": JAN_1_MS // 1000, "close": 1.0}]
    requests_mock.get(CRYPTOCOMPARE_HISTODAY_URL, json={"Response": "Success", "Data": {"Data": rows}})
    CryptoCompareSource().fetch_closes("BTC", "USDT", 5000)
    assert "limit=2000" in requests_mock.last_request.url


def test_cryptocompare_error_response(requests_mock):
    requests_mock.get(
        CRYPTOCOMPARE_HISTODAY_URL,
        json={"Response": "Error", "Message": "fsym is not a valid coin"},
    )
    with pytest.raises(DataSourceError, match="CryptoCompare error for XYZ: fsym is not a valid coin"):
        CryptoCompareSource().fetch_closes("XYZ", "USDT", 30)


def test_cryptocompare_data_as_list_raises_source_error(requests_mock):
    rows = [{"time": JAN_1_MS // 1000, "close": 1.0}]
    requests_mock.get(CRYPTOCOMPARE_HISTODAY_URL, json={"Response": "Success", "Data": rows})
    with pytest.raises(DataSourceError, match="Unexpected CryptoCompare payload for TAO"):
        CryptoCompareSource().fetch_closes("TAO", "USDT", 30)


def test_only_binance_has_ticker():
    assert HyperliquidSource().fetch_current("HYPE", "USDT") is None
    assert CryptoCompareSource().fetch_current("HYPE", "USDT") is None


def test_create_source():
    source = create_source("binance", timeout=5.0)
    assert isinstance(source, BinanceSource)
    assert source.timeout == 5.0
    with pytest.raises(ValueError):
        create_source("kraken")
