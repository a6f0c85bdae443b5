"""
Tests for DataFrame replay: bars_from_frame, replay_frame, warmup helper.
"""

import logging

import numpy as np
import pandas as pd
import pytest

from barflow.indicators import (
    Atr,
    Ema,
    Sma,
    StochasticRsi,
    bars_from_frame,
    get_warmup_from_indicators,
    replay_frame,
)


class TestBarsFromFrame:
    """DataFrame rows -> PriceBars."""

    def test_converts_rows(self, ohlcv_frame):
        """Each row becomes a PriceBar with the same prices."""
        bars = bars_from_frame(ohlcv_frame)
        assert len(bars) == len(ohlcv_frame)
        first = ohlcv_frame.iloc[0]
        assert bars[0].close == first["close"]
        assert bars[0].volume == first["volume"]

    def test_missing_column(self, ohlcv_frame):
        """Missing OHLC columns fail loudly."""
        with pytest.raises(ValueError, match="missing required columns"):
            bars_from_frame(ohlcv_frame.drop(columns=["low"]))

    def test_nan_volume_becomes_none(self):
        """NaN volume is treated as missing."""
        df = pd.DataFrame(
            {"open": [1.0], "high": [2.0], "low": [0.5], "close": [1.5], "volume": [np.nan]}
        )
        bar = bars_from_frame(df)[0]
        assert bar.volume is None
        assert bar.source("volume") == 0.0

    def test_timestamps_passed_through(self):
        """open_time / close_time columns are carried onto the bars."""
        df = pd.DataFrame(
            {
                "open": [1.0],
                "high": [2.0],
                "low": [0.5],
                "close": [1.5],
                "open_time": [1_700_000_000_000],
                "close_time": [1_700_000_059_999],
            }
        )
        bar = bars_from_frame(df)[0]
        assert bar.open_time == 1_700_000_000_000
        assert bar.close_time == 1_700_000_059_999
        assert bar.volume is None


class TestReplayFrame:
    """replay_frame() output frame."""

    def test_sma_matches_rolling(self, ohlcv_frame):
        """A replayed SMA equals the pandas rolling mean, NaN while warming."""
        result = replay_frame(Sma(periods=10), ohlcv_frame)
        assert list(result.columns) == ["value"]
        assert result.index.equals(ohlcv_frame.index)
        expected = ohlcv_frame["close"].rolling(10).mean()
        np.testing.assert_allclose(result["value"], expected, rtol=1e-9, equal_nan=True)

    def test_multi_field_value(self, ohlcv_frame):
        """StochRSI replays into k and d columns."""
        stoch = StochasticRsi(periods=6)
        result = replay_frame(stoch, ohlcv_frame)
        assert set(result.columns) == {"k", "d"}
        assert result["k"].iloc[: stoch.warmup_bars - 1].isna().all()
        assert result["k"].iloc[stoch.warmup_bars - 1:].notna().all()

    def test_reset_flag(self, ohlcv_frame):
        """reset=False continues from existing state."""
        ema = Ema(periods=5)
        replay_frame(ema, ohlcv_frame.iloc[:50])
        continued = replay_frame(ema, ohlcv_frame.iloc[50:], reset=False)
        assert continued["value"].notna().all()
        fresh = replay_frame(ema, ohlcv_frame.iloc[50:])
        assert fresh["value"].isna().sum() == 4

    def test_logs_row_count(self, ohlcv_frame, caplog):
        """Replay logs the number of rows at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="barflow"):
            replay_frame(Sma(periods=3), ohlcv_frame.iloc[:10])
        assert any("Replayed 10 rows" in r.getMessage() for r in caplog.records)


class TestWarmupHelper:
    """get_warmup_from_indicators()."""

    def test_max_warmup(self):
        """Largest warmup across indicators, 0 when empty."""
        assert get_warmup_from_indicators([Sma(periods=5), Atr(periods=14), Ema(periods=9)]) == 14
        assert get_warmup_from_indicators([]) == 0
