"""
Tests for ATR, ADX, historical volatility and volume MA.
"""

import math

import numpy as np
import pytest

from barflow.indicators import (
    Adx,
    AdxValue,
    Atr,
    AtrValue,
    HistoricalVolatility,
    HistVolatilityValue,
    PriceBar,
    VolumeMaValue,
    VolumeMovingAverage,
)


class TestAtr:
    """Average True Range."""

    def test_three_bar_scenario(self, make_bar):
        """TRs 5, 6, 7 seed ATR(3) at 6.0."""
        atr = Atr(periods=3)
        atr.update_on_close(make_bar(8.0, high=10.0, low=5.0))
        atr.update_on_close(make_bar(10.0, high=12.0, low=6.0))
        assert not atr.is_ready
        atr.update_on_close(make_bar(11.0, high=14.0, low=7.0))
        assert atr.is_ready
        assert atr.get_last() == AtrValue(6.0)

    def test_wilder_recurrence(self, random_bars):
        """After the seed, ATR follows (atr * (n - 1) + tr) / n."""
        periods = 5
        trs = []
        prev_close = None
        for bar in random_bars:
            if prev_close is None:
                trs.append(bar.high - bar.low)
            else:
                trs.append(max(bar.high - bar.low, abs(bar.high - prev_close), abs(bar.low - prev_close)))
            prev_close = bar.close
        expected = sum(trs[:periods]) / periods
        for tr in trs[periods:]:
            expected = (expected * (periods - 1) + tr) / periods

        atr = Atr(periods=periods)
        atr.load(random_bars)
        assert atr.value == pytest.approx(expected, rel=1e-9)

    def test_normalized(self, make_bar):
        """NATR is ATR as a percent of price."""
        atr = Atr(periods=3)
        atr.update_on_close(make_bar(8.0, high=10.0, low=5.0))
        atr.update_on_close(make_bar(10.0, high=12.0, low=6.0))
        assert atr.normalized(100.0) is None
        atr.update_on_close(make_bar(11.0, high=14.0, low=7.0))
        assert atr.normalized(120.0) == pytest.approx(5.0)
        assert atr.normalized(0.0) is None

    def test_provisional_preview(self, make_bar):
        """A provisional bar previews ATR without committing it."""
        atr = Atr(periods=3)
        atr.update_on_close(make_bar(8.0, high=10.0, low=5.0))
        atr.update_on_close(make_bar(10.0, high=12.0, low=6.0))
        atr.update_on_close(make_bar(11.0, high=14.0, low=7.0))
        atr.update_provisional(make_bar(11.0, high=20.0, low=11.0))
        assert atr.value == pytest.approx((6.0 * 2 + 9.0) / 3)
        atr.update_on_close(make_bar(11.0, high=12.0, low=9.0))
        assert atr.value == pytest.approx((6.0 * 2 + 3.0) / 3)

    def test_invalid_periods(self):
        """periods must be > 0."""
        with pytest.raises(ValueError, match="Fix:"):
            Atr(periods=0)


class TestAdx:
    """Average Directional Index."""

    def test_flat_series_dx_zero(self, make_bar):
        """A flat series has DX 0 at every computed step, never NaN."""
        adx = Adx(periods=3, di_length=3)
        seen = []
        for _ in range(15):
            adx.update_on_close(make_bar(50.0))
            if adx.dx is not None:
                seen.append(adx.dx)
        assert seen
        assert all(dx == 0.0 for dx in seen)
        assert adx.get_last() == AdxValue(0.0)
        assert not math.isnan(adx.value)

    def test_ready_after_di_length_plus_periods(self, random_bars):
        """ADX needs di_length + periods bars."""
        adx = Adx(periods=4, di_length=5)
        for i, bar in enumerate(random_bars[:20], start=1):
            adx.update_on_close(bar)
            assert adx.is_ready is (i >= 9)
        assert adx.warmup_bars == 9

    def test_values_in_range(self, random_bars):
        """ADX, DX and the DIs stay within [0, 100]."""
        adx = Adx(periods=14, di_length=14)
        for bar in random_bars:
            adx.update_on_close(bar)
            if adx.is_ready:
                assert 0.0 <= adx.value <= 100.0
                assert 0.0 <= adx.dx <= 100.0
                assert 0.0 <= adx.plus_di <= 100.0
                assert 0.0 <= adx.minus_di <= 100.0

    def test_strong_uptrend(self):
        """A steady uptrend has +DI dominating and DX at 100."""
        adx = Adx(periods=3, di_length=3)
        for i in range(20):
            base = 100.0 + 2.0 * i
            adx.update_on_close(PriceBar(open=base, high=base + 1.0, low=base - 1.0, close=base + 0.5))
        assert adx.dx == pytest.approx(100.0)
        assert adx.minus_di == 0.0
        assert adx.value == pytest.approx(100.0)


class TestHistoricalVolatility:
    """Annualized close-to-close volatility."""

    def test_matches_pandas(self, random_bars, ohlcv_frame):
        """HV equals rolling std of log returns * sqrt(365) * 100."""
        periods = 20
        log_ret = np.log(ohlcv_frame["close"] / ohlcv_frame["close"].shift(1))
        expected = (log_ret.rolling(periods).std() * math.sqrt(365.0) * 100.0).to_numpy()

        hv = HistoricalVolatility(periods=periods)
        actual = []
        for bar in random_bars:
            hv.update_on_close(bar)
            actual.append(hv.value)
        np.testing.assert_allclose(actual, expected, rtol=1e-6, equal_nan=True)

    def test_ready_after_periods_plus_one(self, random_bars):
        """periods returns need periods + 1 closes."""
        hv = HistoricalVolatility(periods=5)
        hv.load(random_bars[:5])
        assert not hv.is_ready
        hv.update_on_close(random_bars[5])
        assert isinstance(hv.get_last(), HistVolatilityValue)

    def test_non_positive_close_raises(self, make_bar):
        """A non-positive price is a data error and propagates."""
        hv = HistoricalVolatility(periods=3)
        hv.update_on_close(make_bar(10.0))
        with pytest.raises(ValueError):
            hv.update_on_close(make_bar(0.0))


class TestVolumeMovingAverage:
    """SMA of volume."""

    def test_average_volume(self, make_bar):
        """Averages the last `periods` volumes; missing volume is 0."""
        vma = VolumeMovingAverage(periods=3)
        for volume in (100.0, 200.0, None, 600.0):
            vma.update_on_close(make_bar(1.0, volume=volume))
        assert isinstance(vma.get_last(), VolumeMaValue)
        assert vma.value == pytest.approx(800.0 / 3)

    def test_invalid_periods(self):
        """periods must be > 1."""
        with pytest.raises(ValueError, match="Fix:"):
            VolumeMovingAverage(periods=1)
