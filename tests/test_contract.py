"""
Dual-update contract shared by every incremental indicator.

- is_ready turns true exactly on finalized bar number warmup_bars
- reset() + load() reproduces a fresh instance bit for bit
- provisional updates are idempotent and leave no trace once the bar closes
- provisional updates before any history are no-ops
"""

import dataclasses

import numpy as np
import pytest

from barflow.indicators import PriceBar, create_incremental_indicator


INDICATOR_CASES = [
    ("sma", {"periods": 7}),
    ("mean", {"periods": 6, "source": "hlc3"}),
    ("stddev", {"periods": 8}),
    ("ema", {"periods": 9}),
    ("ema_cross", {"short_periods": 4, "long_periods": 10}),
    ("rsi", {"periods": 7, "stoch_length": 5, "sma_length": 4}),
    ("stochrsi", {"periods": 6, "k_smoothing": 3, "d_smoothing": 3}),
    ("atr", {"periods": 7}),
    ("adx", {"periods": 5, "di_length": 6}),
    ("hist_vol", {"periods": 10}),
    ("volume_ma", {"periods": 5}),
]


def _ids(case):
    return case[0]


def _build(case):
    indicator_type, params = case
    return create_incremental_indicator(indicator_type, params)


def _jitter(bar: PriceBar, factor: float) -> PriceBar:
    return dataclasses.replace(
        bar,
        high=bar.high * factor,
        low=bar.low * factor,
        close=bar.close * factor,
    )


@pytest.fixture(params=INDICATOR_CASES, ids=_ids)
def case(request):
    return request.param


class TestReadiness:
    """Warming -> Ready transition."""

    def test_ready_exactly_at_warmup_bars(self, case, random_bars):
        """is_ready first becomes true on finalized update number warmup_bars."""
        indicator = _build(case)
        warmup = indicator.warmup_bars
        for i, bar in enumerate(random_bars[: warmup + 5], start=1):
            indicator.update_on_close(bar)
            assert indicator.is_ready is (i >= warmup), f"bar {i}"
            assert (indicator.get_last() is None) is (i < warmup)

    def test_value_nan_while_warming(self, case, random_bars):
        """value is NaN until ready, then the primary scalar."""
        indicator = _build(case)
        assert np.isnan(indicator.value)
        indicator.load(random_bars[: indicator.warmup_bars])
        assert indicator.value == indicator.get_last().primary

    def test_period_is_positive(self, case):
        """period reports the primary window length."""
        assert _build(case).period >= 1


class TestReset:
    """reset() restores the just-constructed state."""

    def test_reset_then_load_is_bit_identical(self, case, random_bars):
        """A reset instance replays history exactly like a fresh one."""
        used = _build(case)
        used.load(random_bars[:80])
        used.update_provisional(_jitter(random_bars[80], 1.02))
        used.reset()
        assert used.get_last() is None
        assert not used.is_ready

        fresh = _build(case)
        for bar in random_bars:
            used.update_on_close(bar)
            fresh.update_on_close(bar)
            assert used.get_last() == fresh.get_last()


class TestProvisional:
    """update_provisional() never corrupts committed state."""

    def test_idempotent(self, case, random_bars):
        """Two identical provisional calls give the same observable value."""
        indicator = _build(case)
        indicator.load(random_bars[:100])
        forming = _jitter(random_bars[100], 1.01)
        indicator.update_provisional(forming)
        first = indicator.get_last()
        indicator.update_provisional(forming)
        assert indicator.get_last() == first

    def test_close_after_provisional_equals_close_only(self, case, random_bars):
        """Finalizing after provisional ticks equals finalizing directly."""
        live = _build(case)
        replay = _build(case)
        for i, bar in enumerate(random_bars):
            live.update_provisional(_jitter(bar, 1.03))
            live.update_provisional(_jitter(bar, 0.97))
            if i % 2:
                live.update_provisional(bar)
            live.update_on_close(bar)
            replay.update_on_close(bar)
            assert live.get_last() == replay.get_last(), f"bar {i}"

    def test_provisional_previews_close(self, case, random_bars):
        """A provisional update with the final bar previews the finalized value."""
        live = _build(case)
        live.load(random_bars[:120])
        bar = random_bars[120]
        live.update_provisional(bar)
        preview = live.get_last()
        live.update_on_close(bar)
        assert preview.primary == pytest.approx(live.get_last().primary, rel=1e-9)

    def test_provisional_before_history_is_noop(self, case, random_bars):
        """Provisional updates with no finalized history change nothing."""
        indicator = _build(case)
        indicator.update_provisional(random_bars[0])
        assert indicator.get_last() is None
        assert not indicator.is_ready

        fresh = _build(case)
        indicator.load(random_bars[:60])
        fresh.load(random_bars[:60])
        assert indicator.get_last() == fresh.get_last()

    def test_provisional_does_not_advance_warmup(self, case, random_bars):
        """Only finalized bars count toward warm-up."""
        indicator = _build(case)
        warmup = indicator.warmup_bars
        indicator.load(random_bars[: warmup - 1])
        for _ in range(3):
            indicator.update_provisional(random_bars[warmup - 1])
        assert not indicator.is_ready
        indicator.update_on_close(random_bars[warmup - 1])
        assert indicator.is_ready
