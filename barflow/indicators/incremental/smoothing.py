"""
Recursive smoothing primitives shared by EMA, RSI, ATR and ADX.

- RecursiveSmoother: EMA or Wilder recurrence seeded by a simple average.
- ChangeBuffer: Wilder-averaged gains/losses of a price-change series (RSI).
- DirectionalMovementBuffer: true range and +DM/-DM smoothing, producing DX.

Each keeps a committed state that only finalized updates advance, and an
observable state that provisional updates may overwrite. Provisional steps
always start from the committed state.
"""

from __future__ import annotations

from ...config.constants import DX_EPSILON, PERCENT_SCALE
from ...structures import RingBuffer, SlidingWindowAggregate

SMOOTHING_METHODS = ("ema", "wilder")


def true_range(high: float, low: float, prev_close: float | None) -> float:
    """max(high-low, |high-prev_close|, |low-prev_close|); high-low on the first bar."""
    if prev_close is None:
        return high - low
    return max(high - low, abs(high - prev_close), abs(low - prev_close))


def directional_movement(
    high: float, low: float, prev_high: float, prev_low: float
) -> tuple[float, float]:
    """Return (+DM, -DM) for a bar given the previous bar's high and low."""
    up = high - prev_high
    down = prev_low - low
    plus_dm = up if up > down and up > 0 else 0.0
    minus_dm = down if down > up and down > 0 else 0.0
    return plus_dm, minus_dm


def compute_rsi(avg_gain: float, avg_loss: float) -> float:
    """RSI from Wilder averages; exactly 100 when there were no losses."""
    if avg_loss == 0:
        return PERCENT_SCALE
    rs = avg_gain / avg_loss
    return PERCENT_SCALE - PERCENT_SCALE / (1.0 + rs)


class RecursiveSmoother:
    """
    EMA / Wilder smoothing with a simple-average seed.

    Formula:
        ema:    new = alpha * x + (1 - alpha) * prev,  alpha = 2 / (periods + 1)
        wilder: new = (prev * (periods - 1) + x) / periods

    The first `periods` finalized samples are averaged to seed the
    recurrence. Provisional samples are ignored until seeded.
    """

    __slots__ = ("periods", "method", "_alpha", "_warmup", "_committed", "_value")

    def __init__(self, periods: int, method: str = "wilder") -> None:
        if periods < 1:
            raise ValueError(
                f"periods must be >= 1, got {periods}\n"
                f"\n"
                f"Fix: RecursiveSmoother(periods=14, method='wilder')"
            )
        if method not in SMOOTHING_METHODS:
            raise ValueError(
                f"Unknown smoothing method '{method}'. Valid: {list(SMOOTHING_METHODS)}\n"
                f"\n"
                f"Fix: RecursiveSmoother(periods=14, method='ema')"
            )
        self.periods = periods
        self.method = method
        self._alpha = 2.0 / (periods + 1)
        self._warmup = SlidingWindowAggregate(periods)
        self._committed: float | None = None
        self._value: float | None = None

    def _step(self, prev: float, x: float) -> float:
        if self.method == "ema":
            return self._alpha * x + (1.0 - self._alpha) * prev
        return (prev * (self.periods - 1) + x) / self.periods

    def update_close(self, x: float) -> float | None:
        """Commit a sample. Returns the new value, or None while warming."""
        if self._committed is None:
            self._warmup.push_close(x)
            if not self._warmup.is_ready:
                return None
            new = self._warmup.committed_mean()
        else:
            new = self._step(self._committed, x)
        self._committed = new
        self._value = new
        return new

    def update_provisional(self, x: float) -> float | None:
        """Observable value for a forming sample. None while warming."""
        if self._committed is None:
            return None
        self._value = self._step(self._committed, x)
        return self._value

    @property
    def value(self) -> float | None:
        """Observable value (last provisional or committed)."""
        return self._value

    @property
    def committed(self) -> float | None:
        return self._committed

    @property
    def is_ready(self) -> bool:
        return self._committed is not None

    def reset(self) -> None:
        self._warmup.reset()
        self._committed = None
        self._value = None


class ChangeBuffer:
    """
    Window of signed price changes with Wilder-averaged gain and loss.

    While filling, gains and losses are summed. When the window first fills
    the averages are seeded as simple means and RSI becomes available.
    Afterwards each finalized change applies:

        avg_gain = (avg_gain * (n - 1) + gain) / n
        avg_loss = (avg_loss * (n - 1) + loss) / n
    """

    __slots__ = (
        "periods",
        "_changes",
        "_sum_gain",
        "_sum_loss",
        "_avg_gain",
        "_avg_loss",
        "_obs_gain",
        "_obs_loss",
        "_open",
    )

    def __init__(self, periods: int) -> None:
        if periods < 1:
            raise ValueError(
                f"periods must be >= 1, got {periods}\n"
                f"\n"
                f"Fix: ChangeBuffer(periods=14)"
            )
        self.periods = periods
        self._changes = RingBuffer(periods)
        self._init_state()

    def _init_state(self) -> None:
        self._sum_gain = 0.0
        self._sum_loss = 0.0
        self._avg_gain: float | None = None
        self._avg_loss: float | None = None
        self._obs_gain: float | None = None
        self._obs_loss: float | None = None
        self._open = False

    def _wilder(self, avg: float, x: float) -> float:
        return (avg * (self.periods - 1) + x) / self.periods

    def push_close(self, change: float) -> bool:
        """Commit a change. Returns True once RSI is available."""
        self._open = False
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        self._changes.push(change)

        if self._avg_gain is None:
            self._sum_gain += gain
            self._sum_loss += loss
            if not self._changes.is_full():
                return False
            self._avg_gain = self._sum_gain / self.periods
            self._avg_loss = self._sum_loss / self.periods
        else:
            self._avg_gain = self._wilder(self._avg_gain, gain)
            self._avg_loss = self._wilder(self._avg_loss, loss)

        self._obs_gain = self._avg_gain
        self._obs_loss = self._avg_loss
        return True

    def push_provisional(self, change: float) -> bool:
        """Replace the open change. Returns False (no-op) until seeded."""
        if self._avg_gain is None:
            return False
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        self._obs_gain = self._wilder(self._avg_gain, gain)
        self._obs_loss = self._wilder(self._avg_loss, loss)
        self._open = True
        return True

    def rsi(self) -> float | None:
        """Observable RSI, None until the first window of changes is complete."""
        if self._obs_gain is None:
            return None
        return compute_rsi(self._obs_gain, self._obs_loss)

    @property
    def avg_gain(self) -> float | None:
        return self._obs_gain

    @property
    def avg_loss(self) -> float | None:
        return self._obs_loss

    @property
    def in_candle(self) -> bool:
        return self._open

    @property
    def is_ready(self) -> bool:
        return self._avg_gain is not None

    def changes(self):
        """Committed changes, oldest first (numpy array)."""
        return self._changes.to_array()

    def reset(self) -> None:
        self._changes.clear()
        self._init_state()


class DirectionalMovementBuffer:
    """
    True range and directional movement, Wilder-smoothed over `di_length`.

    Formula:
        +DI = 100 * smoothed(+DM) / smoothed(TR)
        -DI = 100 * smoothed(-DM) / smoothed(TR)
        DX  = 100 * |+DI - -DI| / (+DI + -DI)

    DX is 0 when smoothed TR is within machine epsilon of zero or when
    +DI + -DI is 0. TR is counted from the first bar, DM from the second.
    """

    __slots__ = (
        "di_length",
        "_tr",
        "_plus_dm",
        "_minus_dm",
        "_prev_high",
        "_prev_low",
        "_prev_close",
        "_dx",
        "_plus_di",
        "_minus_di",
    )

    def __init__(self, di_length: int) -> None:
        if di_length < 1:
            raise ValueError(
                f"di_length must be >= 1, got {di_length}\n"
                f"\n"
                f"Fix: DirectionalMovementBuffer(di_length=14)"
            )
        self.di_length = di_length
        self._tr = RecursiveSmoother(di_length, "wilder")
        self._plus_dm = RecursiveSmoother(di_length, "wilder")
        self._minus_dm = RecursiveSmoother(di_length, "wilder")
        self._init_state()

    def _init_state(self) -> None:
        self._prev_high: float | None = None
        self._prev_low: float | None = None
        self._prev_close: float | None = None
        self._dx: float | None = None
        self._plus_di: float | None = None
        self._minus_di: float | None = None

    def update_close(self, high: float, low: float, close: float) -> float | None:
        """Commit a bar. Returns DX once all three smoothers are seeded."""
        tr_s = self._tr.update_close(true_range(high, low, self._prev_close))
        plus_s = minus_s = None
        if self._prev_high is not None:
            plus_dm, minus_dm = directional_movement(high, low, self._prev_high, self._prev_low)
            plus_s = self._plus_dm.update_close(plus_dm)
            minus_s = self._minus_dm.update_close(minus_dm)

        self._prev_high = high
        self._prev_low = low
        self._prev_close = close

        if tr_s is None or plus_s is None or minus_s is None:
            return None
        return self._apply(tr_s, plus_s, minus_s)

    def update_provisional(self, high: float, low: float, close: float) -> float | None:
        """Candidate DX for a forming bar; committed state untouched."""
        if self._prev_close is None:
            return None
        tr_s = self._tr.update_provisional(true_range(high, low, self._prev_close))
        plus_dm, minus_dm = directional_movement(high, low, self._prev_high, self._prev_low)
        plus_s = self._plus_dm.update_provisional(plus_dm)
        minus_s = self._minus_dm.update_provisional(minus_dm)
        if tr_s is None or plus_s is None or minus_s is None:
            return None
        return self._apply(tr_s, plus_s, minus_s)

    def _apply(self, tr_s: float, plus_s: float, minus_s: float) -> float:
        if tr_s <= DX_EPSILON:
            self._plus_di = 0.0
            self._minus_di = 0.0
            self._dx = 0.0
            return self._dx
        plus_di = PERCENT_SCALE * plus_s / tr_s
        minus_di = PERCENT_SCALE * minus_s / tr_s
        di_sum = plus_di + minus_di
        self._plus_di = plus_di
        self._minus_di = minus_di
        self._dx = 0.0 if di_sum == 0 else PERCENT_SCALE * abs(plus_di - minus_di) / di_sum
        return self._dx

    @property
    def dx(self) -> float | None:
        return self._dx

    @property
    def plus_di(self) -> float | None:
        return self._plus_di

    @property
    def minus_di(self) -> float | None:
        return self._minus_di

    @property
    def is_ready(self) -> bool:
        return self._dx is not None

    def reset(self) -> None:
        self._tr.reset()
        self._plus_dm.reset()
        self._minus_dm.reset()
        self._init_state()
