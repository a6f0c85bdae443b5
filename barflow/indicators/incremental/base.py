"""
Base class for incremental indicators.

All incremental indicators inherit from IncrementalIndicator, which defines
the dual per-bar update interface:

- update_on_close(bar): the bar is final; commit it.
- update_provisional(bar): the bar is still forming; recompute the
  observable value without committing. Repeated calls for the same bar
  replace each other, and the next update_on_close() starts from the
  committed state as if no provisional call had happened.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

import numpy as np

from ..types import PriceBar, Value

logger = logging.getLogger(__name__)


class IncrementalIndicator(ABC):
    """Base class for incremental indicators."""

    @abstractmethod
    def update_on_close(self, bar: PriceBar) -> None:
        """Commit a closed bar."""
        ...

    @abstractmethod
    def update_provisional(self, bar: PriceBar) -> None:
        """Recompute the observable value for a still-forming bar."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Reset state to initial."""
        ...

    @abstractmethod
    def get_last(self) -> Value | None:
        """Latest observable value, None while warming up."""
        ...

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """True when warmup period complete."""
        ...

    @property
    @abstractmethod
    def period(self) -> int:
        """Primary window length."""
        ...

    @property
    @abstractmethod
    def warmup_bars(self) -> int:
        """Number of finalized bars needed before is_ready."""
        ...

    def load(self, bars: Iterable[PriceBar]) -> None:
        """Replay history as finalized bars."""
        count = 0
        for bar in bars:
            self.update_on_close(bar)
            count += 1
        logger.debug("%s loaded %d bars (ready=%s)", type(self).__name__, count, self.is_ready)

    @property
    def value(self) -> float:
        """Primary scalar of get_last(), NaN while warming up."""
        last = self.get_last()
        if last is None:
            return np.nan
        return last.primary
