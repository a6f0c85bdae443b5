"""
Volume-based incremental indicators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ...config.constants import DEFAULT_VOLUME_MA_PERIODS
from ..types import PriceBar, ScalarValue, VolumeMaValue
from .core import _WindowIndicator


@dataclass
class VolumeMovingAverage(_WindowIndicator):
    """
    Simple moving average of bar volume.

    Bars without volume count as 0.0.
    """

    periods: int = DEFAULT_VOLUME_MA_PERIODS

    _value_type: ClassVar[type[ScalarValue]] = VolumeMaValue

    def _sample(self, bar: PriceBar) -> float:
        return bar.source("volume")
