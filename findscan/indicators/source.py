"""
Source Selection
================

Picks the candle field that feeds an indicator.
"""

from typing import List, Sequence, Union

from findscan.models import OHLCV, SourceType


def get_source_value(candle: OHLCV, source: Union[SourceType, str]) -> float:
    """open/high/low/close; anything unrecognized falls back to close."""
    if source == SourceType.OPEN:
        return candle.open
    if source == SourceType.HIGH:
        return candle.high
    if source == SourceType.LOW:
        return candle.low
    return candle.close


def get_source_values(candles: Sequence[OHLCV], source: Union[SourceType, str]) -> List[float]:
    return [get_source_value(c, source) for c in candles]


def is_known_source(source: Union[SourceType, str]) -> bool:
    return any(source == s for s in SourceType)
