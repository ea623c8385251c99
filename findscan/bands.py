"""
Bollinger Bands for Candles
============================

Turns a candle series plus settings into timestamped band points.
Invalid parameters never raise here: they are logged and produce an
empty result so the chart keeps rendering candles.
"""

import logging
from typing import List, Sequence

from findscan.indicators.bollinger import (
    BollingerBandsInput,
    ValidationError,
    compute_bollinger_bands,
    validate_bollinger_bands_input,
)
from findscan.indicators.source import get_source_values, is_known_source
from findscan.models import OHLCV, BollingerBandsData, BollingerBandsSettings

logger = logging.getLogger(__name__)


def calculate_bollinger_bands(
    candles: Sequence[OHLCV],
    settings: BollingerBandsSettings,
) -> List[BollingerBandsData]:
    if not candles:
        return []

    if not is_known_source(settings.source):
        logger.warning(f"Unknown source '{settings.source_name}', using close")

    bb_input = BollingerBandsInput(
        values=get_source_values(candles, settings.source),
        length=settings.length,
        std_dev_multiplier=settings.std_dev_multiplier,
        offset=settings.offset,
    )

    try:
        validate_bollinger_bands_input(bb_input)
    except ValidationError as e:
        logger.error(f"Invalid Bollinger Bands parameters: {e}")
        return []

    results = compute_bollinger_bands(bb_input)

    points = [
        BollingerBandsData(
            timestamp=candle.timestamp,
            basis=result.basis,
            upper=result.upper,
            lower=result.lower,
        )
        for candle, result in zip(candles, results)
        if result.is_defined
    ]
    logger.debug(
        f"BB({settings.length}, {settings.std_dev_multiplier}, {settings.source_name}, "
        f"offset={settings.offset}): {len(points)}/{len(candles)} points"
    )
    return points
