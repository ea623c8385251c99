"""
Chart Adapter
=============

Plain-data view of the bands for a rendering layer: line series per
visible band, the optional background fill, the summary cards and the
latest-values table. BollingerChart keeps candles and settings together
and recomputes only when the numbers can change.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from findscan.bands import calculate_bollinger_bands
from findscan.models import (
    DEFAULT_BOLLINGER_SETTINGS,
    OHLCV,
    BandStyle,
    BollingerBandsData,
    BollingerBandsSettings,
    LineStyle,
)

logger = logging.getLogger(__name__)

DASHED = [5, 5]
SOLID = [0]

# (settings attribute, series key, title, point attribute)
BAND_LINES = (
    ("upper_band", "up", "UP", "upper"),
    ("basic_band", "mid", "MID", "basis"),
    ("lower_band", "dn", "DN", "lower"),
)


@dataclass
class LineSeries:
    key: str
    title: str
    color: str
    line_width: int
    dash: List[int]
    points: List[Tuple[int, float]] = field(default_factory=list)


@dataclass
class BandFill:
    opacity: float
    points: List[Tuple[int, float, float]] = field(default_factory=list)


@dataclass
class SummaryRow:
    timestamp: int
    close: Optional[float]
    upper: float
    basis: float
    lower: float


@dataclass
class ChartSummary:
    data_points: int
    band_points: int
    latest_close: Optional[float]
    latest_upper: Optional[float]


def _dash(style: BandStyle) -> List[int]:
    return list(DASHED) if style.line_style == LineStyle.DASHED else list(SOLID)


def build_band_series(
    points: Sequence[BollingerBandsData],
    settings: BollingerBandsSettings,
) -> List[LineSeries]:
    """Upper, basis, lower series for the visible bands."""
    series = []
    for attr, key, title, value_attr in BAND_LINES:
        style: BandStyle = getattr(settings, attr)
        if not style.visible:
            continue
        series.append(LineSeries(
            key=key,
            title=title,
            color=style.color,
            line_width=style.line_width,
            dash=_dash(style),
            points=[(p.timestamp, getattr(p, value_attr)) for p in points],
        ))
    return series


def build_fill(
    points: Sequence[BollingerBandsData],
    settings: BollingerBandsSettings,
) -> Optional[BandFill]:
    if not settings.background_fill.visible:
        return None
    return BandFill(
        opacity=settings.background_fill.opacity,
        points=[(p.timestamp, p.upper, p.lower) for p in points],
    )


def latest_rows(
    candles: Sequence[OHLCV],
    points: Sequence[BollingerBandsData],
    rows: int = 5,
) -> List[SummaryRow]:
    """Most recent band points joined with the close of the same candle."""
    if rows <= 0:
        return []
    closes: Dict[int, float] = {c.timestamp: c.close for c in candles}
    return [
        SummaryRow(
            timestamp=p.timestamp,
            close=closes.get(p.timestamp),
            upper=p.upper,
            basis=p.basis,
            lower=p.lower,
        )
        for p in points[-rows:]
    ]


def summarize(candles: Sequence[OHLCV], points: Sequence[BollingerBandsData]) -> ChartSummary:
    return ChartSummary(
        data_points=len(candles),
        band_points=len(points),
        latest_close=candles[-1].close if candles else None,
        latest_upper=points[-1].upper if points else None,
    )


class BollingerChart:
    """
    Candles + settings + the last computed bands.

    Style-only changes reuse the cached bands; candle changes and changes
    to length, source, multiplier or offset trigger a full recompute.
    """

    def __init__(
        self,
        candles: Optional[Sequence[OHLCV]] = None,
        settings: BollingerBandsSettings = DEFAULT_BOLLINGER_SETTINGS,
    ):
        self._candles: List[OHLCV] = list(candles or [])
        self._settings = settings
        self._bands: List[BollingerBandsData] = []
        self._computed_key: Optional[tuple] = None
        self.recompute_count = 0
        self._refresh(force=True)

    @property
    def candles(self) -> List[OHLCV]:
        return self._candles

    @property
    def settings(self) -> BollingerBandsSettings:
        return self._settings

    @property
    def bands(self) -> List[BollingerBandsData]:
        return self._bands

    def set_candles(self, candles: Sequence[OHLCV]) -> None:
        self._candles = list(candles)
        self._refresh(force=True)

    def set_settings(self, settings: BollingerBandsSettings) -> None:
        self._settings = settings
        self._refresh()

    def update_settings(self, **changes) -> None:
        self.set_settings(dataclasses.replace(self._settings, **changes))

    def update_band(self, band: str, **changes) -> None:
        """band is one of basic_band, upper_band, lower_band."""
        if band not in {attr for attr, _, _, _ in BAND_LINES}:
            raise ValueError(f"Unknown band: {band}")
        style = dataclasses.replace(getattr(self._settings, band), **changes)
        self.update_settings(**{band: style})

    def update_background_fill(self, **changes) -> None:
        fill = dataclasses.replace(self._settings.background_fill, **changes)
        self.update_settings(background_fill=fill)

    def reset_to_defaults(self) -> None:
        self.set_settings(DEFAULT_BOLLINGER_SETTINGS)

    def _refresh(self, force: bool = False) -> None:
        key = self._settings.numeric_key()
        if not force and key == self._computed_key:
            return
        self._bands = calculate_bollinger_bands(self._candles, self._settings)
        self._computed_key = key
        self.recompute_count += 1
        logger.debug(f"Recomputed bands: {len(self._bands)} points")

    def series(self) -> List[LineSeries]:
        return build_band_series(self._bands, self._settings)

    def fill(self) -> Optional[BandFill]:
        return build_fill(self._bands, self._settings)

    def summary(self) -> ChartSummary:
        return summarize(self._candles, self._bands)

    def rows(self, count: int = 5) -> List[SummaryRow]:
        return latest_rows(self._candles, self._bands, count)
