"""
Chart Models
============

Candle, settings and band-point dataclasses shared by the indicator
engine, the chart adapter and the CLI.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class MAType(str, Enum):
    SMA = "SMA"


class SourceType(str, Enum):
    CLOSE = "close"
    OPEN = "open"
    HIGH = "high"
    LOW = "low"


class LineStyle(str, Enum):
    SOLID = "solid"
    DASHED = "dashed"


@dataclass(frozen=True)
class OHLCV:
    """Single candle. Timestamp is epoch milliseconds."""
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class BandStyle:
    visible: bool = True
    color: str = "#2196F3"
    line_width: int = 1
    line_style: LineStyle = LineStyle.SOLID


@dataclass(frozen=True)
class BackgroundFill:
    visible: bool = True
    opacity: float = 0.1


@dataclass(frozen=True)
class BollingerBandsSettings:
    """
    Bollinger Bands inputs and style.

    Only length, source, std_dev_multiplier and offset change the numbers;
    everything else is presentation.
    """

    length: int = 20
    basic_ma_type: MAType = MAType.SMA
    source: Union[SourceType, str] = SourceType.CLOSE
    std_dev_multiplier: float = 2.0
    offset: int = 0

    basic_band: BandStyle = field(default_factory=BandStyle)
    upper_band: BandStyle = field(default_factory=BandStyle)
    lower_band: BandStyle = field(default_factory=BandStyle)
    background_fill: BackgroundFill = field(default_factory=BackgroundFill)

    @property
    def source_name(self) -> str:
        return self.source.value if isinstance(self.source, SourceType) else str(self.source)

    def numeric_key(self) -> tuple:
        """Fields that invalidate computed bands when changed."""
        return (self.length, self.source_name, self.std_dev_multiplier, self.offset)


DEFAULT_BOLLINGER_SETTINGS = BollingerBandsSettings()


@dataclass(frozen=True)
class BollingerBandsData:
    """Band point emitted only where basis, upper and lower all exist."""
    timestamp: int
    basis: float
    upper: float
    lower: float

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "basis": self.basis,
            "upper": self.upper,
            "lower": self.lower,
        }
