"""
Configuration Module
====================

Bollinger Bands inputs/style, data source and logging settings.
Loads from YAML and overrides from environment variables.
"""

import dataclasses
import os
import logging
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
import yaml
from dotenv import load_dotenv

from findscan.indicators.source import is_known_source
from findscan.models import (
    BackgroundFill,
    BandStyle,
    BollingerBandsSettings,
    LineStyle,
    MAType,
    SourceType,
)

load_dotenv()

logger = logging.getLogger(__name__)

BAND_KEYS = ("basic_band", "upper_band", "lower_band")


# ============================================================================
# SECTION CONFIGS
# ============================================================================

@dataclass
class DataConfig:
    """📂 Candle source: file path or http(s) URL"""
    path: str = "data/ohlcv.json"
    timeout: int = 15


@dataclass
class TableConfig:
    """📋 Latest values table"""
    rows: int = 5


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


# ============================================================================
# SETTINGS PARSING
# ============================================================================

def _known_fields(cls, data: dict, section: str) -> dict:
    names = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(data) - names)
    if unknown:
        logger.warning(f"Ignoring unknown {section} keys: {', '.join(unknown)}")
    return {k: v for k, v in data.items() if k in names}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _enum_or_raw(enum_cls, value):
    """Enum member when the value is known, the raw value otherwise."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _band_style(data: dict, section: str) -> BandStyle:
    kwargs = _known_fields(BandStyle, data, section)
    if "line_style" in kwargs:
        kwargs["line_style"] = _enum_or_raw(LineStyle, kwargs["line_style"])
    return BandStyle(**kwargs)


def settings_from_dict(data: dict) -> BollingerBandsSettings:
    kwargs = _known_fields(BollingerBandsSettings, data, "bollinger")
    for band in BAND_KEYS:
        if isinstance(kwargs.get(band), dict):
            kwargs[band] = _band_style(kwargs[band], f"bollinger.{band}")
    if isinstance(kwargs.get("background_fill"), dict):
        kwargs["background_fill"] = BackgroundFill(
            **_known_fields(BackgroundFill, kwargs["background_fill"], "bollinger.background_fill")
        )
    if "basic_ma_type" in kwargs:
        kwargs["basic_ma_type"] = _enum_or_raw(MAType, kwargs["basic_ma_type"])
    if "source" in kwargs:
        kwargs["source"] = _enum_or_raw(SourceType, kwargs["source"])
    return BollingerBandsSettings(**kwargs)


# ============================================================================
# MAIN CONFIG
# ============================================================================

@dataclass
class Config:
    """Main configuration container."""

    bollinger: BollingerBandsSettings = field(default_factory=BollingerBandsSettings)
    data: DataConfig = field(default_factory=DataConfig)
    table: TableConfig = field(default_factory=TableConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: str = "config.yaml") -> "Config":
        config = cls()
        if Path(config_path).exists():
            with open(config_path, "r") as f:
                yaml_config = yaml.safe_load(f) or {}
            config = cls._from_dict(yaml_config)
            logger.info(f"Loaded configuration from {config_path}")
        else:
            logger.warning(f"Config file {config_path} not found, using defaults/env vars")
        config._load_from_env()
        return config

    def _load_from_env(self) -> None:
        """Override from environment variables."""
        bb = {}
        if v := os.getenv("BB_LENGTH"):
            bb["length"] = self._parse("BB_LENGTH", v, int)
        if v := os.getenv("BB_SOURCE"):
            bb["source"] = _enum_or_raw(SourceType, v.strip().lower())
        if v := os.getenv("BB_STD_DEV_MULTIPLIER"):
            bb["std_dev_multiplier"] = self._parse("BB_STD_DEV_MULTIPLIER", v, float)
        if v := os.getenv("BB_OFFSET"):
            bb["offset"] = self._parse("BB_OFFSET", v, int)
        bb = {k: v for k, v in bb.items() if v is not None}
        if bb:
            self.bollinger = dataclasses.replace(self.bollinger, **bb)

        # Data
        if v := os.getenv("DATA_PATH"): self.data.path = v
        if v := os.getenv("TABLE_ROWS"):
            rows = self._parse("TABLE_ROWS", v, int)
            if rows is not None:
                self.table.rows = rows

        # Logging
        if v := os.getenv("LOG_LEVEL"): self.logging.level = v
        if v := os.getenv("LOG_FILE"): self.logging.file = v

    @staticmethod
    def _parse(name: str, raw: str, cast):
        try:
            return cast(raw.strip())
        except ValueError:
            logger.warning(f"Ignoring {name}={raw!r}: not a valid {cast.__name__}")
            return None

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        config = cls()
        if d := data.get("bollinger"): config.bollinger = settings_from_dict(d)
        if d := data.get("data"): config.data = DataConfig(**_known_fields(DataConfig, d, "data"))
        if d := data.get("table"): config.table = TableConfig(**_known_fields(TableConfig, d, "table"))
        if d := data.get("logging"): config.logging = LoggingConfig(**_known_fields(LoggingConfig, d, "logging"))
        return config

    def validate(self) -> bool:
        """
        Check presentation settings. Numeric band inputs are validated by the
        indicator itself, which degrades to an empty band series.
        """
        ok = True
        bb = self.bollinger

        if bb.basic_ma_type != MAType.SMA:
            logger.error(f"Unsupported MA type: {bb.basic_ma_type}")
            ok = False
        if not is_known_source(bb.source):
            logger.warning(f"Unknown source '{bb.source_name}', close will be used")

        for band in BAND_KEYS:
            style: BandStyle = getattr(bb, band)
            if not _is_int(style.line_width) or not 1 <= style.line_width <= 5:
                logger.error(f"{band}.line_width must be an integer 1-5")
                ok = False
            if style.line_style not in (LineStyle.SOLID, LineStyle.DASHED):
                logger.error(f"{band}.line_style must be solid or dashed")
                ok = False

        opacity = bb.background_fill.opacity
        if isinstance(opacity, bool) or not isinstance(opacity, (int, float)) or not 0 <= opacity <= 1:
            logger.error("background_fill.opacity must be between 0 and 1")
            ok = False

        if not self.data.path:
            logger.error("data.path is required")
            ok = False
        if not _is_int(self.table.rows) or self.table.rows < 1:
            logger.error("table.rows must be an integer >= 1")
            ok = False
        if not _is_int(self.data.timeout) or self.data.timeout < 1:
            logger.error("data.timeout must be an integer >= 1")
            ok = False
        return ok

    def print_config(self) -> None:
        bb = self.bollinger
        logger.info("=" * 60)
        logger.info("FINDSCAN BOLLINGER BANDS CONFIGURATION")
        logger.info("=" * 60)
        logger.info(f"Data: {self.data.path}")
        logger.info(
            f"Bollinger: {bb.basic_ma_type.value if isinstance(bb.basic_ma_type, MAType) else bb.basic_ma_type}"
            f"({bb.length}, {bb.std_dev_multiplier}σ) on {bb.source_name.upper()}"
        )
        logger.info(f"Offset: {bb.offset} bars")
        for band in BAND_KEYS:
            style: BandStyle = getattr(bb, band)
            line_style = style.line_style.value if isinstance(style.line_style, LineStyle) else style.line_style
            logger.info(
                f"{band}: {'ON' if style.visible else 'OFF'} "
                f"({style.color}, {style.line_width}px, {line_style})"
            )
        logger.info(
            f"Fill: {'ON' if bb.background_fill.visible else 'OFF'} "
            f"(opacity {bb.background_fill.opacity})"
        )
        logger.info("=" * 60)
