"""
OHLCV Loader
============

Loads candles from a JSON file or an http(s) URL. The payload is an
array of {timestamp, open, high, low, close, volume} objects ordered
by timestamp.
"""

import json
import logging
import math
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any, List, Union

from findscan.models import OHLCV

logger = logging.getLogger(__name__)

FIELDS = ("timestamp", "open", "high", "low", "close", "volume")


class DataLoadError(Exception):
    """Candle data missing, unreadable or malformed."""


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read(source: Union[str, Path], timeout: int) -> str:
    if isinstance(source, str) and _is_url(source):
        req = urllib.request.Request(
            source,
            headers={"Accept": "application/json", "User-Agent": "FindScan/1.0"},
        )
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                return resp.read().decode("utf-8")
        except (urllib.error.URLError, OSError, UnicodeDecodeError) as e:
            raise DataLoadError(f"Failed to load OHLCV data from {source}: {e}") from e

    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Failed to load OHLCV data from {path}: {e}") from e


def _number(row: dict, key: str, index: int) -> float:
    value = row[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DataLoadError(f"Candle {index}: '{key}' is not a number ({value!r})")
    if not math.isfinite(value):
        raise DataLoadError(f"Candle {index}: '{key}' is not finite")
    return float(value)


def parse_ohlcv(rows: Any) -> List[OHLCV]:
    """Convert decoded JSON into candles, checking order and fields."""
    if not isinstance(rows, list):
        raise DataLoadError("OHLCV payload must be a JSON array")

    candles: List[OHLCV] = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict):
            raise DataLoadError(f"Candle {i}: expected an object, got {type(row).__name__}")
        missing = [k for k in FIELDS if k not in row]
        if missing:
            raise DataLoadError(f"Candle {i}: missing {', '.join(missing)}")

        timestamp = row["timestamp"]
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise DataLoadError(f"Candle {i}: timestamp must be an integer")

        candle = OHLCV(
            timestamp=timestamp,
            open=_number(row, "open", i),
            high=_number(row, "high", i),
            low=_number(row, "low", i),
            close=_number(row, "close", i),
            volume=_number(row, "volume", i),
        )
        if candle.volume < 0:
            raise DataLoadError(f"Candle {i}: negative volume")
        if candles and candle.timestamp <= candles[-1].timestamp:
            raise DataLoadError(
                f"Candle {i}: timestamp {candle.timestamp} not after {candles[-1].timestamp}"
            )
        candles.append(candle)

    return candles


def load_ohlcv(source: Union[str, Path], timeout: int = 15) -> List[OHLCV]:
    """Load candles from a path or URL."""
    raw = _read(source, timeout)
    try:
        rows = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON in {source}: {e}") from e

    candles = parse_ohlcv(rows)
    logger.info(f"✅ Loaded {len(candles)} candles from {source}")
    return candles
