"""Bollinger Bands computation for OHLCV candle charts."""

__version__ = "1.0.0"
