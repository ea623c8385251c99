from findscan.utils.data_loader import DataLoadError, load_ohlcv, parse_ohlcv

__all__ = ["DataLoadError", "load_ohlcv", "parse_ohlcv"]
