"""
Unit Tests for the OHLCV Loader
===============================
"""

import json
from pathlib import Path

import pytest
from findscan.models import OHLCV
from findscan.utils.data_loader import DataLoadError, load_ohlcv, parse_ohlcv


ROWS = [
    {"timestamp": 1704067200000, "open": 42000, "high": 42266.61, "low": 41822.22, "close": 42006.21, "volume": 1057.65},
    {"timestamp": 1704153600000, "open": 42006.21, "high": 42160.66, "low": 41284.63, "close": 41583.42, "volume": 838.31},
]

SAMPLE_FILE = Path(__file__).resolve().parents[1] / "data" / "ohlcv.json"


class TestParse:
    def test_rows(self):
        candles = parse_ohlcv(ROWS)
        assert candles[0] == OHLCV(
            timestamp=1704067200000, open=42000.0, high=42266.61, low=41822.22,
            close=42006.21, volume=1057.65,
        )
        assert isinstance(candles[0].open, float)
        assert candles[1].to_dict() == ROWS[1]

    def test_empty_array(self):
        assert parse_ohlcv([]) == []

    def test_not_an_array(self):
        with pytest.raises(DataLoadError, match="array"):
            parse_ohlcv({"data": ROWS})

    def test_missing_field(self):
        row = dict(ROWS[0])
        del row["low"]
        with pytest.raises(DataLoadError, match="low"):
            parse_ohlcv([row])

    @pytest.mark.parametrize("value", ["42000", None, True, float("nan")])
    def test_bad_number(self, value):
        row = dict(ROWS[0], close=value)
        with pytest.raises(DataLoadError, match="close"):
            parse_ohlcv([row])

    def test_float_timestamp(self):
        with pytest.raises(DataLoadError, match="timestamp"):
            parse_ohlcv([dict(ROWS[0], timestamp=1.5)])

    def test_negative_volume(self):
        with pytest.raises(DataLoadError, match="volume"):
            parse_ohlcv([dict(ROWS[0], volume=-1)])

    def test_timestamps_must_increase(self):
        with pytest.raises(DataLoadError, match="not after"):
            parse_ohlcv([ROWS[1], ROWS[0]])
        with pytest.raises(DataLoadError, match="not after"):
            parse_ohlcv([ROWS[0], ROWS[0]])


class TestLoad:
    def test_file(self, tmp_path):
        path = tmp_path / "ohlcv.json"
        path.write_text(json.dumps(ROWS))
        assert len(load_ohlcv(path)) == 2
        assert len(load_ohlcv(str(path))) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError, match="Failed to load"):
            load_ohlcv(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "ohlcv.json"
        path.write_text("[{")
        with pytest.raises(DataLoadError, match="Invalid JSON"):
            load_ohlcv(path)

    def test_not_utf8_file(self, tmp_path):
        path = tmp_path / "ohlcv.json"
        path.write_bytes(b"\xff\xfe[]")
        with pytest.raises(DataLoadError, match="Failed to load"):
            load_ohlcv(path)

    def test_not_utf8_response(self, monkeypatch):
        class FakeResponse:
            def read(self):
                return b"\xff\xfe[]"

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        monkeypatch.setattr("urllib.request.urlopen", lambda req, timeout: FakeResponse())
        with pytest.raises(DataLoadError, match="Failed to load"):
            load_ohlcv("https://example.com/ohlcv.json")

    def test_url(self, monkeypatch):
        class FakeResponse:
            def __init__(self, body):
                self._body = body

            def read(self):
                return self._body

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        seen = {}

        def fake_urlopen(req, timeout):
            seen["url"] = req.full_url
            seen["timeout"] = timeout
            return FakeResponse(json.dumps(ROWS).encode("utf-8"))

        monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
        candles = load_ohlcv("https://example.com/data/ohlcv.json", timeout=3)
        assert len(candles) == 2
        assert seen == {"url": "https://example.com/data/ohlcv.json", "timeout": 3}

    def test_url_error(self, monkeypatch):
        import urllib.error

        def fake_urlopen(req, timeout):
            raise urllib.error.URLError("connection refused")

        monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
        with pytest.raises(DataLoadError, match="connection refused"):
            load_ohlcv("http://localhost:1/ohlcv.json")

    def test_sample_file(self):
        candles = load_ohlcv(SAMPLE_FILE)
        assert len(candles) == 60
        assert all(b.timestamp > a.timestamp for a, b in zip(candles, candles[1:]))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
