"""
Unit Tests for Configuration
============================
"""

from dataclasses import replace

import pytest
from findscan.config import Config, settings_from_dict
from findscan.models import (
    BandStyle,
    BackgroundFill,
    BollingerBandsSettings,
    LineStyle,
    MAType,
    SourceType,
)


ENV_VARS = [
    "BB_LENGTH", "BB_SOURCE", "BB_STD_DEV_MULTIPLIER", "BB_OFFSET",
    "DATA_PATH", "TABLE_ROWS", "LOG_LEVEL", "LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


YAML = """
bollinger:
  length: 14
  source: high
  std_dev_multiplier: 2.5
  offset: -3
  upper_band:
    color: "#FF0000"
    line_width: 2
    line_style: dashed
  background_fill:
    visible: false
    opacity: 0.3
data:
  path: candles.json
table:
  rows: 8
logging:
  level: DEBUG
"""


class TestDefaults:
    def test_documented_defaults(self):
        bb = Config().bollinger
        assert bb.length == 20
        assert bb.basic_ma_type == MAType.SMA
        assert bb.source == SourceType.CLOSE
        assert bb.std_dev_multiplier == 2
        assert bb.offset == 0
        for band in (bb.basic_band, bb.upper_band, bb.lower_band):
            assert band == BandStyle(visible=True, color="#2196F3", line_width=1, line_style=LineStyle.SOLID)
        assert bb.background_fill == BackgroundFill(visible=True, opacity=0.1)

    def test_defaults_validate(self):
        assert Config().validate()


class TestLoad:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = Config.load(str(tmp_path / "missing.yaml"))
        assert config.bollinger == BollingerBandsSettings()
        assert config.data.path == "data/ohlcv.json"

    def test_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(YAML)
        config = Config.load(str(path))
        bb = config.bollinger
        assert bb.length == 14
        assert bb.source == SourceType.HIGH
        assert bb.std_dev_multiplier == 2.5
        assert bb.offset == -3
        assert bb.upper_band.color == "#FF0000"
        assert bb.upper_band.line_style == LineStyle.DASHED
        assert bb.upper_band.visible
        assert bb.lower_band == BandStyle()
        assert not bb.background_fill.visible
        assert config.data.path == "candles.json"
        assert config.table.rows == 8
        assert config.logging.level == "DEBUG"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Config.load(str(path)).bollinger == BollingerBandsSettings()

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(YAML)
        monkeypatch.setenv("BB_LENGTH", "30")
        monkeypatch.setenv("BB_SOURCE", "LOW")
        monkeypatch.setenv("BB_STD_DEV_MULTIPLIER", "1.5")
        monkeypatch.setenv("BB_OFFSET", "2")
        monkeypatch.setenv("DATA_PATH", "https://example.com/ohlcv.json")
        monkeypatch.setenv("TABLE_ROWS", "3")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        config = Config.load(str(path))
        assert config.bollinger.length == 30
        assert config.bollinger.source == SourceType.LOW
        assert config.bollinger.std_dev_multiplier == 1.5
        assert config.bollinger.offset == 2
        assert config.bollinger.upper_band.color == "#FF0000"
        assert config.data.path == "https://example.com/ohlcv.json"
        assert config.table.rows == 3
        assert config.logging.level == "WARNING"

    def test_bad_env_ignored(self, tmp_path, monkeypatch, caplog):
        monkeypatch.setenv("BB_LENGTH", "twenty")
        monkeypatch.setenv("BB_OFFSET", "1.5")
        config = Config.load(str(tmp_path / "missing.yaml"))
        assert config.bollinger.length == 20
        assert config.bollinger.offset == 0
        assert "BB_LENGTH" in caplog.text


class TestSettingsFromDict:
    def test_unknown_keys_ignored(self, caplog):
        settings = settings_from_dict({"length": 10, "colour": "red", "basic_band": {"width": 3}})
        assert settings.length == 10
        assert settings.basic_band == BandStyle()
        assert "colour" in caplog.text
        assert "width" in caplog.text

    def test_unknown_source_kept(self):
        settings = settings_from_dict({"source": "hl2"})
        assert settings.source == "hl2"
        assert settings.source_name == "hl2"


class TestValidate:
    @pytest.fixture
    def config(self):
        return Config()

    def test_unknown_source_only_warns(self, config, caplog):
        config.bollinger = replace(config.bollinger, source="hlc3")
        assert config.validate()
        assert "Unknown source" in caplog.text

    def test_numeric_inputs_left_to_indicator(self, config):
        config.bollinger = replace(config.bollinger, length=1, std_dev_multiplier=0)
        assert config.validate()

    @pytest.mark.parametrize("width", [0, 6, 2.5])
    def test_line_width(self, config, width):
        config.bollinger = replace(config.bollinger, lower_band=BandStyle(line_width=width))
        assert not config.validate()

    def test_line_style(self, config):
        config.bollinger = replace(config.bollinger, basic_band=BandStyle(line_style="dotted"))
        assert not config.validate()

    @pytest.mark.parametrize("opacity", [-0.1, 1.5])
    def test_opacity(self, config, opacity):
        config.bollinger = replace(config.bollinger, background_fill=BackgroundFill(opacity=opacity))
        assert not config.validate()

    def test_ma_type(self, config):
        config.bollinger = replace(config.bollinger, basic_ma_type="EMA")
        assert not config.validate()

    def test_table_rows(self, config):
        config.table.rows = 0
        assert not config.validate()

    @pytest.mark.parametrize("rows", ["5", 2.5, True])
    def test_table_rows_type(self, config, rows):
        config.table.rows = rows
        assert not config.validate()

    @pytest.mark.parametrize("timeout", [0, -1, "15", None])
    def test_data_timeout(self, config, timeout):
        config.data.timeout = timeout
        assert not config.validate()

    def test_string_rows_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text('table:\n  rows: "5"\n')
        assert not Config.load(str(path)).validate()

    def test_data_path(self, config):
        config.data.path = ""
        assert not config.validate()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
