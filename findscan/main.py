"""
FindScan Bollinger Bands
========================

Main entrypoint. Loads OHLCV candles, computes Bollinger Bands with the
configured settings and logs the data summary plus the latest band values.

Usage:
    python -m findscan.main
    BB_LENGTH=10 BB_SOURCE=high DATA_PATH=data/ohlcv.json python -m findscan.main
"""

import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional

from findscan.chart import BollingerChart, ChartSummary, SummaryRow
from findscan.config import Config
from findscan.utils.data_loader import DataLoadError, load_ohlcv


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(config: Config) -> None:
    """stdout always; a log file too when logging.file is set."""
    level = logging.getLevelName(config.logging.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.logging.file:
        handlers.append(logging.FileHandler(config.logging.file))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)


logger = logging.getLogger(__name__)


def _money(value: Optional[float]) -> str:
    return f"${value:,.2f}" if value is not None else "N/A"


def _date(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d")


def format_summary(summary: ChartSummary) -> List[str]:
    return [
        f"Data Points: {summary.data_points:,}",
        f"Bollinger Points: {summary.band_points:,}",
        f"Latest Close: {_money(summary.latest_close)}",
        f"Latest Upper Band: {_money(summary.latest_upper)}",
    ]


def format_table(rows: List[SummaryRow]) -> List[str]:
    """Latest values as fixed-width text lines, header first."""
    lines = [f"{'Date':<12}{'Close':>14}{'Upper Band':>14}{'Basis (SMA)':>14}{'Lower Band':>14}"]
    for row in rows:
        lines.append(
            f"{_date(row.timestamp):<12}{_money(row.close):>14}{_money(row.upper):>14}"
            f"{_money(row.basis):>14}{_money(row.lower):>14}"
        )
    return lines


def run(config: Config) -> int:
    try:
        candles = load_ohlcv(config.data.path, timeout=config.data.timeout)
    except DataLoadError as e:
        logger.error(f"Error loading OHLCV data: {e}")
        return 1

    chart = BollingerChart(candles, config.bollinger)
    bb = config.bollinger
    logger.info(
        f"📊 Bollinger Bands | Length: {bb.length} | StdDev: {bb.std_dev_multiplier} | "
        f"Source: {bb.source_name.upper()}"
    )
    for line in format_summary(chart.summary()):
        logger.info(line)

    rows = chart.rows(config.table.rows)
    if rows:
        logger.info("Latest Bollinger Bands Values")
        for line in format_table(rows):
            logger.info(line)
    else:
        logger.warning("No Bollinger Bands values available")
    return 0


def main():
    """CLI entrypoint."""
    config = Config.load()

    setup_logging(config)

    if not config.validate():
        sys.exit(1)

    config.print_config()
    sys.exit(run(config))


if __name__ == "__main__":
    main()
