"""
Unit tests for CLI output formatters and logging configuration.
"""

import json
import logging
import sys
from datetime import date

import numpy as np
import pytest
from rich.console import Console

from portfolio_analytics.cli.formatters import format_json, print_text, to_dict
from portfolio_analytics.cli.logging_setup import JSONFormatter, setup_logging
from portfolio_analytics.models.backtest import BacktestResult, TradeRecord
from portfolio_analytics.models.enums import SignalAction
from portfolio_analytics.strategy.registry import get_available_strategies


pytestmark = pytest.mark.unit


@pytest.fixture()
def backtest_result():
    trade = TradeRecord(date(2025, 1, 2), date(2025, 2, 3), 100.0, 110.0, 10.0)
    return BacktestResult(
        strategy_id="momentum",
        strategy_name="Momentum",
        ticker="AAA",
        lookback_days=365,
        parameters={"rsiPeriod": 14},
        trades=(trade,),
        winning_trades=1,
        losing_trades=0,
        win_rate_pct=100.0,
        avg_win_pct=10.0,
        avg_loss_pct=0.0,
        profit_factor=999.0,
        total_return_pct=np.float64(12.5),
        cagr_pct=12.5,
        max_drawdown_pct=4.0,
        price_points=250,
        notes=("note one",),
    )


class TestJsonOutput:
    """Test suite for JSON rendering."""

    def test_backtest_result(self, backtest_result):
        data = json.loads(format_json(backtest_result))

        assert data["total_trades"] == 1
        assert data["total_return_pct"] == 12.5
        assert data["trades"][0]["entry_date"] == "2025-01-02"
        assert data["trades"][0]["signal"] == "BUY"
        assert data["sharpe_ratio"] is None

    def test_strategy_list(self):
        data = json.loads(format_json(get_available_strategies()))

        assert [item["id"] for item in data][:3] == ["sma_crossover", "mean_reversion", "momentum"]
        assert data[0]["parameters"][0]["key"] == "shortPeriod"

    def test_rejects_non_dataclass(self):
        with pytest.raises(TypeError):
            to_dict(object())


class TestTextOutput:
    """Test suite for rich table rendering."""

    def test_backtest_tables(self, backtest_result):
        console = Console(record=True, width=160)

        print_text(backtest_result, console)
        text = console.export_text()

        assert "Momentum on AAA" in text
        assert "999.00" in text
        assert "note one" in text

    def test_strategy_table(self):
        console = Console(record=True, width=200)

        print_text(get_available_strategies(), console)

        assert "Dollar Cost Averaging" in console.export_text()

    def test_unknown_result_type(self):
        with pytest.raises(TypeError):
            print_text(SignalAction.BUY, Console(record=True))


class TestLogging:
    """Test suite for logging configuration."""

    def test_level_and_file_handler(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "run.log"

        setup_logging("DEBUG", log_file=log_file)
        logging.getLogger("portfolio_analytics.test").info("risk computed")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert restore_root_logger.level == logging.DEBUG
        assert "risk computed" in log_file.read_text(encoding="utf-8")

    def test_json_file_logs(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "run.jsonl"

        setup_logging("INFO", log_file=log_file, use_json=True)
        logging.getLogger("portfolio_analytics.test").warning("VaR %s", "high")
        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert lines[-1]["message"] == "VaR high"
        assert lines[-1]["level"] == "WARNING"
        assert lines[-1]["logger"] == "portfolio_analytics.test"

    def test_json_formatter_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

        payload = json.loads(JSONFormatter().format(record))

        assert "ValueError: boom" in payload["exception"]
