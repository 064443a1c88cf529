"""
Command-line interface for portfolio analytics.

Reads holdings and prices from a CSV data directory (see
``portfolio_analytics.io.csv_source``) and prints results as rich tables or
JSON.

Usage:
    portfolio-analytics --data-dir data risk core --confidence 0.99
    portfolio-analytics --data-dir data correlation core
    portfolio-analytics --data-dir data backtest sma_crossover AAPL --param shortPeriod=10
    portfolio-analytics --data-dir data signals core
    portfolio-analytics --data-dir data advise MSFT --position-value 25000
    portfolio-analytics strategies --format json
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console

from portfolio_analytics.config.parameters import load_settings
from portfolio_analytics.io.csv_source import CsvMarketData
from portfolio_analytics.models.enums import OutputFormat
from portfolio_analytics.models.exceptions import AccessError, AnalyticsError, InputError
from portfolio_analytics.service import AnalyticsService
from portfolio_analytics.strategy.registry import get_available_strategies
from portfolio_analytics.cli.formatters import format_json, print_text
from portfolio_analytics.cli.logging_setup import setup_logging


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INPUT = 2
EXIT_ACCESS = 3


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def _parse_param(value: str) -> tuple[str, str]:
    key, sep, raw = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Invalid parameter '{value}', expected KEY=VALUE")
    return key.strip(), raw.strip()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per operation."""
    parser = argparse.ArgumentParser(
        prog="portfolio-analytics",
        description="Portfolio risk, correlation, backtesting and signal analytics",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path("data"),
        help="CSV data directory with prices/ and portfolios/ (default: data)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with analytics setting overrides",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.TEXT.value,
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Optional log file path")
    parser.add_argument("--log-json", action="store_true", help="Write the log file as JSON lines")
    parser.add_argument(
        "--as-of", type=_parse_date, default=None, help="Analysis date YYYY-MM-DD (default: today)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    # -------------------------------------------------------------------------
    # Subcommand: risk
    # -------------------------------------------------------------------------
    risk = subparsers.add_parser("risk", help="Compute portfolio risk analytics")
    risk.add_argument("portfolio_id")
    risk.add_argument("--confidence", type=float, default=0.95, help="VaR confidence (default: 0.95)")
    risk.add_argument("--horizon", type=int, default=1, help="VaR horizon in days (default: 1)")
    risk.add_argument("--lookback", type=int, default=252, help="Lookback in days (default: 252)")

    # -------------------------------------------------------------------------
    # Subcommand: correlation
    # -------------------------------------------------------------------------
    corr = subparsers.add_parser("correlation", help="Analyze correlation and diversification")
    corr.add_argument("portfolio_id")
    corr.add_argument("--lookback", type=int, default=252, help="Lookback in days (default: 252)")

    # -------------------------------------------------------------------------
    # Subcommand: backtest
    # -------------------------------------------------------------------------
    backtest = subparsers.add_parser("backtest", help="Backtest a strategy on one ticker")
    backtest.add_argument("strategy_id")
    backtest.add_argument("ticker")
    backtest.add_argument("--lookback", type=int, default=365, help="Lookback in days (default: 365)")
    backtest.add_argument(
        "--param",
        type=_parse_param,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Strategy parameter, repeatable (e.g. shortPeriod=10)",
    )

    # -------------------------------------------------------------------------
    # Subcommand: signals
    # -------------------------------------------------------------------------
    signals = subparsers.add_parser("signals", help="Generate trade signals and tax-loss candidates")
    signals.add_argument("portfolio_id")

    # -------------------------------------------------------------------------
    # Subcommand: advise
    # -------------------------------------------------------------------------
    advise = subparsers.add_parser("advise", help="Advisory summary for one ticker")
    advise.add_argument("ticker")
    advise.add_argument("--position-value", type=float, default=10_000.0)
    advise.add_argument("--lookback", type=int, default=365, help="Lookback in days (default: 365)")

    # -------------------------------------------------------------------------
    # Subcommand: strategies
    # -------------------------------------------------------------------------
    subparsers.add_parser("strategies", help="List available strategies")

    return parser


def _load_settings(config_path: Path | None):
    if config_path is None:
        return load_settings()
    with open(config_path, encoding="utf-8") as f:
        return load_settings(json.load(f))


def run_command(args: argparse.Namespace):
    """Execute the parsed sub-command and return its result object."""
    if args.command == "strategies":
        return get_available_strategies()

    settings = _load_settings(args.config)
    data = CsvMarketData(args.data_dir)
    service = AnalyticsService(data, data, data, settings=settings)

    if args.command == "risk":
        return service.compute_risk_analytics(
            args.portfolio_id,
            confidence_level=args.confidence,
            horizon_days=args.horizon,
            lookback_days=args.lookback,
            as_of=args.as_of,
        )
    if args.command == "correlation":
        return service.analyze_correlation(
            args.portfolio_id, lookback_days=args.lookback, as_of=args.as_of
        )
    if args.command == "backtest":
        return service.backtest(
            args.strategy_id,
            args.ticker,
            lookback_days=args.lookback,
            params=dict(args.param),
            as_of=args.as_of,
        )
    if args.command == "signals":
        return service.generate_signals(args.portfolio_id, as_of=args.as_of)
    if args.command == "advise":
        return service.analyze_ticker(
            args.ticker,
            position_value=args.position_value,
            lookback_days=args.lookback,
            as_of=args.as_of,
        )
    raise ValueError(f"Unknown command: {args.command}")


def main(args: Optional[list[str]] = None) -> int:
    """
    Main entry point for the 'portfolio-analytics' CLI.
    """
    parsed_args = build_parser().parse_args(args)
    setup_logging(parsed_args.log_level, parsed_args.log_file, parsed_args.log_json)
    err_console = Console(stderr=True)

    try:
        result = run_command(parsed_args)
    except InputError as exc:
        err_console.print(f"[bold red]ERROR:[/bold red] {exc}")
        return EXIT_INPUT
    except AccessError as exc:
        err_console.print(f"[bold red]ACCESS DENIED:[/bold red] {exc}")
        return EXIT_ACCESS
    except (AnalyticsError, ValidationError, FileNotFoundError) as exc:
        logger.error("Command %s failed: %s", parsed_args.command, exc)
        err_console.print(f"[bold red]ERROR:[/bold red] {exc}")
        return EXIT_ERROR

    if parsed_args.output_format == OutputFormat.JSON.value:
        sys.stdout.write(format_json(result) + "\n")
    else:
        print_text(result, Console())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
