"""
Backtest result models.

Per-trade and aggregate figures are expressed in percent (``_pct`` fields)
to match how strategy performance is reported to users.
"""

from dataclasses import dataclass, field
from datetime import date

from portfolio_analytics.models.enums import SignalAction


@dataclass(frozen=True)
class TradeRecord:
    """
    One closed (or force-closed) long trade.

    Attributes:
        entry_date: Date the position was opened.
        exit_date: Date the position was closed.
        entry_price: Fill price at entry.
        exit_price: Fill price at exit.
        return_pct: ``(exit - entry) / entry * 100``.
        signal: Direction of the entry signal (always BUY for long-only rules).
        forced_exit: True when the position was still open at series end.

    Examples:
        >>> from datetime import date
        >>> trade = TradeRecord(date(2025, 1, 2), date(2025, 2, 3), 100.0, 110.0, 10.0)
        >>> trade.is_win
        True
    """

    entry_date: date
    exit_date: date
    entry_price: float
    exit_price: float
    return_pct: float
    signal: SignalAction = SignalAction.BUY
    forced_exit: bool = False

    @property
    def is_win(self) -> bool:
        return self.return_pct > 0


@dataclass(frozen=True)
class BacktestResult:
    """
    Trade list and aggregate performance of a single-ticker backtest.

    ``sharpe_ratio``/``sortino_ratio`` are None when the ticker's return
    volatility (or downside deviation) is ~0. ``benchmark_return_pct`` and
    ``alpha_pct`` are None without benchmark history.
    """

    strategy_id: str
    strategy_name: str
    ticker: str
    lookback_days: int
    parameters: dict[str, float]
    trades: tuple[TradeRecord, ...]
    winning_trades: int
    losing_trades: int
    win_rate_pct: float
    avg_win_pct: float
    avg_loss_pct: float
    profit_factor: float
    total_return_pct: float
    cagr_pct: float
    max_drawdown_pct: float
    sharpe_ratio: float | None = None
    sortino_ratio: float | None = None
    benchmark_return_pct: float | None = None
    alpha_pct: float | None = None
    price_points: int = 0
    notes: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_trades(self) -> int:
        return len(self.trades)


@dataclass(frozen=True)
class StrategyParameterSpec:
    """Descriptor of one tunable strategy parameter."""

    key: str
    label: str
    type: str
    default: str
    description: str


@dataclass(frozen=True)
class StrategyDefinition:
    """Catalogue entry describing a predefined strategy."""

    id: str
    name: str
    category: str
    description: str
    risk_level: str
    suitable_for: tuple[str, ...]
    parameters: tuple[StrategyParameterSpec, ...]
    has_backtest_rule: bool = True
