"""
Integration tests for the analytics facade and the parallel risk batch.
"""

import asyncio

import pytest

from portfolio_analytics.batch import get_worker_count, run_risk_batch
from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.io.memory import InMemoryMarketData
from portfolio_analytics.models.core import HoldingSnapshot
from portfolio_analytics.models.exceptions import AccessError, InputError
from portfolio_analytics.service import AnalyticsService


pytestmark = pytest.mark.integration


@pytest.fixture()
def service(market_data):
    market_data.add_portfolio("empty", [])
    return AnalyticsService(market_data, market_data, market_data)


class TestAnalyticsService:
    """Test suite for the facade operations."""

    def test_all_operations(self, service, as_of):
        assert service.compute_risk_analytics("core", as_of=as_of).portfolio_id == "core"
        assert service.analyze_correlation("core", as_of=as_of).holding_count == 3
        assert service.backtest("dca", "CCC", as_of=as_of).strategy_name == "Dollar Cost Averaging"
        assert service.generate_signals("core", as_of=as_of).portfolio_id == "core"
        assert service.analyze_ticker("SPY", as_of=as_of).ticker == "SPY"
        assert len(service.get_available_strategies()) == 6

    def test_async_matches_sync(self, service, as_of):
        sync_report = service.compute_risk_analytics("core", as_of=as_of)

        async_report = asyncio.run(service.compute_risk_analytics_async("core", as_of=as_of))

        assert async_report == sync_report

    def test_access_error_propagates(self, market_data, as_of):
        data = InMemoryMarketData(
            holdings={"secret": [HoldingSnapshot("AAA", 1)]},
            restricted={"secret"},
        )
        service = AnalyticsService(data, market_data)

        with pytest.raises(AccessError, match="Access denied"):
            service.compute_risk_analytics("secret", as_of=as_of)
        with pytest.raises(AccessError):
            service.analyze_correlation("secret", as_of=as_of)
        with pytest.raises(AccessError):
            service.generate_signals("secret", as_of=as_of)

    def test_empty_portfolio(self, service, as_of):
        with pytest.raises(InputError, match="Portfolio has no holdings"):
            service.compute_risk_analytics("empty", as_of=as_of)

    def test_dca_amount_from_settings(self, market_data):
        service = AnalyticsService(market_data, market_data, settings=AnalyticsSettings(dca_amount=500.0))

        assert service.backtest_engine.registry.get("dca").func.keywords == {"amount": 500.0}


class TestRiskBatch:
    """Test suite for parallel risk evaluation."""

    def test_results_keep_input_order(self, service, as_of):
        outcomes = run_risk_batch(service, ["core", "empty", "core"], as_of=as_of, max_workers=2)

        assert [o.portfolio_id for o in outcomes] == ["core", "empty", "core"]
        assert [o.ok for o in outcomes] == [True, False, True]
        assert isinstance(outcomes[1].error, InputError)
        assert outcomes[0].report == outcomes[2].report

    def test_matches_sequential(self, service, as_of):
        outcome = run_risk_batch(service, ["core"], as_of=as_of)[0]

        assert outcome.report == service.compute_risk_analytics("core", as_of=as_of)

    def test_empty_batch(self, service):
        assert run_risk_batch(service, []) == []

    def test_worker_count_capped(self):
        assert get_worker_count(10_000) <= 10_000
        assert get_worker_count(0) == 1
        assert get_worker_count() >= 1
