"""Parallel risk evaluation across many portfolios.

Engines are stateless, so portfolios can be evaluated concurrently. Work
runs in a thread pool: price reads are I/O-bound and numpy releases the GIL
for the heavy array work.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date
from typing import List, Optional
import logging
import multiprocessing

from portfolio_analytics.models.exceptions import AnalyticsError
from portfolio_analytics.models.risk_report import RiskReport
from portfolio_analytics.service import AnalyticsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchOutcome:
    """Result of one portfolio in a batch: a report or the error it raised."""

    portfolio_id: str
    report: RiskReport | None = None
    error: AnalyticsError | None = None

    @property
    def ok(self) -> bool:
        return self.report is not None


def get_worker_count(requested: Optional[int] = None) -> int:
    """Determine worker count with logical core cap.

    Args:
        requested: Requested number of workers, or None for auto-detection.

    Returns:
        Validated worker count (capped to logical cores).
    """
    logical_cores = multiprocessing.cpu_count()

    if requested is None:
        return max(1, logical_cores - 1)

    if requested > logical_cores:
        logger.warning(
            "Requested workers (%d) exceeds logical cores (%d); capping to %d",
            requested,
            logical_cores,
            logical_cores,
        )
        return logical_cores

    return max(1, requested)


def run_risk_batch(
    service: AnalyticsService,
    portfolio_ids: List[str],
    confidence_level: float = 0.95,
    horizon_days: int = 1,
    lookback_days: int = 252,
    as_of: date | None = None,
    max_workers: Optional[int] = None,
) -> List[BatchOutcome]:
    """Compute risk reports for many portfolios in parallel.

    Analytics errors (empty portfolio, missing history, access denied) are
    captured per portfolio; any other exception aborts the batch.

    Args:
        service: Configured analytics facade.
        portfolio_ids: Portfolios to evaluate.
        confidence_level: VaR confidence level.
        horizon_days: VaR horizon.
        lookback_days: Calendar days of history.
        as_of: Analysis date (default today).
        max_workers: Maximum number of worker threads.

    Returns:
        One BatchOutcome per portfolio, in input order.
    """
    if not portfolio_ids:
        return []

    worker_count = min(get_worker_count(max_workers), len(portfolio_ids))
    results: List[BatchOutcome | None] = [None] * len(portfolio_ids)

    def evaluate(portfolio_id: str) -> BatchOutcome:
        try:
            report = service.compute_risk_analytics(
                portfolio_id,
                confidence_level=confidence_level,
                horizon_days=horizon_days,
                lookback_days=lookback_days,
                as_of=as_of,
            )
        except AnalyticsError as exc:
            logger.warning("Risk analytics failed for portfolio %s: %s", portfolio_id, exc)
            return BatchOutcome(portfolio_id=portfolio_id, error=exc)
        return BatchOutcome(portfolio_id=portfolio_id, report=report)

    with ThreadPoolExecutor(max_workers=worker_count) as executor:
        future_to_idx = {
            executor.submit(evaluate, portfolio_id): idx
            for idx, portfolio_id in enumerate(portfolio_ids)
        }

        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            try:
                results[idx] = future.result()
            except Exception as exc:
                logger.error("Task %d generated exception: %s", idx, exc)
                raise

    logger.info(
        "Risk batch complete: %d portfolios, %d failed",
        len(results),
        sum(1 for outcome in results if outcome is not None and not outcome.ok),
    )
    return [outcome for outcome in results if outcome is not None]
