from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Optional, Sequence

from models import Aggregates, MetricDelta, Restaurant, Visit, YearComparison
from services.aggregator import aggregate, restaurant_names
from services.period_filter import ALL, PeriodError, apply_period, parse_period
from utils import round1, round_half_up

logger = logging.getLogger(__name__)


def delta_pct(current: float, previous: float) -> Optional[int]:
    if previous <= 0:
        return None
    return round_half_up(((current - previous) / previous) * 100)


def trend_of(delta: Optional[int]) -> Optional[str]:
    if delta is None:
        return None
    if delta > 0:
        return "up"
    if delta < 0:
        return "down"
    return "flat"


def _metric(current: float, previous: float) -> MetricDelta:
    pct = delta_pct(current, previous)
    return MetricDelta(current=current, previous=previous, delta_pct=pct, trend=trend_of(pct))


def _totals(restaurants: Sequence[Restaurant], visits: Sequence[Visit], year: int, tz: Optional[tzinfo]) -> Aggregates:
    period = apply_period(restaurants, visits, year, tz)
    return aggregate(period.restaurants, period.visits, restaurant_names(restaurants), tz)


def compare_years(
    year: Any,
    restaurants: Sequence[Restaurant],
    visits: Sequence[Visit],
    tz: Optional[tzinfo] = None,
) -> YearComparison:
    """Year-over-year deltas for spend and visit count against ``year - 1``."""
    selector = parse_period(year)
    if selector == ALL:
        raise PeriodError("year-over-year comparison needs a specific year")

    current = _totals(restaurants, visits, selector, tz)
    previous = _totals(restaurants, visits, selector - 1, tz)

    if previous.visit_count == 0:
        logger.debug("compare %s: no visits in %s", selector, selector - 1)
        return YearComparison(year=selector, previous_year=selector - 1, has_data=False)

    return YearComparison(
        year=selector,
        previous_year=selector - 1,
        has_data=True,
        spent=_metric(round1(current.total_spent), round1(previous.total_spent)),
        visits=_metric(current.visit_count, previous.visit_count),
    )
