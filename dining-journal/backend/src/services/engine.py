"""Statistics engine façade.

Wires the period filter, aggregator, ranker and badge classifier into one
pure call per snapshot. Every screen (stats, profile, public profile,
community preview) reads a projection of the same ``StatisticsResult``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from config import Configuration
from models import (
    CommunityPreview,
    ProfileView,
    PublicView,
    Restaurant,
    RestaurantSummary,
    StatisticsResult,
    Visit,
    YearComparison,
)
from services.aggregator import aggregate, restaurant_names
from services.badges import COMMUNITY_TABLE, BehaviorStats, classify, get_table
from services.cache import StatsCache
from services.comparator import compare_years
from services.period_filter import ALL, PeriodSelector, apply_period, available_years, parse_period
from services.ranking import (
    SORT_RECENT,
    breakdown,
    monthly_series,
    most_active_month,
    most_visited,
    top_entry,
    top_rated,
    top_tags,
)
from services.restaurant_list import list_restaurants
from services.snapshot import load_restaurants, load_visits, snapshot_fingerprint
from utils import resolve_zone, round1

logger = logging.getLogger(__name__)


class StatsEngine:
    def __init__(self, cfg: Optional[Configuration] = None, cache: Optional[StatsCache] = None) -> None:
        self.cfg = cfg or Configuration()
        self.tz = resolve_zone(self.cfg.timezone)
        self.table = get_table(self.cfg.badge_table)
        if cache is None and self.cfg.cache_enabled:
            cache = StatsCache(max_entries=self.cfg.cache_max_entries, ttl_sec=self.cfg.cache_ttl_sec)
        self.cache = cache

    def compute(self, restaurants: Any, visits: Any, period: Any = ALL) -> StatisticsResult:
        rs = load_restaurants(restaurants)
        vs = load_visits(visits)
        selector = parse_period(period)

        if self.cache is None:
            return self._compute(rs, vs, selector)

        key = (snapshot_fingerprint(rs, vs), selector, self.cfg.fingerprint())
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        result = self._compute(rs, vs, selector)
        self.cache.put(key, result)
        return result

    def _compute(self, rs: List[Restaurant], vs: List[Visit], selector: PeriodSelector) -> StatisticsResult:
        cfg = self.cfg
        names = restaurant_names(rs)
        period = apply_period(rs, vs, selector, self.tz)
        agg = aggregate(period.restaurants, period.visits, names, self.tz)

        tags = top_tags(agg.tag_counts, cfg.top_tags_limit)
        behavior = BehaviorStats(
            visit_count=agg.visit_count,
            average_rating=agg.average_rating,
            average_per_cover=agg.average_per_cover,
        )

        result = StatisticsResult(
            period=selector,
            total_restaurants=agg.total_restaurants,
            visit_count=agg.visit_count,
            total_covers=agg.total_covers,
            average_rating=agg.average_rating,
            best_rating=max(agg.ratings) if agg.ratings else None,
            worst_rating=min(agg.ratings) if agg.ratings else None,
            total_spent=round1(agg.total_spent),
            average_per_visit=agg.average_per_visit,
            average_per_cover=agg.average_per_cover,
            top_city=top_entry(agg.city_counts),
            top_country=top_entry(agg.country_counts),
            countries=breakdown(agg.country_counts, cfg.country_limit),
            top_tags=tags,
            most_visited=most_visited(agg, names),
            priciest_visit=agg.priciest_visit,
            best_per_cover=agg.best_per_cover,
            worst_per_cover=agg.worst_per_cover,
            most_active_month=most_active_month(agg),
            monthly=monthly_series(agg),
            top_rated=top_rated(period.restaurants, agg.visits_by_restaurant, cfg.top_rated_limit),
            badge=classify(tags, behavior, self.table),
            available_years=available_years(vs, self.tz),
        )
        logger.debug(
            "stats period=%s restaurants=%d visits=%d spent=%.1f skipped=%d",
            selector,
            result.total_restaurants,
            result.visit_count,
            result.total_spent,
            agg.skipped,
        )
        return result

    def compare(self, year: Any, restaurants: Any, visits: Any) -> YearComparison:
        return compare_years(year, load_restaurants(restaurants), load_visits(visits), self.tz)

    def restaurant_list(
        self,
        restaurants: Any,
        visits: Any,
        query: str = "",
        mode: str = SORT_RECENT,
    ) -> List[RestaurantSummary]:
        return list_restaurants(load_restaurants(restaurants), load_visits(visits), query, mode, self.tz)

    def community_preview(self, restaurants: Any) -> CommunityPreview:
        rs = load_restaurants(restaurants)
        agg = aggregate(rs, [], tz=self.tz)
        tags = top_tags(agg.tag_counts, self.cfg.top_tags_limit)
        return CommunityPreview(restaurant_count=len(rs), badge=classify(tags, table=COMMUNITY_TABLE))


def compute_statistics(
    restaurants: Any,
    visits: Any,
    period: Any = ALL,
    cfg: Optional[Configuration] = None,
) -> StatisticsResult:
    return StatsEngine(cfg).compute(restaurants, visits, period)


def profile_view(result: StatisticsResult, country_limit: int = 8) -> ProfileView:
    return ProfileView(
        period=result.period,
        total_restaurants=result.total_restaurants,
        average_rating=result.average_rating,
        best_rating=result.best_rating,
        worst_rating=result.worst_rating,
        top_city=result.top_city,
        top_tags=[t.tag for t in result.top_tags],
        total_spent=result.total_spent,
        priciest_visit=result.priciest_visit,
        most_visited=result.most_visited,
        countries=result.countries[: max(0, country_limit)],
        badge=result.badge,
    )


def public_view(result: StatisticsResult) -> PublicView:
    return PublicView(
        period=result.period,
        total_restaurants=result.total_restaurants,
        visit_count=result.visit_count,
        total_spent=result.total_spent,
        total_covers=result.total_covers,
        average_rating=result.average_rating,
        average_per_cover=result.average_per_cover,
        top_rated=list(result.top_rated),
        available_years=list(result.available_years),
    )
