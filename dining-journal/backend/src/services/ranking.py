from __future__ import annotations

from datetime import datetime
from typing import List, Mapping, Optional, Sequence

from models import (
    PLACEHOLDER,
    Aggregates,
    CountEntry,
    MonthBucket,
    MostVisited,
    Restaurant,
    RestaurantSummary,
    TagCount,
    TopRated,
)
from utils import name_sort_key, usable_rating

SORT_RECENT = "recent"
SORT_BEST = "best"
SORT_PRICE = "price"
SORT_MODES = (SORT_RECENT, SORT_BEST, SORT_PRICE)


def _by_count_desc(counts: Mapping[str, int]) -> List[tuple[str, int]]:
    # sorted() is stable: equal counts keep first-occurrence order
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)


def top_tags(tag_counts: Mapping[str, int], limit: int = 3) -> List[TagCount]:
    return [TagCount(tag=tag, count=n) for tag, n in _by_count_desc(tag_counts)[: max(0, limit)]]


def top_entry(counts: Mapping[str, int]) -> str:
    ranked = _by_count_desc(counts)
    return ranked[0][0] if ranked else PLACEHOLDER


def breakdown(counts: Mapping[str, int], limit: int = 10) -> List[CountEntry]:
    return [CountEntry(key=k, count=n) for k, n in _by_count_desc(counts)[: max(0, limit)]]


def most_visited(agg: Aggregates, names: Mapping[str, str]) -> Optional[MostVisited]:
    best: Optional[MostVisited] = None
    for rid, count in agg.visits_by_restaurant.items():
        if best is None or count > best.count:
            best = MostVisited(restaurant_id=rid, restaurant_name=names.get(rid, PLACEHOLDER), count=count)
    return best


def most_active_month(agg: Aggregates) -> Optional[MonthBucket]:
    best: Optional[MonthBucket] = None
    for bucket in agg.months.values():
        if best is None or bucket.count > best.count:
            best = bucket
    return best


def monthly_series(agg: Aggregates) -> List[MonthBucket]:
    """Month buckets in chronological order."""
    return [agg.months[key] for key in sorted(agg.months)]


def top_rated(
    restaurants: Sequence[Restaurant],
    visit_counts: Mapping[str, int],
    limit: int = 3,
) -> List[TopRated]:
    rated: List[TopRated] = []
    for r in restaurants:
        rating = usable_rating(r.rating)
        if rating is None:
            continue
        rated.append(TopRated(restaurant_id=r.id, name=r.name, rating=rating, visit_count=visit_counts.get(r.id, 0)))

    rated.sort(key=lambda t: (-t.rating, -t.visit_count, name_sort_key(t.name)))
    return rated[: max(0, limit)]


def _ts(value: Optional[datetime]) -> float:
    return value.timestamp() if value is not None else float("-inf")


def sort_restaurants(summaries: Sequence[RestaurantSummary], mode: str = SORT_RECENT) -> List[RestaurantSummary]:
    if mode not in SORT_MODES:
        raise ValueError(f"unknown sort mode: {mode}")

    if mode == SORT_BEST:
        return sorted(summaries, key=lambda s: usable_rating(s.restaurant.rating) or 0.0, reverse=True)

    if mode == SORT_PRICE:
        return sorted(summaries, key=lambda s: s.total_spent, reverse=True)

    # Most recent visit first, never-visited last, then newest restaurant first.
    ordered = sorted(summaries, key=lambda s: _ts(s.created_at), reverse=True)
    ordered.sort(key=lambda s: (s.last_visit_at is not None, _ts(s.last_visit_at)), reverse=True)
    return ordered
