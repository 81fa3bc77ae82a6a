from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Dict, List, Optional, Sequence

from models import Restaurant, RestaurantSummary, Visit
from services.ranking import SORT_RECENT, sort_restaurants
from utils import clean_text, parse_timestamp, round1, to_finite


def summarize_restaurants(
    restaurants: Sequence[Restaurant],
    visits: Sequence[Visit],
    tz: Optional[tzinfo] = None,
) -> List[RestaurantSummary]:
    """Per-restaurant visit count, spend and last visit over the full history."""
    counts: Dict[str, int] = {}
    spent: Dict[str, float] = {}
    last: Dict[str, datetime] = {}

    for v in visits:
        rid = v.restaurant_id
        counts[rid] = counts.get(rid, 0) + 1
        price = to_finite(v.price_eur)
        spent[rid] = spent.get(rid, 0.0) + (price if price is not None and price >= 0 else 0.0)
        visited = parse_timestamp(v.visited_at, tz)
        if visited is not None and (rid not in last or visited > last[rid]):
            last[rid] = visited

    return [
        RestaurantSummary(
            restaurant=r,
            visit_count=counts.get(r.id, 0),
            total_spent=round1(spent.get(r.id, 0.0)),
            last_visit_at=last.get(r.id),
            created_at=parse_timestamp(r.created_at, tz),
        )
        for r in restaurants
    ]


def matches_search(restaurant: Restaurant, query: str) -> bool:
    """Every whitespace-separated term must appear in the name, city or a tag."""
    terms = [t for t in query.lower().split() if t]
    if not terms:
        return True
    name = clean_text(restaurant.name).lower()
    city = clean_text(restaurant.city).lower()
    tags = [clean_text(t).lower() for t in (restaurant.tags or [])]
    return all(term in name or term in city or any(term in tag for tag in tags) for term in terms)


def list_restaurants(
    restaurants: Sequence[Restaurant],
    visits: Sequence[Visit],
    query: str = "",
    mode: str = SORT_RECENT,
    tz: Optional[tzinfo] = None,
) -> List[RestaurantSummary]:
    summaries = summarize_restaurants(restaurants, visits, tz)
    filtered = [s for s in summaries if matches_search(s.restaurant, query or "")]
    return sort_restaurants(filtered, mode)


def visit_history(restaurant_id: str, visits: Sequence[Visit], tz: Optional[tzinfo] = None) -> List[Visit]:
    """Visits of one restaurant, most recent first; undated visits last."""
    own = [v for v in visits if v.restaurant_id == restaurant_id]

    def key(v: Visit) -> float:
        visited = parse_timestamp(v.visited_at, tz)
        return visited.timestamp() if visited is not None else float("-inf")

    return sorted(own, key=key, reverse=True)
