from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Dict, Iterable, Mapping, Optional, Sequence

from models import PLACEHOLDER, Aggregates, MonthBucket, PerCoverVisit, PricedVisit, Restaurant, Visit
from utils import clean_text, month_label, parse_timestamp, positive_covers, round1, to_finite, usable_rating

logger = logging.getLogger(__name__)


def restaurant_names(restaurants: Iterable[Restaurant]) -> Dict[str, str]:
    """id -> display name over the whole collection, not just the period slice."""
    return {r.id: (clean_text(r.name) or PLACEHOLDER) for r in restaurants if r.id}


def _bump(counts: Dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1


def _visit_price(visit: Visit) -> Optional[float]:
    if visit.price_eur is None:
        return None
    price = to_finite(visit.price_eur)
    if price is None or price < 0:
        logger.debug("visit %s: ignoring unusable price %r", visit.id, visit.price_eur)
        return None
    return price


def _tally_restaurants(agg: Aggregates, restaurants: Sequence[Restaurant]) -> None:
    for r in restaurants:
        rating = usable_rating(r.rating)
        if rating is None:
            if r.rating is not None:
                logger.debug("restaurant %s: ignoring unusable rating %r", r.id, r.rating)
                agg.skipped += 1
        else:
            agg.rating_sum += rating
            agg.ratings.append(rating)

        # one contribution per distinct tag of a restaurant
        for tag in dict.fromkeys(clean_text(t) for t in (r.tags or [])):
            if tag:
                _bump(agg.tag_counts, tag)

        city = clean_text(r.city)
        if city:
            _bump(agg.city_counts, city)
        country = clean_text(r.country)
        if country:
            _bump(agg.country_counts, country)

    agg.total_restaurants = len(restaurants)


def _tally_visits(
    agg: Aggregates,
    visits: Sequence[Visit],
    names: Mapping[str, str],
    tz: Optional[tzinfo],
) -> None:
    for v in visits:
        name = names.get(v.restaurant_id, PLACEHOLDER)
        price = _visit_price(v)
        covers = positive_covers(v.covers)
        if covers is None:
            logger.debug("visit %s: covers %r excluded from per-cover figures", v.id, v.covers)
        else:
            agg.total_covers += covers

        if price is not None:
            agg.total_spent += price

            if agg.priciest_visit is None or price > agg.priciest_visit.price:
                agg.priciest_visit = PricedVisit(
                    restaurant_id=v.restaurant_id,
                    restaurant_name=name,
                    price=price,
                    visited_at=v.visited_at,
                )

            if covers is not None:
                unit = price / covers
                if agg.best_per_cover is None or unit < agg.best_per_cover.unit:
                    agg.best_per_cover = PerCoverVisit(v.restaurant_id, name, unit, price, covers, v.visited_at)
                if agg.worst_per_cover is None or unit > agg.worst_per_cover.unit:
                    agg.worst_per_cover = PerCoverVisit(v.restaurant_id, name, unit, price, covers, v.visited_at)

        _bump(agg.visits_by_restaurant, v.restaurant_id)

        visited = parse_timestamp(v.visited_at, tz)
        if visited is None:
            logger.debug("visit %s: unparseable visited_at %r", v.id, v.visited_at)
            agg.skipped += 1
            continue

        last = agg.last_visit_by_restaurant.get(v.restaurant_id)
        if last is None or visited > last:
            agg.last_visit_by_restaurant[v.restaurant_id] = visited

        key = (visited.year, visited.month)
        bucket = agg.months.get(key)
        if bucket is None:
            bucket = agg.months[key] = MonthBucket(visited.year, visited.month, month_label(*key))
        bucket.count += 1

    agg.visit_count = len(visits)


def aggregate(
    restaurants: Sequence[Restaurant],
    visits: Sequence[Visit],
    names: Optional[Mapping[str, str]] = None,
    tz: Optional[tzinfo] = None,
) -> Aggregates:
    """Single pass over a period slice.

    ``names`` should map every restaurant id of the user (not only those in the
    slice); visits pointing at unknown ids are kept and labelled with the
    placeholder name.
    """
    agg = Aggregates()
    if names is None:
        names = restaurant_names(restaurants)

    _tally_restaurants(agg, restaurants)
    _tally_visits(agg, visits, names, tz)

    if agg.total_restaurants:
        agg.average_rating = round1(agg.rating_sum / agg.total_restaurants)
    if agg.visit_count:
        agg.average_per_visit = round1(agg.total_spent / agg.visit_count)
    if agg.total_covers:
        agg.average_per_cover = round1(agg.total_spent / agg.total_covers)

    if agg.skipped:
        logger.debug("aggregate: %d malformed values skipped", agg.skipped)
    return agg
