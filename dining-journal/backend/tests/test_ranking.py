from datetime import datetime, timezone

import pytest

from models import PLACEHOLDER, Aggregates, MonthBucket, Restaurant, RestaurantSummary
from services.aggregator import aggregate, restaurant_names
from services.ranking import (
    SORT_BEST,
    SORT_PRICE,
    SORT_RECENT,
    breakdown,
    monthly_series,
    most_active_month,
    most_visited,
    sort_restaurants,
    top_entry,
    top_rated,
    top_tags,
)


def test_top_tags_ties_keep_first_occurrence():
    counts = {"Bistrot": 1, "Italien": 2, "Vegan": 1, "Brunch": 2}
    ranked = top_tags(counts, limit=3)
    assert [(t.tag, t.count) for t in ranked] == [("Italien", 2), ("Brunch", 2), ("Bistrot", 1)]
    assert top_tags(counts, limit=0) == []


def test_top_entry_and_breakdown():
    assert top_entry({}) == PLACEHOLDER
    assert top_entry({"Lyon": 1, "Paris": 1}) == "Lyon"

    counts = {f"C{i}": i for i in range(12)}
    entries = breakdown(counts, limit=10)
    assert len(entries) == 10
    assert entries[0].key == "C11"


def test_most_visited_first_wins_ties(restaurants, visits):
    agg = aggregate(restaurants, visits)
    mv = most_visited(agg, restaurant_names(restaurants))
    assert (mv.restaurant_id, mv.restaurant_name, mv.count) == ("r1", "Chez Luigi", 3)

    tied = Aggregates(visits_by_restaurant={"b": 2, "a": 2})
    assert most_visited(tied, {}).restaurant_id == "b"
    assert most_visited(tied, {}).restaurant_name == PLACEHOLDER
    assert most_visited(Aggregates(), {}) is None


def test_month_ranking():
    agg = Aggregates()
    agg.months[(2024, 3)] = MonthBucket(2024, 3, "mars 2024", 2)
    agg.months[(2023, 11)] = MonthBucket(2023, 11, "novembre 2023", 2)
    agg.months[(2024, 1)] = MonthBucket(2024, 1, "janvier 2024", 1)

    assert most_active_month(agg).label == "mars 2024"
    assert [(b.year, b.month) for b in monthly_series(agg)] == [(2023, 11), (2024, 1), (2024, 3)]


def test_top_rated_order():
    rs = [
        Restaurant(id="a", name="Fournil", rating=17),
        Restaurant(id="b", name="Éclair", rating=17),
        Restaurant(id="c", name="Zinc", rating=17),
        Restaurant(id="d", name="Top", rating=19),
        Restaurant(id="e", name="Unrated", rating=None),
    ]
    ranked = top_rated(rs, {"c": 4}, limit=3)
    assert [t.restaurant_id for t in ranked] == ["d", "c", "b"]
    assert ranked[0].visit_count == 0


def _summary(rid, rating=None, spent=0.0, last=None, created=None):
    return RestaurantSummary(
        restaurant=Restaurant(id=rid, rating=rating),
        visit_count=0,
        total_spent=spent,
        last_visit_at=last,
        created_at=created,
    )


def test_sort_restaurants_modes():
    t = lambda *a: datetime(*a, tzinfo=timezone.utc)  # noqa: E731
    rows = [
        _summary("never-old", rating=12, created=t(2023, 1, 1)),
        _summary("recent", rating=15, spent=40, last=t(2024, 6, 1), created=t(2023, 1, 1)),
        _summary("never-new", rating=None, created=t(2024, 1, 1)),
        _summary("older", rating=18, spent=90, last=t(2024, 1, 1), created=t(2022, 1, 1)),
    ]

    assert [s.restaurant.id for s in sort_restaurants(rows, SORT_RECENT)] == ["recent", "older", "never-new", "never-old"]
    assert [s.restaurant.id for s in sort_restaurants(rows, SORT_BEST)] == ["older", "recent", "never-old", "never-new"]
    assert [s.restaurant.id for s in sort_restaurants(rows, SORT_PRICE)] == ["older", "recent", "never-old", "never-new"]

    with pytest.raises(ValueError):
        sort_restaurants(rows, "alphabetical")
