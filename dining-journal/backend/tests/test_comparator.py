from __future__ import annotations

import pytest

from models import Restaurant, Visit
from services.comparator import compare_years, delta_pct, trend_of
from services.period_filter import PeriodError


def test_delta_pct() -> None:
    assert delta_pct(110, 100) == 10
    assert delta_pct(90, 100) == -10
    assert delta_pct(110, 105) == 5
    assert delta_pct(5, 0) is None
    assert trend_of(3) == "up"
    assert trend_of(-1) == "down"
    assert trend_of(0) == "flat"
    assert trend_of(None) is None


def test_compare_with_previous_year(restaurants, visits) -> None:
    cmp = compare_years(2024, restaurants, visits)

    assert cmp.year == 2024
    assert cmp.previous_year == 2023
    assert cmp.has_data
    assert (cmp.spent.current, cmp.spent.previous) == (110, 105)
    assert cmp.spent.delta_pct == 5
    assert cmp.spent.trend == "up"
    assert (cmp.visits.current, cmp.visits.previous, cmp.visits.delta_pct) == (3, 2, 50)


def test_previous_year_without_visits_reports_no_data(restaurants, visits) -> None:
    only_2024 = [v for v in visits if str(v.visited_at).startswith("2024")]
    cmp = compare_years("2024", restaurants, only_2024)

    assert not cmp.has_data
    assert cmp.spent is None
    assert cmp.visits is None


def test_previous_spend_zero_keeps_visit_delta() -> None:
    rs = [Restaurant(id="r1", name="A")]
    vs = [
        Visit(id="v1", restaurant_id="r1", price_eur=None, visited_at="2023-04-01"),
        Visit(id="v2", restaurant_id="r1", price_eur=25, visited_at="2024-04-01"),
    ]
    cmp = compare_years(2024, rs, vs)

    assert cmp.has_data
    assert cmp.spent.delta_pct is None
    assert cmp.spent.trend is None
    assert cmp.visits.delta_pct == 0
    assert cmp.visits.trend == "flat"


def test_all_time_cannot_be_compared(restaurants, visits) -> None:
    with pytest.raises(PeriodError):
        compare_years("all", restaurants, visits)
