from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Any, Iterable, List, Literal, Optional, Sequence, Union

from models import Restaurant, Visit
from utils import year_of

ALL = "all"

PeriodSelector = Union[Literal["all"], int]


class PeriodError(ValueError):
    pass


@dataclass
class PeriodSlice:
    period: PeriodSelector
    restaurants: List[Restaurant]
    visits: List[Visit]


def parse_period(value: Any) -> PeriodSelector:
    """Normalise a period selector: ``"all"``, an int year, or a numeric string."""
    if value is None or value == ALL:
        return ALL
    if isinstance(value, bool):
        raise PeriodError(f"invalid period selector: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise PeriodError(f"invalid period selector: {value!r}")


def available_years(visits: Iterable[Visit], tz: Optional[tzinfo] = None) -> List[int]:
    years = {year_of(v.visited_at, tz) for v in visits}
    years.discard(None)
    return sorted(years, reverse=True)  # type: ignore[arg-type]


def resolve_period(period: Any, visits: Sequence[Visit], tz: Optional[tzinfo] = None) -> PeriodSelector:
    """Fall back to ``"all"`` when the selected year no longer has any visit."""
    selector = parse_period(period)
    if selector == ALL:
        return ALL
    return selector if selector in available_years(visits, tz) else ALL


def filter_visits(visits: Sequence[Visit], period: PeriodSelector, tz: Optional[tzinfo] = None) -> List[Visit]:
    if period == ALL:
        return list(visits)
    return [v for v in visits if year_of(v.visited_at, tz) == period]


def induced_restaurants(
    restaurants: Sequence[Restaurant],
    visits: Sequence[Visit],
    period: PeriodSelector,
) -> List[Restaurant]:
    if period == ALL:
        return list(restaurants)
    visited = {v.restaurant_id for v in visits}
    return [r for r in restaurants if r.id in visited]


def apply_period(
    restaurants: Sequence[Restaurant],
    visits: Sequence[Visit],
    period: Any = ALL,
    tz: Optional[tzinfo] = None,
) -> PeriodSlice:
    selector = parse_period(period)
    kept_visits = filter_visits(visits, selector, tz)
    kept_restaurants = induced_restaurants(restaurants, kept_visits, selector)
    return PeriodSlice(period=selector, restaurants=kept_restaurants, visits=kept_visits)
