"""Data models for the dining journal statistics engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

Timestamp = Union[str, datetime, date, None]

PLACEHOLDER = "—"


@dataclass
class Restaurant:
    id: str
    name: str = PLACEHOLDER
    city: Optional[str] = None
    country: Optional[str] = None
    rating: Any = None  # 0..20, raw value as stored upstream
    tags: list[str] = field(default_factory=list)
    created_at: Timestamp = None


@dataclass
class Visit:
    id: str
    restaurant_id: str
    price_eur: Any = None  # None means price unknown
    covers: Any = 1
    visited_at: Timestamp = None


@dataclass
class TagCount:
    tag: str
    count: int


@dataclass
class CountEntry:
    key: str
    count: int


@dataclass
class PricedVisit:
    restaurant_id: str
    restaurant_name: str
    price: float
    visited_at: Timestamp


@dataclass
class PerCoverVisit:
    restaurant_id: str
    restaurant_name: str
    unit: float
    price: float
    covers: int
    visited_at: Timestamp


@dataclass
class MostVisited:
    restaurant_id: str
    restaurant_name: str
    count: int


@dataclass
class MonthBucket:
    year: int
    month: int
    label: str
    count: int = 0


@dataclass
class Badge:
    label: str
    subtitle: Optional[str] = None


@dataclass
class TopRated:
    restaurant_id: str
    name: str
    rating: float
    visit_count: int


@dataclass
class MetricDelta:
    current: float
    previous: float
    delta_pct: Optional[int] = None
    trend: Optional[str] = None  # "up" | "down" | "flat"


@dataclass
class YearComparison:
    year: int
    previous_year: int
    has_data: bool
    spent: Optional[MetricDelta] = None
    visits: Optional[MetricDelta] = None


@dataclass
class RestaurantSummary:
    restaurant: Restaurant
    visit_count: int = 0
    total_spent: float = 0.0
    last_visit_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass
class Aggregates:
    """Raw tallies produced by one aggregation pass over a period slice."""

    total_restaurants: int = 0
    rating_sum: float = 0.0
    ratings: list[float] = field(default_factory=list)
    total_spent: float = 0.0
    total_covers: int = 0
    visit_count: int = 0
    visits_by_restaurant: Dict[str, int] = field(default_factory=dict)
    last_visit_by_restaurant: Dict[str, datetime] = field(default_factory=dict)
    months: Dict[tuple[int, int], MonthBucket] = field(default_factory=dict)
    tag_counts: Dict[str, int] = field(default_factory=dict)
    city_counts: Dict[str, int] = field(default_factory=dict)
    country_counts: Dict[str, int] = field(default_factory=dict)
    priciest_visit: Optional[PricedVisit] = None
    best_per_cover: Optional[PerCoverVisit] = None
    worst_per_cover: Optional[PerCoverVisit] = None
    average_rating: float = 0.0
    average_per_visit: Optional[float] = None
    average_per_cover: Optional[float] = None
    skipped: int = 0


@dataclass
class StatisticsResult:
    period: Union[str, int]
    total_restaurants: int = 0
    visit_count: int = 0
    total_covers: int = 0
    average_rating: float = 0.0
    best_rating: Optional[float] = None
    worst_rating: Optional[float] = None
    total_spent: float = 0.0
    average_per_visit: Optional[float] = None
    average_per_cover: Optional[float] = None
    top_city: str = PLACEHOLDER
    top_country: str = PLACEHOLDER
    countries: List[CountEntry] = field(default_factory=list)
    top_tags: List[TagCount] = field(default_factory=list)
    most_visited: Optional[MostVisited] = None
    priciest_visit: Optional[PricedVisit] = None
    best_per_cover: Optional[PerCoverVisit] = None
    worst_per_cover: Optional[PerCoverVisit] = None
    most_active_month: Optional[MonthBucket] = None
    monthly: List[MonthBucket] = field(default_factory=list)
    top_rated: List[TopRated] = field(default_factory=list)
    badge: Optional[Badge] = None
    available_years: List[int] = field(default_factory=list)


@dataclass
class ProfileView:
    period: Union[str, int]
    total_restaurants: int
    average_rating: float
    best_rating: Optional[float]
    worst_rating: Optional[float]
    top_city: str
    top_tags: List[str]
    total_spent: float
    priciest_visit: Optional[PricedVisit]
    most_visited: Optional[MostVisited]
    countries: List[CountEntry]
    badge: Optional[Badge]


@dataclass
class PublicView:
    period: Union[str, int]
    total_restaurants: int
    visit_count: int
    total_spent: float
    total_covers: int
    average_rating: float
    average_per_cover: Optional[float]
    top_rated: List[TopRated]
    available_years: List[int]


@dataclass
class CommunityPreview:
    restaurant_count: int
    badge: Badge
