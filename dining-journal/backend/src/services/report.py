from __future__ import annotations

from datetime import tzinfo
from typing import Any, List, Optional

from models import PLACEHOLDER, MetricDelta, StatisticsResult, YearComparison
from utils import parse_timestamp, round1

TREND_ARROWS = {"up": "↗", "down": "↘", "flat": "—"}


def _eur(value: Optional[float]) -> str:
    if value is None:
        return PLACEHOLDER
    text = f"{round1(value):.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text}€"


def _day(value: Any, tz: Optional[tzinfo] = None) -> str:
    parsed = parse_timestamp(value, tz)
    return parsed.date().isoformat() if parsed else PLACEHOLDER


def _rating(value: Optional[float]) -> str:
    return PLACEHOLDER if value is None else f"{value:g}/20"


def _delta(metric: Optional[MetricDelta]) -> str:
    if metric is None or metric.delta_pct is None:
        return PLACEHOLDER
    return f"{TREND_ARROWS[metric.trend or 'flat']} {abs(metric.delta_pct)}%"


def build_report(
    result: StatisticsResult,
    comparison: Optional[YearComparison] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    period = "All time" if result.period == "all" else str(result.period)
    badge = result.badge
    header = [
        "## Dining Statistics",
        "",
        f"- Period: {period}",
        f"- Badge: {badge.label if badge else PLACEHOLDER}" + (f" ({badge.subtitle})" if badge and badge.subtitle else ""),
        f"- Top city: {result.top_city}",
        f"- Top country: {result.top_country}",
        f"- Top tags: {', '.join(f'#{t.tag} ({t.count})' for t in result.top_tags) or PLACEHOLDER}",
        "",
    ]

    if comparison is not None:
        header.append(f"### Compared with {comparison.previous_year}")
        if comparison.has_data:
            header.append(f"- Spend: {_delta(comparison.spent)}")
            header.append(f"- Visits: {_delta(comparison.visits)}")
        else:
            header.append("- No data for the previous year")
        header.append("")

    lines: List[str] = header
    if result.visit_count == 0:
        lines.append("> No visits recorded for this period.")
        return "\n".join(lines)

    lines += [
        "### Summary",
        f"- Restaurants: {result.total_restaurants}",
        f"- Visits: {result.visit_count}"
        + (f" (~ {_eur(result.average_per_visit)} / visit)" if result.average_per_visit is not None else ""),
        f"- Covers: {result.total_covers}",
        f"- Per cover: {_eur(result.average_per_cover)}",
        f"- Average rating: {result.average_rating:g}/20",
        f"- Total spent: {_eur(result.total_spent)}",
        "",
        "### Highlights",
        f"- Best rating: {_rating(result.best_rating)}",
        f"- Worst rating: {_rating(result.worst_rating)}",
    ]

    month = result.most_active_month
    lines.append(f"- Most active month: {month.label} • {month.count} visit(s)" if month else f"- Most active month: {PLACEHOLDER}")

    mv = result.most_visited
    lines.append(f"- Most visited: {mv.restaurant_name} ({mv.count} visit(s))" if mv else f"- Most visited: {PLACEHOLDER}")

    pv = result.priciest_visit
    lines.append(
        f"- Priciest visit: {pv.restaurant_name} · {_eur(pv.price)} · {_day(pv.visited_at, tz)}"
        if pv
        else f"- Priciest visit: {PLACEHOLDER}"
    )

    for title, entry in (("Best price per cover", result.best_per_cover), ("Highest price per cover", result.worst_per_cover)):
        if entry is None:
            lines.append(f"- {title}: {PLACEHOLDER}")
        else:
            lines.append(
                f"- {title}: {entry.restaurant_name} · {_eur(entry.unit)} / cover · {entry.covers} covers · {_day(entry.visited_at, tz)}"
            )

    lines += ["", "### Restaurants by country"]
    if result.countries:
        lines.extend(f"- {c.key} · {c.count}" for c in result.countries)
    else:
        lines.append(f"- {PLACEHOLDER}")

    if result.top_rated:
        lines += ["", "### Top rated"]
        lines.extend(
            f"{idx}. {t.name} · {t.rating:g}/20 ({t.visit_count} visit(s))" for idx, t in enumerate(result.top_rated, start=1)
        )

    return "\n".join(lines)
