from config import Configuration
from models import Restaurant, Visit
from services.comparator import compare_years
from services.engine import StatsEngine, compute_statistics
from services.report import build_report


def test_build_report_basic(restaurants, visits):
    result = compute_statistics(restaurants, visits, 2024)
    md = build_report(result, compare_years(2024, restaurants, visits))

    assert "## Dining Statistics" in md
    assert "- Period: 2024" in md
    assert "- Badge: 🍕 Italien dans l'âme (Cuisine favorite)" in md
    assert "### Compared with 2023" in md
    assert "- Spend: ↗ 5%" in md
    assert "- Total spent: 110€" in md
    assert "- Priciest visit: Chez Luigi · 80€ · 2024-02-14" in md
    assert "### Top rated" in md
    assert "1. Chez Luigi · 18/20 (2 visit(s))" in md


def test_build_report_without_visits():
    result = compute_statistics([], [])
    md = build_report(result)

    assert "- Period: All time" in md
    assert "- Top city: —" in md
    assert "No visits recorded for this period." in md
    assert "### Summary" not in md


def test_build_report_amounts():
    rs = [Restaurant(id="r1", name="Cantine", rating=11)]
    vs = [Visit(id="v1", restaurant_id="r1", price_eur=0, covers=3, visited_at="2024-05-02")]
    md = build_report(compute_statistics(rs, vs))

    assert "- Total spent: 0€" in md
    assert "- Best price per cover: Cantine · 0€ / cover · 3 covers · 2024-05-02" in md


def test_build_report_dates_follow_zone():
    engine = StatsEngine(Configuration(timezone="Europe/Paris"))
    rs = [Restaurant(id="r1", name="Cantine", rating=11)]
    vs = [Visit(id="v1", restaurant_id="r1", price_eur=42, covers=2, visited_at="2024-05-02T23:30:00Z")]
    md = build_report(engine.compute(rs, vs), tz=engine.tz)

    assert "- Priciest visit: Cantine · 42€ · 2024-05-03" in md
    assert "- Most active month: mai 2024 • 1 visit(s)" in md
