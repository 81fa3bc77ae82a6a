from __future__ import annotations

import pytest

from models import Badge, TagCount
from services.badges import COMMUNITY_TABLE, STATS_TABLE, BehaviorStats, classify, get_table, match_rule


def test_single_tag_badge() -> None:
    badge = classify([TagCount("Italien", 1)])
    assert badge == Badge("🍕 Italien dans l'âme", "Cuisine favorite")


def test_matching_ignores_accents_and_case() -> None:
    assert classify(["mediterraneen"]).label == "🫒 Soleil en bouche"
    assert classify(["FRANCAIS"]).label == "🥖 Tradition française"


def test_table_order_decides_between_tags() -> None:
    # Romantique ranks first among the user's tags, but Japonais comes earlier in the table
    badge = classify(["Romantique", "Japonais", "Vegan"])
    assert badge.label == "🍣 Addict d'Asie"
    assert match_rule(["Vegan", "Bistrot"], STATS_TABLE.rules).label == "☕ Bistrot lover"


def test_behaviour_fallbacks_in_order() -> None:
    assert classify([], BehaviorStats(visit_count=30)).label == "🔥 Gros mangeur"
    assert classify([], BehaviorStats(visit_count=29, average_rating=16)).label == "⭐ Exigeant"
    assert classify(["Inconnu"], BehaviorStats(average_per_cover=30.0)).label == "💸 Grand seigneur"
    assert classify([], BehaviorStats(visit_count=40, average_rating=19, average_per_cover=80)).label == "🔥 Gros mangeur"


def test_default_badge() -> None:
    assert classify([], BehaviorStats(visit_count=3, average_rating=12, average_per_cover=None)) == Badge(
        "🍽️ Gourmand curieux", "Toujours en exploration"
    )
    assert classify([]).label == "🍽️ Gourmand curieux"


def test_community_table_has_no_fallbacks() -> None:
    badge = classify([], BehaviorStats(visit_count=100), COMMUNITY_TABLE)
    assert badge == Badge("🍽️ Gourmand curieux")
    assert classify(["Asiatique"], table=COMMUNITY_TABLE).label == "🍜 Aventurier d'Asie"
    assert classify(["Volonté"], table=COMMUNITY_TABLE).subtitle is None


def test_get_table() -> None:
    assert get_table("stats") is STATS_TABLE
    assert get_table(" Community ") is COMMUNITY_TABLE
    with pytest.raises(ValueError):
        get_table("profile")
