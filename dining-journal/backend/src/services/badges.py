"""Gourmet badge classification.

A badge is picked by walking an ordered rule table: the first rule whose tags
intersect the user's top tags wins. When no tag rule matches, behavioural
thresholds are tried in order, then the table default applies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Union

from models import Badge, TagCount
from utils import normalize_label


@dataclass(frozen=True)
class BadgeRule:
    match_tags: tuple[str, ...]
    label: str
    subtitle: Optional[str] = None


@dataclass(frozen=True)
class BehaviorRule:
    metric: str  # attribute of BehaviorStats
    threshold: float
    label: str
    subtitle: Optional[str] = None


@dataclass(frozen=True)
class BadgeTable:
    name: str
    rules: tuple[BadgeRule, ...]
    fallbacks: tuple[BehaviorRule, ...] = ()
    default: Badge = field(default_factory=lambda: Badge("🍽️ Gourmand curieux", "Toujours en exploration"))


@dataclass
class BehaviorStats:
    visit_count: int = 0
    average_rating: float = 0.0
    average_per_cover: Optional[float] = None


STATS_TABLE = BadgeTable(
    name="stats",
    rules=(
        # Cuisine
        BadgeRule(("Japonais", "Asiatique"), "🍣 Addict d'Asie", "Cuisine favorite"),
        BadgeRule(("Italien",), "🍕 Italien dans l'âme", "Cuisine favorite"),
        BadgeRule(("Français",), "🥖 Tradition française", "Cuisine favorite"),
        BadgeRule(("Indien",), "🍛 Épicé & curieux", "Cuisine favorite"),
        BadgeRule(("Oriental", "Méditerranéen"), "🫒 Soleil en bouche", "Cuisine favorite"),
        BadgeRule(("Mexicain",), "🌮 Team Mexique", "Cuisine favorite"),
        BadgeRule(("Américain",), "🍔 US vibes", "Cuisine favorite"),
        # Concepts / ambiance / diet
        BadgeRule(("Gastronomique",), "💎 Fine dining", "Plutôt gastro"),
        BadgeRule(("Bistrot", "Brunch"), "☕ Bistrot lover", "Confort food"),
        BadgeRule(("Street food", "Fast-food"), "🚀 Street-food lover", "Rapide & bon"),
        BadgeRule(("Tapas / Partage",), "🍷 Partageur", "Tapas & convivialité"),
        BadgeRule(("Vegan",), "🥗 Vegan mood", "Green vibes"),
        BadgeRule(("Romantique",), "🌹 Romantique", "Ambiance favorite"),
        BadgeRule(("Familial",), "👨‍👩‍👧‍👦 Family friendly", "Ambiance favorite"),
    ),
    fallbacks=(
        BehaviorRule("visit_count", 30, "🔥 Gros mangeur", "Beaucoup de visites"),
        BehaviorRule("average_rating", 16, "⭐ Exigeant", "Notes élevées"),
        BehaviorRule("average_per_cover", 30, "💸 Grand seigneur", "Panier / couvert élevé"),
    ),
)

COMMUNITY_TABLE = BadgeTable(
    name="community",
    rules=(
        BadgeRule(("Italien",), "🍕 Italien dans l'âme"),
        BadgeRule(("Asiatique",), "🍜 Aventurier d'Asie"),
        BadgeRule(("Français",), "🥖 Terroir lover"),
        BadgeRule(("Indien",), "🌶️ Curry lover"),
        BadgeRule(("Oriental",), "🥙 Orient express"),
        BadgeRule(("Mexicain",), "🌮 Team tacos"),
        BadgeRule(("Américain",), "🍔 USA vibes"),
        BadgeRule(("Méditerranéen",), "🫒 Méditerranée mood"),
        BadgeRule(("Gastronomique",), "💎 Fine dining"),
        BadgeRule(("Bistrot",), "🍷 Esprit bistrot"),
        BadgeRule(("Brunch",), "🥐 Brunch addict"),
        BadgeRule(("Tapas / Partage",), "🍢 Team partage"),
        BadgeRule(("Street food",), "🛵 Street food lover"),
        BadgeRule(("Fast-food",), "🍟 Fast & fun"),
        BadgeRule(("Volonté",), "😋 À volonté master"),
        BadgeRule(("Vegan",), "🥗 Vegan mood"),
        BadgeRule(("Romantique",), "💘 Romantique"),
        BadgeRule(("Familial",), "👨‍👩‍👧 Familial"),
    ),
    default=Badge("🍽️ Gourmand curieux"),
)

TABLES: Dict[str, BadgeTable] = {t.name: t for t in (STATS_TABLE, COMMUNITY_TABLE)}


def get_table(name: str) -> BadgeTable:
    try:
        return TABLES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown badge table: {name}") from None


def _tag_names(top_tags: Iterable[Union[str, TagCount]]) -> List[str]:
    return [t.tag if isinstance(t, TagCount) else str(t) for t in top_tags]


def match_rule(top_tags: Iterable[Union[str, TagCount]], rules: Sequence[BadgeRule]) -> Optional[BadgeRule]:
    present = {normalize_label(t) for t in _tag_names(top_tags)}
    for rule in rules:
        if any(normalize_label(tag) in present for tag in rule.match_tags):
            return rule
    return None


def classify(
    top_tags: Iterable[Union[str, TagCount]],
    behavior: Optional[BehaviorStats] = None,
    table: BadgeTable = STATS_TABLE,
) -> Badge:
    rule = match_rule(top_tags, table.rules)
    if rule is not None:
        return Badge(rule.label, rule.subtitle)

    if behavior is not None:
        for fallback in table.fallbacks:
            value = getattr(behavior, fallback.metric, None)
            if value is not None and value >= fallback.threshold:
                return Badge(fallback.label, fallback.subtitle)

    return Badge(table.default.label, table.default.subtitle)
