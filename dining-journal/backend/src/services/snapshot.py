from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Sequence

from models import PLACEHOLDER, Restaurant, Visit
from utils import clean_text

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when the host hands over rows that do not have the expected shape."""


def _pick(row: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in row:
            return row[key]
    return default


def _to_tags(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    tags: list[str] = []
    for raw in value:
        text = clean_text(raw)
        if text:
            tags.append(text)
    return tags


def _ensure_sequence(rows: Any, label: str) -> Sequence[Any]:
    if rows is None:
        return []
    if not isinstance(rows, (list, tuple)):
        raise SnapshotError(f"{label} must be a list, got {type(rows).__name__}")
    return rows


def to_restaurant(row: Any) -> Restaurant:
    if isinstance(row, Restaurant):
        return row
    if not isinstance(row, Mapping):
        raise SnapshotError(f"restaurant row must be a mapping, got {type(row).__name__}")

    rid = clean_text(row.get("id"))
    if not rid:
        raise SnapshotError("restaurant row is missing an id")

    return Restaurant(
        id=rid,
        name=clean_text(row.get("name")) or PLACEHOLDER,
        city=clean_text(row.get("city")) or None,
        country=clean_text(row.get("country")) or None,
        rating=row.get("rating"),
        tags=_to_tags(row.get("tags")),
        created_at=_pick(row, "created_at", "createdAt"),
    )


def to_visit(row: Any) -> Visit:
    if isinstance(row, Visit):
        return row
    if not isinstance(row, Mapping):
        raise SnapshotError(f"visit row must be a mapping, got {type(row).__name__}")

    restaurant_id = clean_text(_pick(row, "restaurant_id", "restaurantId"))
    if not restaurant_id:
        raise SnapshotError("visit row is missing a restaurant_id")

    return Visit(
        id=clean_text(row.get("id")),
        restaurant_id=restaurant_id,
        price_eur=_pick(row, "price_eur", "priceEur"),
        covers=_pick(row, "covers", default=1),
        visited_at=_pick(row, "visited_at", "visitedAt"),
    )


def load_restaurants(rows: Any) -> List[Restaurant]:
    return [to_restaurant(row) for row in _ensure_sequence(rows, "restaurants")]


def load_visits(rows: Any) -> List[Visit]:
    return [to_visit(row) for row in _ensure_sequence(rows, "visits")]


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return repr(value)


def snapshot_fingerprint(restaurants: Iterable[Restaurant], visits: Iterable[Visit]) -> str:
    """Stable digest of a snapshot; any mutation of either collection changes it."""
    payload = {
        "restaurants": [asdict(r) for r in restaurants],
        "visits": [asdict(v) for v in visits],
    }
    encoded = json.dumps(payload, sort_keys=True, default=_json_default, ensure_ascii=False)
    digest = hashlib.sha256(encoded.encode("utf-8")).hexdigest()
    logger.debug("snapshot fingerprint=%s", digest[:12])
    return digest
