import sys
from pathlib import Path

import pytest


# Ensure backend/src is on sys.path for tests so that imports like `services.*` and `models` work.
ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from models import Restaurant, Visit  # noqa: E402


@pytest.fixture
def restaurants() -> list:
    return [
        Restaurant(id="r1", name="Chez Luigi", city="Paris", country="France", rating=18, tags=["Italien", "Romantique"], created_at="2023-01-10"),
        Restaurant(id="r2", name="Sushi Ya", city="Lyon", country="France", rating=15, tags=["Japonais"], created_at="2023-02-01"),
        Restaurant(id="r3", name="Bodega", city="Paris", country="Espagne", rating=12, tags=["Tapas / Partage", "Italien"], created_at="2023-03-05"),
        Restaurant(id="r4", name="Never Visited", city="Nice", country="France", rating=None, tags=[], created_at="2024-06-01"),
    ]


@pytest.fixture
def visits() -> list:
    return [
        Visit(id="v1", restaurant_id="r1", price_eur=60, covers=2, visited_at="2023-05-12T20:00:00"),
        Visit(id="v2", restaurant_id="r2", price_eur=45, covers=3, visited_at="2023-05-20T13:00:00"),
        Visit(id="v3", restaurant_id="r1", price_eur=80, covers=2, visited_at="2024-02-14T20:30:00"),
        Visit(id="v4", restaurant_id="r3", price_eur=None, covers=4, visited_at="2024-02-20T21:00:00"),
        Visit(id="v5", restaurant_id="r1", price_eur=30, covers=1, visited_at="2024-07-01T12:00:00"),
    ]
