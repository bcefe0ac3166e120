from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import Any

import pytest
from fakes import FakeClock

from mtgtracker.models.catalog import CatalogPrintRecord
from mtgtracker.models.collection import CollectionItem
from mtgtracker.services.rate_limiter import RateLimiter


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fast_limiter() -> RateLimiter:
    """Limiter that never sleeps, for tests that don't care about spacing."""
    return RateLimiter(0)


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    """Factory for Scryfall-shaped print dicts."""

    def _make(
        print_id: str = "print-1",
        name: str = "Lightning Bolt",
        collector_number: str = "1",
        **overrides: Any,
    ) -> dict[str, Any]:
        record: dict[str, Any] = {
            "object": "card",
            "id": print_id,
            "name": name,
            "set": "dmu",
            "set_name": "Dominaria United",
            "released_at": "2022-09-09",
            "type_line": "Instant",
            "oracle_text": "Lightning Bolt deals 3 damage to any target.",
            "rarity": "common",
            "collector_number": collector_number,
            "colors": ["R"],
            "color_identity": ["R"],
            "image_uris": {
                "small": f"https://cards.scryfall.io/small/{print_id}.jpg",
                "normal": f"https://cards.scryfall.io/normal/{print_id}.jpg",
            },
            "prices": {"usd": "1.10", "eur": "1.00", "eur_foil": "2.50"},
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def make_print(make_record: Callable[..., dict[str, Any]]) -> Callable[..., CatalogPrintRecord]:
    """Factory for validated catalog prints."""

    def _make(*args: Any, **kwargs: Any) -> CatalogPrintRecord:
        return CatalogPrintRecord.model_validate(make_record(*args, **kwargs))

    return _make


@pytest.fixture
def make_item() -> Callable[..., CollectionItem]:
    """Factory for collection items with sensible defaults."""

    def _make(local_id: int = 1, **overrides: Any) -> CollectionItem:
        values: dict[str, Any] = {
            "local_id": local_id,
            "print_id": f"print-{local_id}",
            "name": "Lightning Bolt",
            "set_code": "dmu",
            "set_name": "Dominaria United",
            "collector_number": "1",
            "set_released_at": date(2022, 9, 9),
            "type_line": "Instant",
            "oracle_text": "Lightning Bolt deals 3 damage to any target.",
            "colors": ["R"],
            "rarity": "common",
            "price": Decimal("1.00"),
        }
        values.update(overrides)
        return CollectionItem(**values)

    return _make

