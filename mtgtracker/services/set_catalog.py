"""
Set list helpers for browsing the catalog by set.

Orders, filters and partitions the sets returned by CatalogClient.list_sets()
into released/upcoming and regular/other groups.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from mtgtracker.models.catalog import CatalogSet

# Set types shown in the main set list; everything else goes under "other"
REGULAR_SET_TYPES = frozenset(
    {
        "core",
        "expansion",
        "masters",
        "draft_innovation",
        "commander",
        "starter",
        "box",
        "duel_deck",
        "from_the_vault",
        "premium_deck",
        "spellbook",
        "planechase",
        "archenemy",
        "vanguard",
        "masterpiece",
        "treasure_chest",
        "minigame",
        "funny",
    }
)


@dataclass
class SetListing:
    """Sets split by release status and set type, each list newest first."""

    released_regular: list[CatalogSet] = field(default_factory=list)
    released_other: list[CatalogSet] = field(default_factory=list)
    upcoming_regular: list[CatalogSet] = field(default_factory=list)
    upcoming_other: list[CatalogSet] = field(default_factory=list)


def sort_sets_newest_first(sets: Iterable[CatalogSet]) -> list[CatalogSet]:
    """Sort by release date, newest first. Undated sets go last."""
    return sorted(sets, key=lambda s: s.released_at or date.min, reverse=True)


def filter_sets(sets: Iterable[CatalogSet], text: str) -> list[CatalogSet]:
    """Keep sets whose code or name contains text (case-insensitive)."""
    term = text.strip().lower()
    if not term:
        return list(sets)
    return [s for s in sets if term in s.code.lower() or term in s.name.lower()]


def partition_sets(sets: Iterable[CatalogSet], today: date | None = None) -> SetListing:
    """
    Split sets into released/upcoming and regular/other.

    Args:
        sets: Sets to partition (order is normalized to newest first)
        today: Reference date for "released". Defaults to date.today()

    Returns:
        SetListing with four lists, each newest first
    """
    today = today or date.today()
    listing = SetListing()

    for catalog_set in sort_sets_newest_first(sets):
        released = catalog_set.released_at is not None and catalog_set.released_at <= today
        regular = catalog_set.set_type in REGULAR_SET_TYPES
        if released:
            target = listing.released_regular if regular else listing.released_other
        else:
            target = listing.upcoming_regular if regular else listing.upcoming_other
        target.append(catalog_set)

    return listing
