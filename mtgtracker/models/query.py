"""
Query definitions and derived views for the collection.

A query is a FilterSpec plus a SortMode and a GroupMode. The result is a
CollectionView, computed fresh on every call and never stored.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from mtgtracker.models.collection import CollectionItem


class SortMode(str, Enum):
    """Ordering applied to the filtered collection."""

    DEFAULT = "default"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"


class GroupMode(str, Enum):
    """Whether results are bucketed by set."""

    BY_SET = "by-set"
    FLAT = "flat"


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """
    Facets for narrowing the collection.

    Text facets are case-insensitive substring checks; a blank term means
    no constraint. Set facets are ORed internally (empty = no constraint).
    Facets are ANDed together.

    Attributes:
        name_contains: Matched against the card name
        set_contains: Matched against the set code or the set name
        type_contains: Matched against the type line
        oracle_contains: Matched against the rules text
        colors: Color codes to keep; "C" selects colorless cards
        rarities: Rarities to keep (common, uncommon, rare, mythic, ...)
    """

    name_contains: str = ""
    set_contains: str = ""
    type_contains: str = ""
    oracle_contains: str = ""
    colors: frozenset[str] = frozenset()
    rarities: frozenset[str] = frozenset()


@dataclass
class SetGroup:
    """Items of one set, in display order."""

    set_name: str
    released_at: date | None
    items: list[CollectionItem] = field(default_factory=list)


@dataclass
class CollectionView:
    """
    Result of querying the collection.

    Attributes:
        items: Every filtered item in final display order
        groups: Visible set buckets (empty in flat mode)
        hidden_groups: Buckets the caller collapsed, same ordering rule
        filtered_count: Number of items that passed the filter
        total_count: Number of items in the collection
        total_value: Sum of price x quantity over the filtered items
    """

    items: list[CollectionItem]
    groups: list[SetGroup]
    hidden_groups: list[SetGroup]
    filtered_count: int
    total_count: int
    total_value: Decimal
