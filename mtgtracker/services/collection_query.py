"""
Collection query engine.

Derives the displayed view of a collection from a filter, a sort mode and a
group mode. Pure: takes the store's items, returns a new CollectionView,
and never mutates or remembers anything.

Steps, in order:
1. Filter  - facets ANDed, values within a facet ORed
2. Sort    - by price, by name (flat default), or store order
3. Group   - by set, newest set first, collector-number order inside a set
4. Total   - value and counts over the filtered items

Supports queries like:
- "My blue rares" -> colors={"U"}, rarities={"rare"}
- "Cards that draw" -> oracle_contains="draw a card"
- "Most valuable first" -> sort=SortMode.PRICE_DESC, group=GroupMode.FLAT
"""

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from mtgtracker.config import COLORLESS
from mtgtracker.models.collection import CollectionItem
from mtgtracker.models.query import CollectionView, FilterSpec, GroupMode, SetGroup, SortMode
from mtgtracker.services.normalizer import sort_by_collector_number

_ZERO = Decimal("0")


def query_collection(
    items: Sequence[CollectionItem],
    filters: FilterSpec | None = None,
    sort: SortMode = SortMode.DEFAULT,
    group: GroupMode = GroupMode.BY_SET,
    hidden_sets: Iterable[str] = (),
) -> CollectionView:
    """
    Filter, sort, group and total the collection.

    Args:
        items: Collection items in store order
        filters: Facets to apply. None means no filtering
        sort: Ordering mode
        group: BY_SET buckets items by set name, FLAT keeps one list
        hidden_sets: Set names whose buckets are collapsed by the caller;
                     they are reported in hidden_groups (BY_SET only)

    Returns:
        CollectionView with the ordered items, groups and totals

    Examples:
        >>> query_collection(store.items, FilterSpec(colors=frozenset({"R"})))
        >>> query_collection(store.items, sort=SortMode.PRICE_DESC, group=GroupMode.FLAT)
    """
    filters = filters or FilterSpec()

    filtered = [item for item in items if matches_filter(item, filters)]
    ordered = _sort_items(filtered, sort, group)

    groups: list[SetGroup] = []
    hidden_groups: list[SetGroup] = []
    if group is GroupMode.BY_SET:
        hidden = set(hidden_sets)
        for set_group in _group_by_set(ordered, sort):
            (hidden_groups if set_group.set_name in hidden else groups).append(set_group)
        ordered = [item for set_group in groups + hidden_groups for item in set_group.items]

    return CollectionView(
        items=ordered,
        groups=groups,
        hidden_groups=hidden_groups,
        filtered_count=len(filtered),
        total_count=len(items),
        total_value=total_value(filtered),
    )


def matches_filter(item: CollectionItem, filters: FilterSpec) -> bool:
    """Whether an item passes every facet of the filter."""
    # Rarity filter
    if filters.rarities:
        rarities = {rarity.lower() for rarity in filters.rarities}
        if not item.rarity or item.rarity.lower() not in rarities:
            return False

    # Color filter: colorless cards need the colorless marker
    if filters.colors:
        if not item.colors:
            if COLORLESS not in filters.colors:
                return False
        elif not any(color in filters.colors for color in item.colors):
            return False

    if not _contains(item.name, filters.name_contains):
        return False

    set_term = filters.set_contains.strip()
    if set_term and not (
        _contains(item.set_code, set_term) or _contains(item.set_name, set_term)
    ):
        return False

    if not _contains(item.type_line, filters.type_contains):
        return False

    return _contains(item.oracle_text, filters.oracle_contains)


def total_value(items: Iterable[CollectionItem]) -> Decimal:
    """Sum of price x quantity. Items without a price count as 0."""
    return sum((_price(item) * item.quantity for item in items), _ZERO)


def _contains(value: str | None, term: str) -> bool:
    """Case-insensitive containment; a blank term matches everything."""
    term = term.strip().lower()
    if not term:
        return True
    return term in (value or "").lower()


def _price(item: CollectionItem) -> Decimal:
    return item.price if item.price is not None else _ZERO


def _sort_by_price(items: Iterable[CollectionItem], sort: SortMode) -> list[CollectionItem]:
    # sorted() keeps ties in input order in both directions
    return sorted(items, key=_price, reverse=sort is SortMode.PRICE_DESC)


def _sort_items(
    items: list[CollectionItem], sort: SortMode, group: GroupMode
) -> list[CollectionItem]:
    if sort is not SortMode.DEFAULT:
        return _sort_by_price(items, sort)
    if group is GroupMode.FLAT:
        return sorted(items, key=lambda item: item.name.casefold())
    return list(items)


def _group_by_set(items: list[CollectionItem], sort: SortMode) -> list[SetGroup]:
    """
    Bucket items by set name.

    Buckets are ordered newest release first; buckets without a known
    release date follow, in the order they first appeared.
    """
    buckets: dict[str, SetGroup] = {}
    for item in items:
        bucket = buckets.get(item.set_name)
        if bucket is None:
            bucket = buckets[item.set_name] = SetGroup(set_name=item.set_name, released_at=None)
        if bucket.released_at is None and item.set_released_at is not None:
            bucket.released_at = item.set_released_at
        bucket.items.append(item)

    for bucket in buckets.values():
        if sort is SortMode.DEFAULT:
            bucket.items = sort_by_collector_number(
                bucket.items, lambda item: item.collector_number
            )
        else:
            bucket.items = _sort_by_price(bucket.items, sort)

    dated = [b for b in buckets.values() if b.released_at is not None]
    undated = [b for b in buckets.values() if b.released_at is None]
    dated.sort(key=lambda bucket: bucket.released_at or date.min, reverse=True)
    return dated + undated
