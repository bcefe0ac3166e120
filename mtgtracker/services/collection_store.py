"""
Collection store.

Owns the user's collection items and is the only place they are mutated.

INVARIANT: At most one item per identity key (print id, foil flag).
Adding a print that is already owned in the same finish bumps the quantity
of the existing item instead of inserting a second one.

INVARIANT: Quantities are always >= 1.

The store never re-orders items; ordering is a query-time concern
(see collection_query).
"""

import logging
from collections.abc import Iterable, Iterator

from mtgtracker.models.collection import CollectionItem
from mtgtracker.services.normalizer import IdSequence
from mtgtracker.services.persistence import CollectionPersistence

logger = logging.getLogger(__name__)


class CollectionStore:
    """
    The user's collection, keyed by identity (print id, foil).

    Usage:
        store = CollectionStore.load(JsonCollectionFile())
        item = normalize_print(record, foil=False, ids=store.ids)
        store.add(item)
    """

    def __init__(
        self,
        items: Iterable[CollectionItem] = (),
        *,
        persistence: CollectionPersistence | None = None,
    ) -> None:
        """
        Args:
            items: Initial items. Items repeating an identity key are merged
            persistence: If given, every change is saved through it
        """
        self._items: list[CollectionItem] = []
        self._persistence = persistence
        self.ids = IdSequence()

        for item in items:
            existing = self._find(item.print_id, item.foil)
            if existing is not None:
                logger.warning(
                    "Merging duplicate stored entry for %s (%s, foil=%s)",
                    item.name,
                    item.print_id,
                    item.foil,
                )
                existing.quantity += max(item.quantity, 1)
                continue
            item.quantity = max(item.quantity, 1)
            self._items.append(item)

        self.ids.advance_past(item.local_id for item in self._items)

        # Stored data may carry clashing ids; later holders get fresh ones
        seen_ids: set[int] = set()
        for item in self._items:
            if item.local_id in seen_ids:
                item.local_id = self.ids.next_id()
            seen_ids.add(item.local_id)

    @classmethod
    def load(cls, persistence: CollectionPersistence) -> "CollectionStore":
        """Build a store from persisted items; later changes are saved back."""
        return cls(persistence.load(), persistence=persistence)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CollectionItem]:
        return iter(self._items)

    @property
    def items(self) -> list[CollectionItem]:
        """Snapshot of the items in store order."""
        return list(self._items)

    def get(self, local_id: int) -> CollectionItem | None:
        for item in self._items:
            if item.local_id == local_id:
                return item
        return None

    def quantity_of(self, print_id: str, foil: bool) -> int:
        """Owned copies of a print in a finish, 0 if not owned."""
        item = self._find(print_id, foil)
        return item.quantity if item else 0

    def add(self, item: CollectionItem) -> list[CollectionItem]:
        """
        Add one copy of a print.

        If the identity key is already owned, the existing item's quantity
        goes up by exactly 1 and the incoming item (and its local id) is
        discarded. Otherwise the item is inserted as given.

        Args:
            item: Freshly normalized item

        Returns:
            Snapshot of the collection after the change

        Raises:
            ValueError: If the item's local id already belongs to another item
        """
        existing = self._find(item.print_id, item.foil)
        if existing is not None:
            existing.quantity += 1
            logger.debug(
                "Merged %s into item %d (qty %d)", item.name, existing.local_id, existing.quantity
            )
        else:
            if self.get(item.local_id) is not None:
                raise ValueError(f"Local id {item.local_id} is already in use")
            item.quantity = max(item.quantity, 1)
            self._items.append(item)
            self.ids.advance_past([item.local_id])
            logger.debug("Added %s as item %d", item.name, item.local_id)

        self._save()
        return self.items

    def remove(self, local_id: int) -> None:
        """Remove an item. Unknown ids are ignored."""
        item = self.get(local_id)
        if item is None:
            return
        self._items.remove(item)
        self._save()

    def set_quantity(self, local_id: int, quantity: int) -> None:
        """Set an item's quantity, clamped to at least 1. Unknown ids are ignored."""
        item = self.get(local_id)
        if item is None:
            return
        item.quantity = max(quantity, 1)
        self._save()

    def _find(self, print_id: str, foil: bool) -> CollectionItem | None:
        for item in self._items:
            if item.print_id == print_id and item.foil == foil:
                return item
        return None

    def _save(self) -> None:
        if self._persistence is not None:
            self._persistence.save(self.items)
