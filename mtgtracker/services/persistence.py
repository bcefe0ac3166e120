"""
Collection persistence.

Stores the collection as a JSON list of items. Storage failures are never
fatal: a collection that cannot be read loads as empty, and a failed save is
logged and otherwise ignored.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from mtgtracker.config import settings
from mtgtracker.models.collection import CollectionItem
from mtgtracker.models.errors import PersistenceReadError, PersistenceWriteError
from mtgtracker.services.normalizer import sort_colors

logger = logging.getLogger(__name__)

_ITEMS_ADAPTER = TypeAdapter(list[CollectionItem])


class CollectionPersistence(Protocol):
    """Anything that can load and save the full list of collection items."""

    def load(self) -> list[CollectionItem]: ...

    def save(self, items: list[CollectionItem]) -> None: ...


class JsonCollectionFile:
    """Collection stored as a JSON file on disk."""

    def __init__(self, path: Path | None = None) -> None:
        """
        Args:
            path: File location. Defaults to settings.collection_path
        """
        self.path = path or settings.collection_path

    def load(self) -> list[CollectionItem]:
        """
        Load the stored collection.

        Returns:
            Stored items, with colors re-sorted into WUBRG order.
            Empty list if the file is missing, unreadable or corrupted.
        """
        try:
            items = self._read()
        except PersistenceReadError as e:
            logger.warning("%s; starting with an empty collection", e)
            return []

        for item in items:
            item.colors = sort_colors(item.colors)
        logger.debug("Loaded %d collection items from %s", len(items), self.path)
        return items

    def save(self, items: list[CollectionItem]) -> None:
        """Write the collection. Failures are logged, never raised."""
        try:
            self._write(items)
        except PersistenceWriteError as e:
            logger.error("%s", e)

    def _read(self) -> list[CollectionItem]:
        if not self.path.exists():
            return []

        try:
            raw = self.path.read_text(encoding="utf-8")
            return _ITEMS_ADAPTER.validate_python(json.loads(raw))
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceReadError(str(self.path), str(e)) from e
        except json.JSONDecodeError as e:
            raise PersistenceReadError(str(self.path), f"corrupted JSON: {e}") from e
        except ValidationError as e:
            raise PersistenceReadError(
                str(self.path), f"{e.error_count()} invalid item fields"
            ) from e

    def _write(self, items: list[CollectionItem]) -> None:
        payload = _ITEMS_ADAPTER.dump_json(items, indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write next to the target, then swap in, so a crash never leaves half a file
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".collection-")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceWriteError(str(self.path), str(e)) from e


class InMemoryPersistence:
    """Persistence that keeps a copy of the last saved list in memory."""

    def __init__(self, items: list[CollectionItem] | None = None) -> None:
        self.saved: list[CollectionItem] = list(items or [])
        self.save_count = 0

    def load(self) -> list[CollectionItem]:
        return list(self.saved)

    def save(self, items: list[CollectionItem]) -> None:
        self.saved = list(items)
        self.save_count += 1
