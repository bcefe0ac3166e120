"""Tests for storing the collection on disk."""

import json
import logging
from collections.abc import Callable
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from mtgtracker.models.collection import CardFace, CollectionItem
from mtgtracker.services.persistence import JsonCollectionFile

ItemFactory = Callable[..., CollectionItem]


class TestJsonCollectionFile:
    """Tests for the JSON file backend."""

    def test_round_trip(self, tmp_path: Path, make_item: ItemFactory) -> None:
        """Saved items load back field for field."""
        items = [
            make_item(
                1,
                foil=True,
                quantity=3,
                price=Decimal("12.34"),
                faces=[
                    CardFace("Front", "https://img.example/front.jpg"),
                    CardFace("Back", "https://img.example/back.jpg", "https://img.example/b.jpg"),
                ],
            ),
            make_item(2, price=None, rarity=None, set_released_at=None),
        ]
        storage = JsonCollectionFile(tmp_path / "collection.json")

        storage.save(items)
        loaded = storage.load()

        assert loaded == items
        assert loaded[0].price == Decimal("12.34")
        assert loaded[0].set_released_at == date(2022, 9, 9)
        assert loaded[0].faces[1].small_image_url == "https://img.example/b.jpg"

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert JsonCollectionFile(tmp_path / "nope.json").load() == []

    def test_creates_parent_directories(self, tmp_path: Path, make_item: ItemFactory) -> None:
        path = tmp_path / "nested" / "dir" / "collection.json"

        JsonCollectionFile(path).save([make_item()])

        assert json.loads(path.read_text())[0]["name"] == "Lightning Bolt"

    def test_corrupt_file_loads_empty(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Unparseable JSON is logged and treated as an empty collection."""
        path = tmp_path / "collection.json"
        path.write_text("{not json")

        with caplog.at_level(logging.WARNING):
            assert JsonCollectionFile(path).load() == []

        assert "corrupted JSON" in caplog.text

    def test_invalid_items_load_empty(self, tmp_path: Path) -> None:
        """Valid JSON with the wrong shape is also treated as empty."""
        path = tmp_path / "collection.json"
        path.write_text(json.dumps([{"name": "no ids here"}]))

        assert JsonCollectionFile(path).load() == []

    def test_colors_resorted_on_load(self, tmp_path: Path, make_item: ItemFactory) -> None:
        """Stored colors come back in WUBRG order."""
        path = tmp_path / "collection.json"
        storage = JsonCollectionFile(path)
        storage.save([make_item(colors=["G", "U", "W"])])

        assert storage.load()[0].colors == ["W", "U", "G"]

    def test_unwritable_path_is_logged(
        self, tmp_path: Path, make_item: ItemFactory, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failed save is logged instead of raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")

        with caplog.at_level(logging.ERROR):
            JsonCollectionFile(blocker / "collection.json").save([make_item()])

        assert "Failed to write collection" in caplog.text

    def test_save_replaces_previous_contents(
        self, tmp_path: Path, make_item: ItemFactory
    ) -> None:
        storage = JsonCollectionFile(tmp_path / "collection.json")

        storage.save([make_item(1), make_item(2)])
        storage.save([make_item(3)])

        assert [item.local_id for item in storage.load()] == [3]
        assert [p.name for p in tmp_path.iterdir()] == ["collection.json"]
