"""
Card normalizer.

Maps a raw catalog print (single- or multi-faced) plus a foil selection into
the CollectionItem shape stored by the collection.

Fallback chains are expressed as ordered strategy tuples, evaluated
first-match-wins:
- colors: identity -> face identities -> colors -> face colors
- images: print image -> first face image -> placeholder

Missing or malformed optional fields (price, images, face images) degrade
to "absent" rather than failing the record.
"""

import functools
import logging
import re
from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any, TypeVar

from mtgtracker.config import PLACEHOLDER_IMAGE_NORMAL, PLACEHOLDER_IMAGE_SMALL, settings
from mtgtracker.models.catalog import CatalogPrintRecord, CatalogSet, ImageUris
from mtgtracker.models.collection import CardFace, CollectionItem

logger = logging.getLogger(__name__)

T = TypeVar("T")

# =============================================================================
# COLORS
# =============================================================================

WUBRG_ORDER = {"W": 0, "U": 1, "B": 2, "R": 3, "G": 4}


def sort_colors(colors: Iterable[str]) -> list[str]:
    """
    Sort color codes in WUBRG order.

    Unrecognized codes sort after the five colors and keep their
    relative order.
    """
    return sorted(colors, key=lambda color: WUBRG_ORDER.get(color, len(WUBRG_ORDER)))


def _union(color_lists: Iterable[Sequence[str]]) -> list[str]:
    """Merge color lists, keeping first-seen order and dropping repeats."""
    merged: dict[str, None] = {}
    for colors in color_lists:
        merged.update(dict.fromkeys(colors))
    return list(merged)


ColorStrategy = Callable[[CatalogPrintRecord], Sequence[str]]

COLOR_STRATEGIES: tuple[ColorStrategy, ...] = (
    lambda record: record.color_identity,
    lambda record: _union(face.color_identity for face in record.card_faces),
    lambda record: record.colors,
    lambda record: _union(face.colors for face in record.card_faces),
)


def resolve_colors(record: CatalogPrintRecord) -> list[str]:
    """
    Resolve a print's colors for collection filtering.

    Args:
        record: Catalog print

    Returns:
        Color codes in WUBRG order from the first non-empty strategy.
        Empty list for colorless prints.
    """
    for strategy in COLOR_STRATEGIES:
        colors = strategy(record)
        if colors:
            return sort_colors(_union([colors]))
    return []


# =============================================================================
# COLLECTOR NUMBERS
# =============================================================================

# Leading integer, read the way a lenient integer parse reads "12a" as 12
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_DIGIT_RUNS = re.compile(r"(\d+)")


def _leading_int(value: str) -> int | None:
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _natural_key(value: str) -> list[str | int]:
    """Split into alternating text/number chunks so "9" < "10" and "2" < "2a"."""
    parts = _DIGIT_RUNS.split(value.casefold())
    return [int(part) if i % 2 else part for i, part in enumerate(parts)]


def _natural_compare(a: str, b: str) -> int:
    key_a, key_b = _natural_key(a), _natural_key(b)
    if key_a != key_b:
        return -1 if key_a < key_b else 1
    return (a > b) - (a < b)


def compare_collector_numbers(a: str, b: str) -> int:
    """
    Compare two collector numbers.

    Numbers are compared by their leading integer; equal integers fall back
    to a natural string comparison. A number with a leading integer sorts
    before one without ("★", "S1" style numbers). Two numbers without one
    are compared naturally.

    Examples:
        "2" < "2a" < "9" < "10" < "10a"

    Returns:
        Negative, zero or positive, like a classic cmp function.
    """
    num_a, num_b = _leading_int(a), _leading_int(b)

    if num_a is not None and num_b is not None:
        if num_a != num_b:
            return -1 if num_a < num_b else 1
        return _natural_compare(a, b)
    if num_a is not None:
        return -1
    if num_b is not None:
        return 1
    return _natural_compare(a, b)


collector_number_key = functools.cmp_to_key(compare_collector_numbers)


def sort_by_collector_number(items: Iterable[T], number: Callable[[T], str]) -> list[T]:
    """Stable sort of items by the collector number returned by ``number``."""
    return sorted(items, key=lambda item: collector_number_key(number(item)))


# =============================================================================
# IMAGES
# =============================================================================

ImageStrategy = Callable[[CatalogPrintRecord], ImageUris | None]

IMAGE_STRATEGIES: tuple[ImageStrategy, ...] = (
    lambda record: record.image_uris,
    lambda record: record.card_faces[0].image_uris if record.card_faces else None,
)


def resolve_image(record: CatalogPrintRecord, size: str = "normal") -> str:
    """
    Pick the display image for a print.

    Args:
        record: Catalog print
        size: "normal" or "small"

    Returns:
        Image URL, or the placeholder for that size if no strategy yields one.
    """
    for strategy in IMAGE_STRATEGIES:
        uris = strategy(record)
        url = getattr(uris, size, None) if uris else None
        if url:
            return str(url)
    return PLACEHOLDER_IMAGE_SMALL if size == "small" else PLACEHOLDER_IMAGE_NORMAL


def resolve_faces(record: CatalogPrintRecord) -> list[CardFace]:
    """Faces with a normal-size image, in print order. Faces without one are dropped."""
    return [
        CardFace(
            name=face.name,
            image_url=face.image_uris.normal,
            small_image_url=face.image_uris.small,
        )
        for face in record.card_faces
        if face.image_uris is not None and face.image_uris.normal
    ]


# =============================================================================
# PRICES
# =============================================================================


def parse_price(value: Any) -> Decimal | None:
    """
    Parse a catalog price string.

    Returns None for missing, empty, unparseable or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        logger.debug("Ignoring unparseable price %r", value)
        return None
    return price if price.is_finite() else None


def select_price(record: CatalogPrintRecord, foil: bool, currency: str) -> Decimal | None:
    """Price of the print in the given finish and currency, None if not listed."""
    key = f"{currency}_foil" if foil else currency
    return parse_price(record.prices.get(key))


# =============================================================================
# LOCAL IDS
# =============================================================================


class IdSequence:
    """
    Monotonic source of local item ids.

    A store owns one sequence and advances it past every id it loads,
    so ids never repeat within the store's lifetime.
    """

    def __init__(self, start: int = 1) -> None:
        self._next = start

    def next_id(self) -> int:
        value = self._next
        self._next += 1
        return value

    def advance_past(self, ids: Iterable[int]) -> None:
        """Make sure future ids are greater than every id in ``ids``."""
        self._next = max(self._next, max(ids, default=0) + 1)

    @property
    def peek(self) -> int:
        """The id the next call to next_id() will return."""
        return self._next


# =============================================================================
# NORMALIZATION
# =============================================================================


def _oracle_text(record: CatalogPrintRecord) -> str:
    """Rules text; multi-faced prints keep theirs on the faces."""
    if record.oracle_text:
        return record.oracle_text
    return "\n//\n".join(face.oracle_text for face in record.card_faces if face.oracle_text)


def normalize_print(
    record: CatalogPrintRecord,
    *,
    foil: bool,
    ids: IdSequence,
    currency: str | None = None,
    catalog_set: CatalogSet | None = None,
) -> CollectionItem:
    """
    Build a collection item from a catalog print.

    Args:
        record: Catalog print to convert
        foil: Finish being added; selects the foil or non-foil price
        ids: Sequence the new item's local id is drawn from
        currency: Reference currency key. Defaults to settings.price_currency
        catalog_set: Set the print was browsed from; its code, name and
                     release date take precedence over the record's own

    Returns:
        A new CollectionItem with quantity 1.
    """
    currency = currency or settings.price_currency

    if catalog_set is not None:
        set_code, set_name, released_at = (
            catalog_set.code,
            catalog_set.name,
            catalog_set.released_at,
        )
    else:
        set_code, set_name, released_at = record.set_code, record.set_name, record.released_at

    return CollectionItem(
        local_id=ids.next_id(),
        print_id=record.id,
        name=record.name,
        set_code=set_code,
        set_name=set_name,
        set_released_at=released_at,
        type_line=record.type_line,
        oracle_text=_oracle_text(record),
        colors=resolve_colors(record),
        quantity=1,
        image_url=resolve_image(record, "normal"),
        small_image_url=resolve_image(record, "small"),
        faces=resolve_faces(record),
        rarity=record.rarity,
        collector_number=record.collector_number,
        foil=foil,
        price=select_price(record, foil, currency),
    )
