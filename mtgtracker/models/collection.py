from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from mtgtracker.config import SCRYFALL_CARD_URL


@dataclass(frozen=True)
class CardFace:
    """A displayable face of a collected print. Only faces with an image are kept."""

    name: str
    image_url: str
    small_image_url: str | None = None


@dataclass
class CollectionItem:
    """
    One owned print, in one finish.

    The pair (print_id, foil) is the item's identity key; the collection
    never holds two items with the same key. Quantity is always >= 1.

    Attributes:
        local_id: Store-assigned id, unique for the store's lifetime
        print_id: Scryfall print id the item was created from
        colors: Color identity codes in WUBRG order, empty for colorless
        faces: Faces with images, in print order (empty for single-faced prints)
        price: Unit price in the reference currency, None when unknown
    """

    local_id: int
    print_id: str
    name: str
    set_code: str
    set_name: str
    collector_number: str
    set_released_at: date | None = None
    type_line: str = ""
    oracle_text: str = ""
    colors: list[str] = field(default_factory=list)
    quantity: int = 1
    image_url: str = ""
    small_image_url: str = ""
    faces: list[CardFace] = field(default_factory=list)
    rarity: str | None = None
    foil: bool = False
    price: Decimal | None = None

    @property
    def identity_key(self) -> tuple[str, bool]:
        """(print id, foil flag) - unique across the collection."""
        return (self.print_id, self.foil)

    @property
    def scryfall_url(self) -> str:
        """Public Scryfall page for this print."""
        return f"{SCRYFALL_CARD_URL}/{self.set_code.lower()}/{self.collector_number}"
