"""
Catalog wire models.

Typed views of the JSON returned by the Scryfall API. These are externally
owned and immutable; unknown fields are ignored and missing optional fields
fall back to empty values so a sparse record never fails validation.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class CatalogModel(BaseModel):
    """
    Base for catalog payloads.

    Scryfall sends explicit nulls for fields it has no value for (prices,
    oracle_text on multi-faced prints, ...). An explicit null on a field
    with a default is read as that default, so one sparse record never fails
    the page it arrived on. Required fields still reject null.
    """

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is not None or info.field_name is None:
            return value
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return value
        return field.get_default(call_default_factory=True)


class ImageUris(CatalogModel):
    """Image references at the sizes we display."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    normal: str | None = None
    small: str | None = None


class CatalogFace(CatalogModel):
    """One face of a multi-faced print (transform, modal DFC, ...)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    oracle_text: str = ""
    colors: tuple[str, ...] = ()
    color_identity: tuple[str, ...] = ()
    image_uris: ImageUris | None = None


class CatalogPrintRecord(CatalogModel):
    """
    A single print as returned by the catalog.

    Attributes:
        id: Stable Scryfall print id
        set_code: Set code (``set`` on the wire)
        released_at: Release date of the print's set
        collector_number: Printed collector number, may be non-numeric ("12a")
        prices: Currency key -> price string, e.g. {"eur": "1.50", "eur_foil": None}
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    name: str
    set_code: str = Field(default="", alias="set")
    set_name: str = ""
    released_at: date | None = None
    type_line: str = ""
    oracle_text: str = ""
    rarity: str | None = None
    collector_number: str = ""
    colors: tuple[str, ...] = ()
    color_identity: tuple[str, ...] = ()
    card_faces: tuple[CatalogFace, ...] = ()
    image_uris: ImageUris | None = None
    prices: dict[str, Any] = Field(default_factory=dict)


class CatalogSet(CatalogModel):
    """A set (expansion, core set, promo group, ...) from ``GET /sets``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = ""
    code: str
    name: str
    set_type: str = ""
    digital: bool = False
    released_at: date | None = None
    icon_svg_uri: str | None = None


class CatalogPage(CatalogModel):
    """One page of a ``/cards/search`` result."""

    model_config = ConfigDict(extra="ignore")

    data: list[CatalogPrintRecord] = Field(default_factory=list)
    has_more: bool = False
    total_cards: int | None = None
    next_page: str | None = None


class CatalogSetList(CatalogModel):
    """Body of ``GET /sets``."""

    model_config = ConfigDict(extra="ignore")

    data: list[CatalogSet] = Field(default_factory=list)
