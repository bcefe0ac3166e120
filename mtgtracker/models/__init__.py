from mtgtracker.models.catalog import (
    CatalogFace,
    CatalogPage,
    CatalogPrintRecord,
    CatalogSet,
    CatalogSetList,
    ImageUris,
)
from mtgtracker.models.collection import CardFace, CollectionItem
from mtgtracker.models.errors import (
    CatalogError,
    CatalogFailure,
    CatalogUnavailable,
    PersistenceReadError,
    PersistenceWriteError,
    RateLimitInternal,
    TrackerError,
)
from mtgtracker.models.query import (
    CollectionView,
    FilterSpec,
    GroupMode,
    SetGroup,
    SortMode,
)

__all__ = [
    # Catalog wire models
    "CatalogFace",
    "CatalogPage",
    "CatalogPrintRecord",
    "CatalogSet",
    "CatalogSetList",
    "ImageUris",
    # Collection
    "CardFace",
    "CollectionItem",
    # Errors
    "CatalogError",
    "CatalogFailure",
    "CatalogUnavailable",
    "PersistenceReadError",
    "PersistenceWriteError",
    "RateLimitInternal",
    "TrackerError",
    # Queries
    "CollectionView",
    "FilterSpec",
    "GroupMode",
    "SetGroup",
    "SortMode",
]
