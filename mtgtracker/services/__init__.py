"""
MTG Tracker services.

Catalog access, normalization and collection management.
"""

from mtgtracker.services.catalog_client import (
    SEARCH_QUERY_PARAMS,
    SET_QUERY_PARAMS,
    CatalogClient,
)
from mtgtracker.services.collection_query import (
    matches_filter,
    query_collection,
    total_value,
)
from mtgtracker.services.collection_store import CollectionStore
from mtgtracker.services.normalizer import (
    IdSequence,
    collector_number_key,
    compare_collector_numbers,
    normalize_print,
    parse_price,
    resolve_colors,
    resolve_faces,
    resolve_image,
    select_price,
    sort_by_collector_number,
    sort_colors,
)
from mtgtracker.services.pagination import (
    FetchTicket,
    SelectionTracker,
    fetch_set_prints,
    load_selection,
    search_prints,
)
from mtgtracker.services.persistence import (
    CollectionPersistence,
    InMemoryPersistence,
    JsonCollectionFile,
)
from mtgtracker.services.rate_limiter import RateLimiter, default_rate_limiter
from mtgtracker.services.set_catalog import (
    REGULAR_SET_TYPES,
    SetListing,
    filter_sets,
    partition_sets,
    sort_sets_newest_first,
)

__all__ = [
    # Catalog access
    "CatalogClient",
    "RateLimiter",
    "SEARCH_QUERY_PARAMS",
    "SET_QUERY_PARAMS",
    "default_rate_limiter",
    # Pagination
    "FetchTicket",
    "SelectionTracker",
    "fetch_set_prints",
    "load_selection",
    "search_prints",
    # Normalization
    "IdSequence",
    "collector_number_key",
    "compare_collector_numbers",
    "normalize_print",
    "parse_price",
    "resolve_colors",
    "resolve_faces",
    "resolve_image",
    "select_price",
    "sort_by_collector_number",
    "sort_colors",
    # Collection
    "CollectionPersistence",
    "CollectionStore",
    "InMemoryPersistence",
    "JsonCollectionFile",
    "matches_filter",
    "query_collection",
    "total_value",
    # Sets
    "REGULAR_SET_TYPES",
    "SetListing",
    "filter_sets",
    "partition_sets",
    "sort_sets_newest_first",
]
