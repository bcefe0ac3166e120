"""
Pagination driver for catalog queries.

Turns the paged /cards/search API into complete print lists:
- fetch_set_prints: every page of a set, one request at a time
- search_prints: one bounded page of a free-text search

INVARIANT: A set fetch either returns every page or raises. Records gathered
from earlier pages are never returned on their own as a truncated result.

Also provides the stale-fetch guard: when the user picks a new set while an
older fetch is still running, the older fetch's results must not land on
the new selection.
"""

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from mtgtracker.models.catalog import CatalogPrintRecord
from mtgtracker.models.errors import CatalogFailure
from mtgtracker.services.catalog_client import CatalogClient
from mtgtracker.services.normalizer import sort_by_collector_number

logger = logging.getLogger(__name__)

PageCallback = Callable[[list[CatalogPrintRecord]], None]


async def fetch_set_prints(
    client: CatalogClient,
    set_code: str,
    *,
    on_page: PageCallback | None = None,
) -> list[CatalogPrintRecord]:
    """
    Fetch every print of a set.

    Pages are requested sequentially until the catalog reports no further
    pages. Each page is sorted by collector number before it is appended;
    the result is the concatenation of those sorted pages. Prints already
    seen on an earlier page are skipped.

    Args:
        client: Catalog client (rate limited)
        set_code: Set code, any case
        on_page: Called with the accumulated prints after each page

    Returns:
        Every print of the set

    Raises:
        CatalogUnavailable: If any page request cannot reach the catalog
        CatalogError: If any page request is rejected
    """
    prints: list[CatalogPrintRecord] = []
    seen_ids: set[str] = set()

    for page_number in itertools.count(1):
        page = await client.get_set_page(set_code, page_number)

        fresh: list[CatalogPrintRecord] = []
        for record in page.data:
            if record.id in seen_ids:
                continue
            seen_ids.add(record.id)
            fresh.append(record)
        if len(fresh) != len(page.data):
            logger.debug(
                "Skipped %d repeated prints on page %d of %s",
                len(page.data) - len(fresh),
                page_number,
                set_code,
            )
        prints.extend(sort_by_collector_number(fresh, lambda record: record.collector_number))

        if on_page is not None:
            on_page(list(prints))

        if not page.has_more:
            break

    logger.info("Fetched %d prints for set %s (%d pages)", len(prints), set_code, page_number)
    return prints


async def search_prints(
    client: CatalogClient,
    text: str,
    *,
    page_size: int | None = None,
    paper_only: bool = True,
) -> list[CatalogPrintRecord]:
    """
    Free-text search, single page.

    Args:
        client: Catalog client (rate limited)
        text: Search text; Scryfall syntax is passed through
        page_size: Maximum results. Defaults to settings.search_page_size
        paper_only: Restrict to prints available in paper

    Returns:
        Matching prints in the order received. Empty for a blank query,
        without contacting the catalog.
    """
    text = text.strip()
    if not text:
        return []

    query = f"{text} game:paper" if paper_only else text
    page = await client.search(query, 1, page_size)
    return list(page.data)


# =============================================================================
# STALE FETCH GUARD
# =============================================================================


@dataclass(frozen=True, slots=True)
class FetchTicket:
    """Tag identifying which selection a fetch was started for."""

    selection: str
    generation: int


class SelectionTracker:
    """
    Tracks the current selection so superseded fetches can be discarded.

    Usage:
        ticket = tracker.begin("dmu")
        records = await fetch_set_prints(client, "dmu")
        if tracker.is_current(ticket):
            show(records)
    """

    def __init__(self) -> None:
        self._generation = 0
        self._current: FetchTicket | None = None

    @property
    def current(self) -> FetchTicket | None:
        return self._current

    def begin(self, selection: str) -> FetchTicket:
        """Start a fetch for a new selection, superseding any earlier one."""
        self._generation += 1
        self._current = FetchTicket(selection=selection, generation=self._generation)
        return self._current

    def is_current(self, ticket: FetchTicket) -> bool:
        return self._current == ticket

    def clear(self) -> None:
        """Drop the selection; every outstanding fetch becomes stale."""
        self._generation += 1
        self._current = None


async def load_selection(
    tracker: SelectionTracker,
    client: CatalogClient,
    set_code: str,
    apply: Callable[[list[CatalogPrintRecord]], None],
) -> bool:
    """
    Fetch a set for the current selection and apply the result if still wanted.

    Progressive pages are applied as they arrive, as long as the selection
    has not changed.

    Args:
        tracker: Selection tracker shared by every fetch for the same view
        client: Catalog client
        set_code: Set being selected
        apply: Receives the accumulated prints (replace, not append)

    Returns:
        True if the final result was applied, False if the fetch went stale.

    Raises:
        CatalogUnavailable, CatalogError: Only while the fetch is still current.
    """
    ticket = tracker.begin(set_code)

    def apply_if_current(records: list[CatalogPrintRecord]) -> None:
        if tracker.is_current(ticket):
            apply(records)

    try:
        records = await fetch_set_prints(client, set_code, on_page=apply_if_current)
    except CatalogFailure:
        if not tracker.is_current(ticket):
            logger.debug("Ignoring failure of superseded fetch for %s", set_code)
            return False
        raise

    if not tracker.is_current(ticket):
        logger.debug("Discarding %d prints from superseded fetch for %s", len(records), set_code)
        return False

    # The last page callback already handed over the complete list
    return True
