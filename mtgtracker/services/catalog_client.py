"""
Scryfall catalog client.

Issues single requests against the Scryfall API and returns typed records.
Every request first waits on the shared rate limiter.

Failures are surfaced, never retried:
- network/transport failure -> CatalogUnavailable
- non-success HTTP status -> CatalogError(status, message)
- success status with an unusable body -> CatalogError

API docs: https://scryfall.com/docs/api
"""

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import TypeVar

import httpx
from pydantic import BaseModel

from mtgtracker.config import settings
from mtgtracker.models.catalog import CatalogPage, CatalogSet, CatalogSetList
from mtgtracker.models.errors import CatalogError, CatalogUnavailable
from mtgtracker.services.rate_limiter import RateLimiter, default_rate_limiter

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Every print of a set, oldest-first by collector number, variants included
SET_QUERY_PARAMS = {
    "unique": "prints",
    "order": "set",
    "dir": "asc",
    "include_extras": "true",
    "include_variations": "true",
}

SEARCH_QUERY_PARAMS = {
    "unique": "prints",
    "order": "name",
    "dir": "asc",
}


class CatalogClient:
    """
    Async client for the Scryfall API.

    Usage:
        async with CatalogClient() as client:
            sets = await client.list_sets()
            page = await client.get_set_page("dmu", page=1)
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        rate_limiter: RateLimiter | None = None,
        http_client: httpx.AsyncClient | None = None,
        excluded_set_codes: frozenset[str] | None = None,
        set_page_size: int | None = None,
    ) -> None:
        """
        Args:
            base_url: API root. Defaults to settings.scryfall_api_url
            rate_limiter: Limiter to wait on. Defaults to the process-wide limiter
            http_client: Optional httpx client for connection reuse; not closed by us
            excluded_set_codes: Set codes list_sets() never returns
            set_page_size: Page size requested for set queries
        """
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self.rate_limiter = rate_limiter or default_rate_limiter
        if excluded_set_codes is None:
            excluded_set_codes = settings.excluded_set_codes
        self.excluded_set_codes = frozenset(code.lower() for code in excluded_set_codes)
        self.set_page_size = set_page_size or settings.set_page_size
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.request_timeout)
        self._headers = {
            "Accept": "application/json;q=0.9,*/*;q=0.8",
            "User-Agent": settings.user_agent,
        }

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def list_sets(self) -> list[CatalogSet]:
        """
        Fetch the set list, minus sets we never show.

        Drops sets without a release date, digital-only sets, and the
        configured denylist of noise set codes (case-insensitive).

        Returns:
            Sets in the order the catalog returned them

        Raises:
            CatalogUnavailable: If the catalog cannot be reached
            CatalogError: If the catalog rejects the request
        """
        set_list = await self._get("/sets", CatalogSetList)

        kept = [
            s
            for s in set_list.data
            if s.released_at is not None
            and not s.digital
            and s.code.lower() not in self.excluded_set_codes
        ]
        logger.debug("Catalog returned %d sets, kept %d", len(set_list.data), len(kept))
        return kept

    async def get_page(
        self,
        query: str,
        page: int = 1,
        *,
        params: Mapping[str, str] | None = None,
    ) -> CatalogPage:
        """
        Fetch one page of a card search.

        Args:
            query: Scryfall search syntax (e.g. "e:dmu", "lightning bolt")
            page: 1-based page number
            params: Extra query parameters (ordering, uniqueness, page size)

        Returns:
            The page, with has_more telling whether another page follows

        Raises:
            CatalogUnavailable: If the catalog cannot be reached
            CatalogError: If the catalog rejects the request
        """
        request_params = {"q": query, **(params or {}), "page": str(page)}
        return await self._get("/cards/search", CatalogPage, request_params)

    async def get_set_page(self, set_code: str, page: int = 1) -> CatalogPage:
        """Fetch one page of every print in a set, ordered by collector number."""
        return await self.get_page(
            f"e:{set_code.lower()}",
            page,
            params={**SET_QUERY_PARAMS, "pagesize": str(self.set_page_size)},
        )

    async def search(
        self,
        text: str,
        page: int = 1,
        page_size: int | None = None,
    ) -> CatalogPage:
        """Free-text search across all prints, ordered by name."""
        page_size = page_size or settings.search_page_size
        return await self.get_page(
            text,
            page,
            params={**SEARCH_QUERY_PARAMS, "pagesize": str(page_size)},
        )

    async def _get(
        self,
        path: str,
        model: type[ModelT],
        params: Mapping[str, str] | None = None,
    ) -> ModelT:
        """Wait for a rate-limit slot, GET path, and validate the body into model."""
        await self.rate_limiter.wait()

        url = f"{self.base_url}{path}"
        try:
            response = await self._client.get(url, params=params, headers=self._headers)
        except httpx.RequestError as e:
            logger.warning("Catalog request to %s failed: %s", url, e)
            raise CatalogUnavailable(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning("Catalog rejected %s: HTTP %d %s", url, response.status_code, message)
            raise CatalogError(response.status_code, message)

        try:
            return model.model_validate(response.json())
        except ValueError as e:
            # pydantic's ValidationError is a ValueError, as is a JSON decode error
            raise CatalogError(response.status_code, f"malformed catalog response: {e}") from e


def _error_message(response: httpx.Response) -> str:
    """
    Extract a readable message from an error response.

    Scryfall error bodies look like {"object": "error", "details": "..."};
    anything else falls back to the HTTP reason phrase.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("details"):
        return str(body["details"])
    return response.reason_phrase or f"HTTP {response.status_code}"
