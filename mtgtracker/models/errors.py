"""
Error taxonomy for the collection tracker.

Catalog failures propagate to the caller, who decides whether to re-trigger
a fetch. Persistence failures are raised internally by the storage backend
and converted to log records at its boundary; they never reach the user.
"""


class TrackerError(Exception):
    """Base class for all collection tracker errors."""


class RateLimitInternal(TrackerError):
    """Raised when the rate limiter reaches a state it should never reach."""


class CatalogFailure(TrackerError):
    """Base class for failures talking to the card catalog."""


class CatalogUnavailable(CatalogFailure):
    """Raised when the catalog could not be reached at all (network failure)."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Catalog unavailable ({url}): {reason}")


class CatalogError(CatalogFailure):
    """Raised when the catalog answered but rejected the request."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"Catalog error {status}: {message}")


class PersistenceReadError(TrackerError):
    """Raised when the stored collection cannot be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read collection from {path}: {reason}")


class PersistenceWriteError(TrackerError):
    """Raised when the collection cannot be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write collection to {path}: {reason}")
