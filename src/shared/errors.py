"""Error kinds raised by the marketplace core.

``ValidationError`` and ``ObjectNotFoundError`` come from Protean and are
re-exported here so callers can import every kind from one place. The
remaining kinds carry the same ``messages`` dict shape as Protean's
``ValidationError``: ``{"field": ["message", ...]}``.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError

NotFoundError = ObjectNotFoundError


class MarketplaceError(Exception):
    """Base class for the core's own error kinds."""

    def __init__(self, messages):
        self.messages = messages
        super().__init__(messages)


class ConflictError(MarketplaceError):
    """A uniqueness invariant would be violated."""


class AuthorizationError(MarketplaceError):
    """Caller rank or identity is insufficient for the mutation."""


class PersistenceError(MarketplaceError):
    """The store failed for an infrastructural reason."""


__all__ = [
    "AuthorizationError",
    "ConflictError",
    "MarketplaceError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
