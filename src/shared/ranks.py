"""Authorization ranks resolved by the platform's identity layer.

Ranks arrive already resolved with every action. They form a closed set;
moderators and administrators are "elevated".
"""

from enum import Enum

from protean.exceptions import ValidationError

from shared.errors import AuthorizationError


class Rank(Enum):
    AUTHENTICATED = "AUTHENTICATED"
    SELLER = "SELLER"
    MODERATOR = "MODERATOR"
    ADMINISTRATOR = "ADMINISTRATOR"


ELEVATED_RANKS = frozenset({Rank.MODERATOR, Rank.ADMINISTRATOR})
LISTING_RANKS = frozenset({Rank.SELLER, Rank.MODERATOR, Rank.ADMINISTRATOR})


def parse_rank(value) -> Rank:
    """Coerce a rank name (or None, the authenticated default) into a Rank."""
    if value is None or value == "":
        return Rank.AUTHENTICATED
    if isinstance(value, Rank):
        return value
    try:
        return Rank(str(value).upper())
    except ValueError:
        raise ValidationError({"rank": [f"Unknown rank '{value}'"]}) from None


def is_elevated(rank) -> bool:
    return parse_rank(rank) in ELEVATED_RANKS


def require_rank(rank, allowed, action: str) -> Rank:
    """Raise AuthorizationError unless ``rank`` is one of ``allowed``."""
    resolved = parse_rank(rank)
    if resolved not in allowed:
        raise AuthorizationError({"rank": [f"Rank {resolved.value} is not allowed to {action}"]})
    return resolved
