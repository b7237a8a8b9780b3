"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ListingState:
    """Tracks state for a single simulated listing lifecycle."""

    product_id: str | None = None
    seller_id: str | None = None
    market_id: int | None = None
    current_status: str = "Pending"
    comment_ids: list[str] = field(default_factory=list)
    buyer_ids: list[str] = field(default_factory=list)
