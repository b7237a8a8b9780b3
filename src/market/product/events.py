"""Domain events for the Product aggregate.

Events are immutable facts about listings and the engagement attached to
them. They are versioned so downstream consumers can evolve safely.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from market.domain import market


@market.event(part_of="Product")
class ProductSubmitted:
    """A seller submitted a listing for moderation."""

    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    market_id = Integer(required=True)
    title = String(required=True)
    price = Float(required=True)
    submitted_at = DateTime(required=True)


@market.event(part_of="Product")
class ProductApproved:
    """A moderator made the listing publicly visible."""

    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    approved_at = DateTime(required=True)


@market.event(part_of="Product")
class ProductDeleted:
    """A listing was deleted together with its engagement records."""

    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    deleted_by = Identifier(required=True)
    comment_count = Integer(default=0)
    reaction_count = Integer(default=0)
    buyer_count = Integer(default=0)
    deleted_at = DateTime(required=True)


@market.event(part_of="Product")
class CommentAdded:
    __version__ = 1

    product_id = Identifier(required=True)
    comment_id = Identifier(required=True)
    author_id = Identifier(required=True)
    added_at = DateTime(required=True)


@market.event(part_of="Product")
class CommentRemoved:
    __version__ = 1

    product_id = Identifier(required=True)
    comment_id = Identifier(required=True)
    author_id = Identifier(required=True)
    removed_by = Identifier(required=True)
    removed_at = DateTime(required=True)


@market.event(part_of="Product")
class ProductReactionAdded:
    """A user reacted to a listing. Carries the updated tallies."""

    __version__ = 1

    product_id = Identifier(required=True)
    author_id = Identifier(required=True)
    polarity = String(required=True)  # "upvote" or "downvote"
    upvotes = Integer(required=True)
    downvotes = Integer(required=True)
    reacted_at = DateTime(required=True)


@market.event(part_of="Product")
class ProductReactionRemoved:
    __version__ = 1

    product_id = Identifier(required=True)
    author_id = Identifier(required=True)
    removed_by = Identifier(required=True)
    upvotes = Integer(required=True)
    downvotes = Integer(required=True)
    removed_at = DateTime(required=True)


@market.event(part_of="Product")
class PurchaseRecorded:
    """The purchase flow confirmed that a user bought the listing."""

    __version__ = 1

    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    purchased_at = DateTime(required=True)


@market.event(part_of="Product")
class BuyerRemoved:
    __version__ = 1

    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    removed_at = DateTime(required=True)
