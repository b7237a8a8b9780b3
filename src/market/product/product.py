"""Product aggregate — a seller's listing with its engagement ledger.

The Product aggregate owns everything users attach to a listing: comments,
reactions and purchase (buyer) records. Keeping them inside one aggregate
makes every engagement change a single version-checked write, which is how
the one-reaction-per-user and one-buyer-record-per-user rules survive
concurrent requests.

State Machine (2 states):
    PENDING → APPROVED
    APPROVED → (terminal)

Rejection is not modelled; a rejected listing simply stays pending.

Visibility: a listing that is not approved is visible only to its seller
and to moderators/administrators. Everybody else is told it does not exist.

Cascade contract: deleting a Product deletes its comments, reactions and
buyer records with it.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    List,
    String,
    Text,
)

from market.domain import market
from market.product.events import (
    BuyerRemoved,
    CommentAdded,
    CommentRemoved,
    ProductApproved,
    ProductDeleted,
    ProductReactionAdded,
    ProductReactionRemoved,
    ProductSubmitted,
    PurchaseRecorded,
)
from shared.errors import AuthorizationError, ConflictError
from shared.polarity import Polarity, tally
from shared.ranks import is_elevated

COMMENT_MAX_LENGTH = 2000


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ProductStatus(Enum):
    PENDING = "Pending"
    APPROVED = "Approved"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    ProductStatus.PENDING: {ProductStatus.APPROVED},
    ProductStatus.APPROVED: set(),  # Terminal state
}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@market.entity(part_of="Product")
class Comment:
    """A comment left on a listing. Users may comment any number of times."""

    author_id = Identifier(required=True)
    body = Text(required=True)
    created_at = DateTime(required=True)


@market.entity(part_of="Product")
class Reaction:
    """An up/down reaction. At most one per author on a listing."""

    author_id = Identifier(required=True)
    polarity = Integer(required=True, min_value=0, max_value=1)
    reacted_at = DateTime(required=True)


@market.entity(part_of="Product")
class Buyer:
    """A confirmed purchase of the listing by a user."""

    user_id = Identifier(required=True)
    purchased_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@market.aggregate
class Product:
    """A listing offered by a seller in one of the platform's markets."""

    seller_id = Identifier(required=True)
    market_id = Integer(required=True, min_value=0)

    # Content
    title = String(required=True, max_length=200)
    description = Text(required=True)
    price = Float(required=True, min_value=0.01)
    currency = String(max_length=3, default="USD")
    photos = List(content_type=String)

    # Moderation
    status = String(choices=ProductStatus, default=ProductStatus.PENDING.value)
    approved_by = Identifier()
    approved_at = DateTime()

    # Engagement
    comments = HasMany(Comment)
    reactions = HasMany(Reaction)
    buyers = HasMany(Buyer)
    upvotes = Integer(default=0)
    downvotes = Integer(default=0)

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def one_reaction_per_author(self):
        authors = [str(r.author_id) for r in self.reactions]
        if len(authors) != len(set(authors)):
            raise ValidationError({"reactions": ["A user can react to a product only once"]})

    @invariant.post
    def one_buyer_record_per_user(self):
        users = [str(b.user_id) for b in self.buyers]
        if len(users) != len(set(users)):
            raise ValidationError({"buyers": ["A purchase can be recorded only once per user"]})

    @invariant.post
    def reaction_counters_match_reactions(self):
        upvotes, downvotes = tally(r.polarity for r in self.reactions)
        if (self.upvotes or 0, self.downvotes or 0) != (upvotes, downvotes):
            raise ValidationError({"reactions": ["Reaction counters are out of sync"]})

    @invariant.post
    def title_must_not_be_blank(self):
        if self.title is not None and len(self.title.strip()) == 0:
            raise ValidationError({"title": ["Product title cannot be empty"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        seller_id,
        market_id,
        title,
        description,
        price,
        currency=None,
        photos=None,
    ):
        """Create a new listing awaiting moderation."""
        now = datetime.now(UTC)

        product = cls(
            seller_id=seller_id,
            market_id=market_id,
            title=title,
            description=description,
            price=price,
            currency=currency or "USD",
            photos=list(photos) if photos else [],
            status=ProductStatus.PENDING.value,
            upvotes=0,
            downvotes=0,
            created_at=now,
            updated_at=now,
        )

        product.raise_(
            ProductSubmitted(
                product_id=str(product.id),
                seller_id=str(seller_id),
                market_id=product.market_id,
                title=product.title,
                price=product.price,
                submitted_at=now,
            )
        )

        return product

    # -------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------
    @property
    def is_approved(self) -> bool:
        return ProductStatus(self.status) == ProductStatus.APPROVED

    def is_visible_to(self, user_id, rank) -> bool:
        if self.is_approved or is_elevated(rank):
            return True
        return user_id is not None and str(user_id) == str(self.seller_id)

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = ProductStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def approve(self, moderator_id) -> bool:
        """Publish the listing. Approving an approved listing changes nothing.

        Returns True when the status actually changed.
        """
        if self.is_approved:
            return False

        self._assert_can_transition(ProductStatus.APPROVED)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = ProductStatus.APPROVED.value
            self.approved_by = moderator_id
            self.approved_at = now
            self.updated_at = now

        self.raise_(
            ProductApproved(
                product_id=str(self.id),
                seller_id=str(self.seller_id),
                moderator_id=str(moderator_id),
                approved_at=now,
            )
        )
        return True

    def mark_deleted(self, deleted_by):
        """Drop every comment, reaction and buyer record ahead of deletion."""
        now = datetime.now(UTC)
        counts = (len(self.comments), len(self.reactions), len(self.buyers))

        with atomic_change(self):
            for comment in list(self.comments):
                self.remove_comments(comment)
            for reaction in list(self.reactions):
                self.remove_reactions(reaction)
            for buyer in list(self.buyers):
                self.remove_buyers(buyer)
            self.upvotes = 0
            self.downvotes = 0
            self.updated_at = now

        self.raise_(
            ProductDeleted(
                product_id=str(self.id),
                seller_id=str(self.seller_id),
                deleted_by=str(deleted_by),
                comment_count=counts[0],
                reaction_count=counts[1],
                buyer_count=counts[2],
                deleted_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------
    def has_comment_by(self, user_id) -> bool:
        return any(str(c.author_id) == str(user_id) for c in self.comments)

    def add_comment(self, author_id, body):
        """Append a comment. Duplicates are allowed."""
        if body is None or len(body.strip()) == 0:
            raise ValidationError({"body": ["Comment body cannot be empty"]})
        if len(body) > COMMENT_MAX_LENGTH:
            raise ValidationError({"body": [f"Comment body cannot exceed {COMMENT_MAX_LENGTH} characters"]})

        now = datetime.now(UTC)
        comment = Comment(author_id=author_id, body=body, created_at=now)

        with atomic_change(self):
            self.add_comments(comment)
            self.updated_at = now

        self.raise_(
            CommentAdded(
                product_id=str(self.id),
                comment_id=str(comment.id),
                author_id=str(author_id),
                added_at=now,
            )
        )
        return comment

    def remove_comment(self, comment_id, requester_id, requester_rank) -> bool:
        """Remove a comment as its author or as a moderator/administrator.

        Removing a comment that is not there is a successful no-op.
        Returns True when a comment was removed.
        """
        comment = next((c for c in self.comments if str(c.id) == str(comment_id)), None)
        if comment is None:
            return False

        if str(comment.author_id) != str(requester_id) and not is_elevated(requester_rank):
            raise AuthorizationError({"comment": ["Only the author or a moderator can remove this comment"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.remove_comments(comment)
            self.updated_at = now

        self.raise_(
            CommentRemoved(
                product_id=str(self.id),
                comment_id=str(comment_id),
                author_id=str(comment.author_id),
                removed_by=str(requester_id),
                removed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Reactions
    # -------------------------------------------------------------------
    def reaction_by(self, user_id):
        return next((r for r in self.reactions if str(r.author_id) == str(user_id)), None)

    def _recount(self):
        self.upvotes, self.downvotes = tally(r.polarity for r in self.reactions)

    def add_reaction(self, author_id, polarity):
        """Record the author's reaction. A second reaction is a conflict."""
        polarity = Polarity.parse(polarity)

        if self.reaction_by(author_id) is not None:
            raise ConflictError({"reaction": ["The user has already reacted to this product"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.add_reactions(Reaction(author_id=author_id, polarity=polarity.value, reacted_at=now))
            self._recount()
            self.updated_at = now

        self.raise_(
            ProductReactionAdded(
                product_id=str(self.id),
                author_id=str(author_id),
                polarity=polarity.label,
                upvotes=self.upvotes,
                downvotes=self.downvotes,
                reacted_at=now,
            )
        )

    def remove_reaction(self, author_id, requester_id, requester_rank) -> bool:
        """Withdraw the author's reaction, as the author or an elevated rank."""
        if str(author_id) != str(requester_id) and not is_elevated(requester_rank):
            raise AuthorizationError({"reaction": ["Only the author or a moderator can remove this reaction"]})

        reaction = self.reaction_by(author_id)
        if reaction is None:
            return False

        now = datetime.now(UTC)
        with atomic_change(self):
            self.remove_reactions(reaction)
            self._recount()
            self.updated_at = now

        self.raise_(
            ProductReactionRemoved(
                product_id=str(self.id),
                author_id=str(author_id),
                removed_by=str(requester_id),
                upvotes=self.upvotes,
                downvotes=self.downvotes,
                removed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Purchases
    # -------------------------------------------------------------------
    def has_buyer(self, user_id) -> bool:
        return any(str(b.user_id) == str(user_id) for b in self.buyers)

    def record_purchase(self, user_id):
        if self.has_buyer(user_id):
            raise ConflictError({"buyer": ["The user has already bought this product"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.add_buyers(Buyer(user_id=user_id, purchased_at=now))
            self.updated_at = now

        self.raise_(
            PurchaseRecorded(
                product_id=str(self.id),
                user_id=str(user_id),
                purchased_at=now,
            )
        )

    def remove_buyer(self, user_id) -> bool:
        """Drop a purchase record. Absent records are a successful no-op."""
        buyer = next((b for b in self.buyers if str(b.user_id) == str(user_id)), None)
        if buyer is None:
            return False

        now = datetime.now(UTC)
        with atomic_change(self):
            self.remove_buyers(buyer)
            self.updated_at = now

        self.raise_(
            BuyerRemoved(
                product_id=str(self.id),
                user_id=str(user_id),
                removed_at=now,
            )
        )
        return True
