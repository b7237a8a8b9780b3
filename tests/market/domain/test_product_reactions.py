"""Tests for reactions on a Product: one per author, counters kept in sync."""

import pytest
from market.product.events import ProductReactionAdded, ProductReactionRemoved
from market.product.product import Product
from protean.exceptions import ValidationError
from shared.errors import AuthorizationError, ConflictError
from shared.polarity import Polarity
from shared.ranks import Rank


def _make_product():
    product = Product.submit(
        seller_id="seller-001",
        market_id=2,
        title="Linen apron",
        description="Washed linen, adjustable strap.",
        price=32.0,
    )
    product.approve(moderator_id="mod-001")
    product._events.clear()
    return product


class TestAddReaction:
    def test_upvote_increments_upvotes(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="upvote")
        assert product.upvotes == 1
        assert product.downvotes == 0
        assert product.reactions[0].polarity == Polarity.UPVOTE.value

    def test_downvote_increments_downvotes(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="downvote")
        assert product.upvotes == 0
        assert product.downvotes == 1

    def test_numeric_polarity_accepted(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity=1)
        assert product.downvotes == 1

    def test_many_authors(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="upvote")
        product.add_reaction(author_id="user-002", polarity="upvote")
        product.add_reaction(author_id="user-003", polarity="downvote")
        assert (product.upvotes, product.downvotes) == (2, 1)
        assert len(product.reactions) == 3

    def test_second_reaction_by_same_author_conflicts(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="upvote")
        with pytest.raises(ConflictError):
            product.add_reaction(author_id="user-001", polarity="downvote")
        assert len(product.reactions) == 1
        assert (product.upvotes, product.downvotes) == (1, 0)

    @pytest.mark.parametrize("polarity", ["sideways", 2, -1, True, None])
    def test_invalid_polarity_rejected(self, polarity):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.add_reaction(author_id="user-001", polarity=polarity)
        assert len(product.reactions) == 0

    def test_reaction_raises_event_with_tallies(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="upvote")
        event = product._events[-1]
        assert isinstance(event, ProductReactionAdded)
        assert event.polarity == "upvote"
        assert (event.upvotes, event.downvotes) == (1, 0)


class TestRemoveReaction:
    def test_author_withdraws_reaction(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="upvote")
        assert product.remove_reaction("user-001", "user-001", Rank.AUTHENTICATED) is True
        assert len(product.reactions) == 0
        assert product.upvotes == 0
        assert isinstance(product._events[-1], ProductReactionRemoved)

    def test_author_may_react_again_after_withdrawing(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="upvote")
        product.remove_reaction("user-001", "user-001", None)
        product.add_reaction(author_id="user-001", polarity="downvote")
        assert (product.upvotes, product.downvotes) == (0, 1)

    def test_administrator_removes_any_reaction(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="downvote")
        assert product.remove_reaction("user-001", "admin-001", Rank.ADMINISTRATOR) is True
        assert product.downvotes == 0

    def test_other_user_cannot_remove(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="upvote")
        with pytest.raises(AuthorizationError):
            product.remove_reaction("user-001", "user-002", Rank.SELLER)
        assert product.upvotes == 1

    def test_removing_absent_reaction_is_noop(self):
        product = _make_product()
        assert product.remove_reaction("user-001", "user-001", None) is False
        assert product._events == []
