"""Tests for Product invariants that guard the engagement ledger."""

from datetime import UTC, datetime

import pytest
from market.product.product import Buyer, Product, Reaction
from protean.exceptions import ValidationError


def _make_product():
    product = Product.submit(
        seller_id="seller-001",
        market_id=1,
        title="Wool throw",
        description="Merino wool.",
        price=120.0,
    )
    product._events.clear()
    return product


class TestLedgerInvariants:
    def test_two_reactions_by_one_author_rejected(self):
        product = _make_product()
        product.add_reaction(author_id="user-001", polarity="upvote")
        with pytest.raises(ValidationError):
            product.add_reactions(
                Reaction(author_id="user-001", polarity=0, reacted_at=datetime.now(UTC))
            )

    def test_two_buyer_records_for_one_user_rejected(self):
        product = _make_product()
        product.record_purchase(user_id="buyer-001")
        with pytest.raises(ValidationError):
            product.add_buyers(Buyer(user_id="buyer-001", purchased_at=datetime.now(UTC)))

    def test_counters_must_match_reactions(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.upvotes = 3
