"""Application tests for the SubmitProduct command handler."""

import pytest
from market.product.product import Product, ProductStatus
from market.product.submission import SubmitProduct
from protean import current_domain
from protean.exceptions import ValidationError
from shared.errors import AuthorizationError


def _submit(**overrides):
    defaults = {
        "requester_id": "seller-sub",
        "requester_rank": "SELLER",
        "market_id": 1,
        "title": "Oak stool",
        "description": "Three-legged oak stool.",
        "price": 85.0,
    }
    defaults.update(overrides)
    return current_domain.process(SubmitProduct(**defaults), asynchronous=False)


class TestSubmitProductCommand:
    def test_submission_persists_pending_product(self):
        product_id = _submit()
        product = current_domain.repository_for(Product).get(product_id)
        assert product.status == ProductStatus.PENDING.value
        assert str(product.seller_id) == "seller-sub"
        assert product.market_id == 1

    @pytest.mark.parametrize("rank", ["SELLER", "MODERATOR", "ADMINISTRATOR"])
    def test_listing_ranks_may_submit(self, rank):
        product_id = _submit(requester_rank=rank)
        assert current_domain.repository_for(Product).get(product_id) is not None

    def test_plain_user_cannot_submit(self):
        with pytest.raises(AuthorizationError):
            _submit(requester_rank="AUTHENTICATED")

    def test_missing_title_rejected(self):
        with pytest.raises(ValidationError):
            _submit(title=None)

    def test_photos_and_currency_persist(self):
        product_id = _submit(currency="EUR", photos=["front.jpg"])
        product = current_domain.repository_for(Product).get(product_id)
        assert product.currency == "EUR"
        assert product.photos == ["front.jpg"]
