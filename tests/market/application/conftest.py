import pytest
from market.product.moderation import ApproveProduct
from market.product.submission import SubmitProduct
from protean import current_domain


def _submit_product(**overrides):
    defaults = {
        "requester_id": "seller-app",
        "requester_rank": "SELLER",
        "market_id": 7,
        "title": "Ceramic bowl",
        "description": "Speckled ceramic serving bowl.",
        "price": 42.0,
    }
    defaults.update(overrides)
    return current_domain.process(SubmitProduct(**defaults), asynchronous=False)


@pytest.fixture()
def pending_product_id():
    return _submit_product()


@pytest.fixture()
def approved_product_id():
    product_id = _submit_product()
    current_domain.process(
        ApproveProduct(product_id=product_id, moderator_id="mod-app", requester_rank="MODERATOR"),
        asynchronous=False,
    )
    return product_id
