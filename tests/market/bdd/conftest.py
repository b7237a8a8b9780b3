"""Shared BDD fixtures and step definitions for the Market domain."""

import pytest
from market.product.moderation import ApproveProduct
from market.product.product import Product
from market.product.queries import get_product
from market.product.submission import SubmitProduct
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from pytest_bdd import given, parsers, then, when
from shared.errors import AuthorizationError, ConflictError


@pytest.fixture()
def outcome():
    """Container for the error raised by the last action, if any."""
    return {"exc": None}


def _submit(seller_id):
    return current_domain.process(
        SubmitProduct(
            requester_id=seller_id,
            requester_rank="SELLER",
            market_id=1,
            title="Hand-thrown teapot",
            description="Porcelain teapot with bamboo handle.",
            price=55.0,
        ),
        asynchronous=False,
    )


def _approve(product_id, moderator_id, rank):
    current_domain.process(
        ApproveProduct(product_id=product_id, moderator_id=moderator_id, requester_rank=rank),
        asynchronous=False,
    )


@pytest.fixture()
def attempt(outcome):
    """Run an action, capturing any domain error into ``outcome``."""

    def run(action, *args, **kwargs):
        outcome["exc"] = None
        try:
            action(*args, **kwargs)
        except (ValidationError, ConflictError, AuthorizationError, ObjectNotFoundError) as exc:
            outcome["exc"] = exc

    return run


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('seller "{seller_id}" submits a listing'), target_fixture="product_id")
def seller_submits_listing(seller_id):
    return _submit(seller_id)


@given(parsers.cfparse('an approved listing by seller "{seller_id}"'), target_fixture="product_id")
def approved_listing(seller_id):
    product_id = _submit(seller_id)
    _approve(product_id, "mod-bdd", "MODERATOR")
    return product_id


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('moderator "{moderator_id}" approves the listing'))
def moderator_approves(product_id, moderator_id, attempt):
    attempt(_approve, product_id, moderator_id, "MODERATOR")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the listing status is "{status}"'))
def listing_status_is(product_id, status):
    assert current_domain.repository_for(Product).get(product_id).status == status


@then(parsers.cfparse('"{user_id}" with rank "{rank}" can see the listing'))
def user_can_see_listing(product_id, user_id, rank):
    assert str(get_product(product_id, viewer_id=user_id, viewer_rank=rank).id) == product_id


@then(parsers.cfparse('"{user_id}" with rank "{rank}" cannot see the listing'))
def user_cannot_see_listing(product_id, user_id, rank):
    with pytest.raises(ObjectNotFoundError):
        get_product(product_id, viewer_id=user_id, viewer_rank=rank)


@then("the action succeeds")
def action_succeeds(outcome):
    assert outcome["exc"] is None, f"Unexpected error: {outcome['exc']!r}"


@then("the action fails with a conflict")
def action_conflicts(outcome):
    assert isinstance(outcome["exc"], ConflictError)


@then("the action fails with a validation error")
def action_invalid(outcome):
    assert isinstance(outcome["exc"], ValidationError)


@then("the action fails with an authorization error")
def action_unauthorized(outcome):
    assert isinstance(outcome["exc"], AuthorizationError)
