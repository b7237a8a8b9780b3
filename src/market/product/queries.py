"""Read side of the Market context: visibility-gated product reads and the
advisory "have I already acted?" checks.

Verification never mutates and never enforces anything; the commands in
``reactions``/``purchases`` are the only place the uniqueness rules are
enforced. A listing the caller may not see is reported exactly like a
listing that does not exist.
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from market.product.product import Product, ProductStatus
from market.settings import page_size
from shared.ranks import ELEVATED_RANKS, is_elevated, require_rank

logger = structlog.get_logger(__name__)

PENDING_QUEUE_LIMIT = 100


def visible_product(product_id, viewer_id, viewer_rank) -> Product:
    """Load a product, raising ObjectNotFoundError unless ``viewer`` may see it."""
    repo = current_domain.repository_for(Product)
    try:
        product = repo.get(product_id)
    except ObjectNotFoundError:
        product = None

    if product is None or not product.is_visible_to(viewer_id, viewer_rank):
        if product is not None:
            logger.info(
                "Hidden product requested",
                product_id=str(product_id),
                viewer_id=str(viewer_id),
            )
        raise ObjectNotFoundError({"product": [f"Product {product_id} does not exist"]})
    return product


def get_product(product_id, viewer_id=None, viewer_rank=None) -> Product:
    return visible_product(product_id, viewer_id, viewer_rank)


def list_products(market_id, page=0, viewer_id=None, viewer_rank=None) -> list[Product]:
    """One page of a market's listings, newest first, as seen by ``viewer``.

    Approved listings are visible to everybody; pending ones only to their
    seller and to moderators/administrators.
    """
    if page is None or page < 0:
        raise ValidationError({"page": ["Page must be zero or a positive number"]})

    size = page_size()
    needed = (page + 1) * size
    query = current_domain.repository_for(Product)._dao.query

    approved = query.filter(market_id=market_id, status=ProductStatus.APPROVED.value)
    products = approved.order_by("-created_at").limit(needed).all().items

    pending = query.filter(market_id=market_id, status=ProductStatus.PENDING.value)
    if not is_elevated(viewer_rank):
        pending = pending.filter(seller_id=str(viewer_id)) if viewer_id else None
    if pending is not None:
        products = products + pending.order_by("-created_at").limit(needed).all().items

    products.sort(key=lambda p: p.created_at, reverse=True)
    return products[page * size : needed]


def list_pending(requester_rank, limit=PENDING_QUEUE_LIMIT) -> list[Product]:
    """The moderation queue: pending listings, oldest first."""
    require_rank(requester_rank, ELEVATED_RANKS, "view the moderation queue")
    query = current_domain.repository_for(Product)._dao.query
    return query.filter(status=ProductStatus.PENDING.value).order_by("created_at").limit(limit).all().items


# ---------------------------------------------------------------------------
# Advisory verification
# ---------------------------------------------------------------------------
def verify_reaction(product_id, user_id, requester_id, requester_rank=None) -> bool:
    """Whether ``user_id`` has already reacted to the product."""
    product = visible_product(product_id, requester_id, requester_rank)
    return product.reaction_by(user_id) is not None


def verify_purchase(product_id, user_id, requester_id, requester_rank=None) -> bool:
    """Whether ``user_id`` is recorded as a buyer of the product."""
    product = visible_product(product_id, requester_id, requester_rank)
    return product.has_buyer(user_id)


def verify_comment(product_id, user_id, requester_id, requester_rank=None) -> bool:
    """Whether ``user_id`` has commented on the product at least once."""
    product = visible_product(product_id, requester_id, requester_rank)
    return product.has_comment_by(user_id)
