"""SubmitProduct — a seller lists a new product.

Listings start out pending and stay invisible to the public until a
moderator approves them. Sellers, moderators and administrators may submit.
"""

import structlog
from protean.fields import Float, Identifier, Integer, List, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from market.domain import market
from market.product.product import Product
from shared.persistence import persist
from shared.ranks import LISTING_RANKS, Rank, require_rank

logger = structlog.get_logger(__name__)


@market.command(part_of="Product")
class SubmitProduct:
    requester_id = Identifier(required=True)
    requester_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)
    market_id = Integer(required=True, min_value=0)
    title = String(required=True, max_length=200)
    description = Text(required=True)
    price = Float(required=True, min_value=0.01)
    currency = String(max_length=3)
    photos = List(content_type=String)


@market.command_handler(part_of=Product)
class SubmitProductHandler:
    @handle(SubmitProduct)
    def submit_product(self, command):
        require_rank(command.requester_rank, LISTING_RANKS, "submit products")

        product = Product.submit(
            seller_id=command.requester_id,
            market_id=command.market_id,
            title=command.title,
            description=command.description,
            price=command.price,
            currency=command.currency,
            photos=command.photos,
        )
        persist(current_domain.repository_for(Product), product)

        logger.info(
            "Product submitted for moderation",
            product_id=str(product.id),
            seller_id=str(command.requester_id),
            market_id=command.market_id,
        )
        return str(product.id)
