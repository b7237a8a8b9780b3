"""DeleteProduct — remove a listing and everything attached to it.

Only moderators and administrators may delete. Comments, reactions and
buyer records are owned by the listing and go with it.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from market.domain import market
from market.product.product import Product
from shared.persistence import delete, persist
from shared.ranks import ELEVATED_RANKS, Rank, require_rank

logger = structlog.get_logger(__name__)


@market.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    requester_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)


@market.command_handler(part_of=Product)
class DeleteProductHandler:
    @handle(DeleteProduct)
    def delete_product(self, command):
        require_rank(command.requester_rank, ELEVATED_RANKS, "delete products")

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        product.mark_deleted(deleted_by=command.requester_id)
        persist(repo, product)
        delete(repo, product)

        logger.info(
            "Product deleted",
            product_id=str(command.product_id),
            deleted_by=str(command.requester_id),
        )
