"""ApproveProduct — a moderator publishes a pending listing.

Approval is idempotent: approving an approved listing succeeds without
writing anything. When two moderators race, the loser's write fails the
version check; if the listing turns out to be approved already, the loser
succeeds too.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from market.domain import market
from market.product.product import Product
from shared.errors import ConflictError
from shared.persistence import persist
from shared.ranks import ELEVATED_RANKS, Rank, require_rank

logger = structlog.get_logger(__name__)


@market.command(part_of="Product")
class ApproveProduct:
    product_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    requester_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)


@market.command_handler(part_of=Product)
class ApproveProductHandler:
    @handle(ApproveProduct)
    def approve_product(self, command):
        require_rank(command.requester_rank, ELEVATED_RANKS, "approve products")

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        if not product.approve(moderator_id=command.moderator_id):
            logger.info("Product already approved", product_id=str(command.product_id))
            return

        try:
            persist(repo, product)
        except ConflictError:
            latest = repo._dao.get(command.product_id)
            if not latest.is_approved:
                raise
            product._events.clear()
            logger.info(
                "Product approved by a concurrent request",
                product_id=str(command.product_id),
                moderator_id=str(command.moderator_id),
            )
            return

        logger.info(
            "Product approved",
            product_id=str(command.product_id),
            moderator_id=str(command.moderator_id),
        )
