"""RecordPurchase / RemoveBuyer — the listing's buyer set.

The external checkout flow records a buyer once a purchase is confirmed.
Removing a buyer record is reserved for moderators and administrators and
succeeds even when there is nothing to remove.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from market.domain import market
from market.product.product import Product
from shared.persistence import persist
from shared.ranks import ELEVATED_RANKS, Rank, require_rank

logger = structlog.get_logger(__name__)


@market.command(part_of="Product")
class RecordPurchase:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)


@market.command(part_of="Product")
class RemoveBuyer:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    requester_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)


@market.command_handler(part_of=Product)
class ManagePurchasesHandler:
    @handle(RecordPurchase)
    def record_purchase(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        product.record_purchase(user_id=command.user_id)
        persist(repo, product)

        logger.info(
            "Purchase recorded",
            product_id=str(command.product_id),
            user_id=str(command.user_id),
        )

    @handle(RemoveBuyer)
    def remove_buyer(self, command):
        require_rank(command.requester_rank, ELEVATED_RANKS, "remove buyers")

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        if product.remove_buyer(user_id=command.user_id):
            persist(repo, product)
            logger.info(
                "Buyer removed",
                product_id=str(command.product_id),
                user_id=str(command.user_id),
            )
