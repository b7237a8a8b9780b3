"""AddProductReaction / RemoveProductReaction — up/down votes on a listing.

A user holds at most one reaction per listing. The check in the aggregate
rejects a second reaction; the version check on save rejects the second of
two concurrent first reactions. Both surface as ConflictError.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from market.domain import market
from market.product.product import Product
from market.product.queries import visible_product
from shared.persistence import persist
from shared.ranks import Rank

logger = structlog.get_logger(__name__)


@market.command(part_of="Product")
class AddProductReaction:
    product_id = Identifier(required=True)
    author_id = Identifier(required=True)
    author_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)
    polarity = String(required=True)  # "upvote" or "downvote"


@market.command(part_of="Product")
class RemoveProductReaction:
    product_id = Identifier(required=True)
    author_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    requester_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)


@market.command_handler(part_of=Product)
class ManageReactionsHandler:
    @handle(AddProductReaction)
    def add_reaction(self, command):
        product = visible_product(command.product_id, command.author_id, command.author_rank)

        product.add_reaction(author_id=command.author_id, polarity=command.polarity)
        persist(current_domain.repository_for(Product), product)

        logger.info(
            "Product reaction added",
            product_id=str(command.product_id),
            author_id=str(command.author_id),
            polarity=command.polarity,
        )

    @handle(RemoveProductReaction)
    def remove_reaction(self, command):
        repo = current_domain.repository_for(Product)
        product = visible_product(command.product_id, command.requester_id, command.requester_rank)

        if not product.remove_reaction(
            author_id=command.author_id,
            requester_id=command.requester_id,
            requester_rank=command.requester_rank,
        ):
            return

        persist(repo, product)
        logger.info(
            "Product reaction removed",
            product_id=str(command.product_id),
            author_id=str(command.author_id),
            removed_by=str(command.requester_id),
        )
