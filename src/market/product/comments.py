"""AddComment / RemoveComment — discussion on a listing.

Anyone who can see a listing may comment on it, as often as they like.
A comment can be removed by its author or by a moderator/administrator;
removing a comment that is already gone succeeds.
"""

import structlog
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from market.domain import market
from market.product.product import Product
from market.product.queries import visible_product
from shared.persistence import persist
from shared.ranks import Rank

logger = structlog.get_logger(__name__)


@market.command(part_of="Product")
class AddComment:
    product_id = Identifier(required=True)
    author_id = Identifier(required=True)
    author_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)
    body = Text(required=True)


@market.command(part_of="Product")
class RemoveComment:
    product_id = Identifier(required=True)
    comment_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    requester_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)


@market.command_handler(part_of=Product)
class ManageCommentsHandler:
    @handle(AddComment)
    def add_comment(self, command):
        product = visible_product(command.product_id, command.author_id, command.author_rank)

        comment = product.add_comment(author_id=command.author_id, body=command.body)
        persist(current_domain.repository_for(Product), product)

        logger.info(
            "Comment added",
            product_id=str(command.product_id),
            comment_id=str(comment.id),
            author_id=str(command.author_id),
        )
        return str(comment.id)

    @handle(RemoveComment)
    def remove_comment(self, command):
        repo = current_domain.repository_for(Product)
        product = visible_product(command.product_id, command.requester_id, command.requester_rank)

        removed = product.remove_comment(
            comment_id=command.comment_id,
            requester_id=command.requester_id,
            requester_rank=command.requester_rank,
        )
        if not removed:
            logger.info(
                "Comment already removed",
                product_id=str(command.product_id),
                comment_id=str(command.comment_id),
            )
            return

        persist(repo, product)
        logger.info(
            "Comment removed",
            product_id=str(command.product_id),
            comment_id=str(command.comment_id),
            removed_by=str(command.requester_id),
        )
