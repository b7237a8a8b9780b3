"""AddMemberReaction / RemoveMemberReaction — reactions users leave on each other."""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from profiles.domain import profiles
from profiles.member.member import Member
from shared.persistence import persist
from shared.ranks import Rank

logger = structlog.get_logger(__name__)


@profiles.command(part_of="Member")
class AddMemberReaction:
    member_id = Identifier(required=True)
    author_id = Identifier(required=True)
    polarity = String(required=True)  # "upvote" or "downvote"


@profiles.command(part_of="Member")
class RemoveMemberReaction:
    member_id = Identifier(required=True)
    author_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    requester_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)


@profiles.command_handler(part_of=Member)
class ManageMemberReactionsHandler:
    @handle(AddMemberReaction)
    def add_reaction(self, command):
        repo = current_domain.repository_for(Member)
        member = repo.get(command.member_id)

        member.add_reaction(author_id=command.author_id, polarity=command.polarity)
        persist(repo, member)

        logger.info(
            "Member reaction added",
            member_id=str(command.member_id),
            author_id=str(command.author_id),
            polarity=command.polarity,
        )

    @handle(RemoveMemberReaction)
    def remove_reaction(self, command):
        repo = current_domain.repository_for(Member)
        member = repo.get(command.member_id)

        removed = member.remove_reactions_by(
            command.author_id,
            requester_id=command.requester_id,
            requester_rank=command.requester_rank,
        )
        if removed:
            persist(repo, member)
            logger.info(
                "Member reaction removed",
                member_id=str(command.member_id),
                author_id=str(command.author_id),
                removed_by=str(command.requester_id),
            )
