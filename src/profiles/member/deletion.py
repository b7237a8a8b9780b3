"""DeleteMember — irreversibly remove a member document.

Nothing else is cleaned up here; listings, comments and reactions the
member left elsewhere are the caller's concern.
"""

import structlog
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from profiles.domain import profiles
from profiles.member.member import Member
from shared.persistence import delete

logger = structlog.get_logger(__name__)


@profiles.command(part_of="Member")
class DeleteMember:
    member_id = Identifier(required=True)


@profiles.command_handler(part_of=Member)
class DeleteMemberHandler:
    @handle(DeleteMember)
    def delete_member(self, command):
        repo = current_domain.repository_for(Member)
        member = repo.get(command.member_id)
        delete(repo, member)
        logger.info("Member deleted", member_id=str(command.member_id))
