"""UpdatePhoto — point a member's photo or cover at an uploaded file.

Files are stored elsewhere; the path is opaque here.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from profiles.domain import profiles
from profiles.member.member import Member
from shared.persistence import persist

logger = structlog.get_logger(__name__)


@profiles.command(part_of="Member")
class UpdatePhoto:
    member_id = Identifier(required=True)
    path = String(required=True, max_length=500)
    kind = String(required=True)  # "photo" or "cover"


@profiles.command_handler(part_of=Member)
class UpdatePhotoHandler:
    @handle(UpdatePhoto)
    def update_photo(self, command):
        repo = current_domain.repository_for(Member)
        member = repo.get(command.member_id)

        member.update_photo(path=command.path, kind=command.kind)
        persist(repo, member)

        logger.info("Member photo updated", member_id=str(command.member_id), kind=command.kind)
