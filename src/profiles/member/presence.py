"""UpdatePresence — record a connect or disconnect.

Presence is written on every connection change, so it bypasses the field
policy and always replaces the whole presence block.
"""

from protean.fields import Boolean, DateTime, Identifier, Integer
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from profiles.domain import profiles
from profiles.member.member import Member
from shared.persistence import persist


@profiles.command(part_of="Member")
class UpdatePresence:
    member_id = Identifier(required=True)
    online = Boolean(required=True)
    mode = Integer(default=0, min_value=0)
    last = DateTime()


@profiles.command_handler(part_of=Member)
class UpdatePresenceHandler:
    @handle(UpdatePresence)
    def update_presence(self, command):
        repo = current_domain.repository_for(Member)
        member = repo.get(command.member_id)
        member.update_presence(online=command.online, mode=command.mode, last=command.last)
        persist(repo, member)
