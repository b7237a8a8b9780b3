"""UpdateMemberField — the generic, policy-gated profile update.

One dotted key, one replacement value, one field changed. Keys protected
by the field policy are refused regardless of the caller's rank; those
fields only change through their dedicated operations. The value travels
JSON-encoded so any JSON type can be written.
"""

import json

import structlog
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from profiles.domain import profiles
from profiles.member.member import Member
from profiles.member.policy import current_policy
from shared.errors import AuthorizationError
from shared.persistence import persist
from shared.ranks import Rank

logger = structlog.get_logger(__name__)


@profiles.command(part_of="Member")
class UpdateMemberField:
    member_id = Identifier(required=True)
    key = String(required=True, max_length=100)
    value = Text()  # JSON-encoded replacement value
    requester_rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)


@profiles.command_handler(part_of=Member)
class UpdateMemberFieldHandler:
    @handle(UpdateMemberField)
    def update_member_field(self, command):
        repo = current_domain.repository_for(Member)
        member = repo.get(command.member_id)

        try:
            value = json.loads(command.value) if command.value is not None else None
        except json.JSONDecodeError:
            raise ValidationError({"value": ["Value must be valid JSON"]}) from None

        policy = current_policy()
        try:
            member.update_field(command.key, value, policy)
        except AuthorizationError:
            logger.warning(
                "Protected member field update refused",
                member_id=str(command.member_id),
                key=command.key,
                requester_rank=command.requester_rank,
                policy_version=policy.version,
            )
            raise

        persist(repo, member)
        logger.info("Member field updated", member_id=str(command.member_id), key=command.key)
