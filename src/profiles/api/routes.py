"""FastAPI routes for the Profiles bounded context."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from profiles.api.schemas import (
    AddMemberReactionRequest,
    PublicMemberResponse,
    StatusResponse,
    UpdateFieldRequest,
    UpdatePhotoRequest,
    UpdatePresenceRequest,
)
from profiles.member import queries
from profiles.member.deletion import DeleteMember
from profiles.member.fields import UpdateMemberField
from profiles.member.photos import UpdatePhoto
from profiles.member.presence import UpdatePresence
from profiles.member.reactions import AddMemberReaction, RemoveMemberReaction
from shared.api import Requester, current_requester
from shared.errors import AuthorizationError
from shared.ranks import Rank, is_elevated

member_router = APIRouter(prefix="/members", tags=["members"])


def _require_owner_or_elevated(member_id: str, requester: Requester) -> None:
    """Profile writes are limited to the member themself or a moderator/administrator."""
    if requester.user_id != member_id and not is_elevated(requester.rank):
        raise AuthorizationError({"member": ["Only the member or a moderator can change this profile"]})


@member_router.get("", response_model=list[PublicMemberResponse])
async def list_members() -> list[PublicMemberResponse]:
    return [PublicMemberResponse(**view) for view in queries.list_members()]


@member_router.get("/{member_id}", response_model=PublicMemberResponse)
async def get_member(member_id: str) -> PublicMemberResponse:
    return PublicMemberResponse(**queries.get_public_member(member_id))


@member_router.patch("/{member_id}", response_model=StatusResponse)
async def update_member_field(
    member_id: str,
    body: UpdateFieldRequest,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    _require_owner_or_elevated(member_id, requester)
    command = UpdateMemberField(
        member_id=member_id,
        key=body.key,
        value=json.dumps(body.value),
        requester_rank=requester.rank.value,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@member_router.put("/{member_id}/presence", response_model=StatusResponse)
async def update_presence(
    member_id: str,
    body: UpdatePresenceRequest,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    _require_owner_or_elevated(member_id, requester)
    command = UpdatePresence(
        member_id=member_id,
        online=body.online,
        mode=body.mode,
        last=body.last,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@member_router.put("/{member_id}/photo", response_model=StatusResponse)
async def update_photo(
    member_id: str,
    body: UpdatePhotoRequest,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    _require_owner_or_elevated(member_id, requester)
    command = UpdatePhoto(member_id=member_id, path=body.path, kind=body.kind)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@member_router.post("/{member_id}/reactions", status_code=201, response_model=StatusResponse)
async def add_reaction(
    member_id: str,
    body: AddMemberReactionRequest,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    command = AddMemberReaction(
        member_id=member_id,
        author_id=requester.user_id,
        polarity=body.polarity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@member_router.delete("/{member_id}/reactions", response_model=StatusResponse)
async def remove_reaction(
    member_id: str,
    author_id: str | None = Query(default=None),
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    command = RemoveMemberReaction(
        member_id=member_id,
        author_id=author_id or requester.user_id,
        requester_id=requester.user_id,
        requester_rank=requester.rank.value,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@member_router.delete("/{member_id}", response_model=StatusResponse)
async def delete_member(
    member_id: str,
    requester: Requester = Depends(current_requester),
) -> StatusResponse:
    if requester.user_id != member_id and requester.rank != Rank.ADMINISTRATOR:
        raise AuthorizationError({"member": ["Only the member or an administrator can delete this account"]})
    current_domain.process(DeleteMember(member_id=member_id), asynchronous=False)
    return StatusResponse()
