"""Application tests for the Member command handlers."""

import json

import pytest
from profiles.member.deletion import DeleteMember
from profiles.member.fields import UpdateMemberField
from profiles.member.member import Member
from profiles.member.photos import UpdatePhoto
from profiles.member.presence import UpdatePresence
from profiles.member.reactions import AddMemberReaction, RemoveMemberReaction
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.errors import AuthorizationError, ConflictError


def _update_field(member_id, key, value, rank=None):
    current_domain.process(
        UpdateMemberField(member_id=member_id, key=key, value=json.dumps(value), requester_rank=rank),
        asynchronous=False,
    )


def _load(member_id):
    return current_domain.repository_for(Member).get(member_id)


class TestUpdateMemberFieldCommand:
    def test_field_update_persists(self, member_id):
        _update_field(member_id, "specialty", "Glassware")
        assert _load(member_id).specialty == "Glassware"

    @pytest.mark.parametrize("rank", ["AUTHENTICATED", "SELLER", "MODERATOR", "ADMINISTRATOR"])
    def test_protected_field_refused_for_every_rank(self, member_id, rank):
        with pytest.raises(AuthorizationError):
            _update_field(member_id, "rank", "ADMINISTRATOR", rank=rank)
        assert _load(member_id).rank == "AUTHENTICATED"

    def test_unknown_member_reported_before_policy(self):
        with pytest.raises(ObjectNotFoundError):
            _update_field("no-such-member", "rank", "ADMINISTRATOR")

    def test_invalid_json_rejected(self, member_id):
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateMemberField(member_id=member_id, key="name", value="{not json"),
                asynchronous=False,
            )

    def test_structured_value(self, member_id):
        _update_field(member_id, "online", {"online": True, "mode": 3})
        online = _load(member_id).online
        assert (online.online, online.mode) == (True, 3)


class TestUpdatePresenceCommand:
    def test_presence_persists(self, member_id):
        current_domain.process(UpdatePresence(member_id=member_id, online=True, mode=2), asynchronous=False)
        online = _load(member_id).online
        assert online.online is True
        assert online.mode == 2
        assert online.last is not None

    def test_unknown_member(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdatePresence(member_id="no-such-member", online=False), asynchronous=False)


class TestUpdatePhotoCommand:
    def test_cover_persists(self, member_id):
        current_domain.process(
            UpdatePhoto(member_id=member_id, path="/uploads/cover.png", kind="cover"),
            asynchronous=False,
        )
        member = _load(member_id)
        assert member.cover == "/uploads/cover.png"
        assert member.photo is None

    def test_invalid_kind(self, member_id):
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdatePhoto(member_id=member_id, path="/uploads/x.png", kind="avatar"),
                asynchronous=False,
            )

    def test_unknown_member_reported_first(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdatePhoto(member_id="no-such-member", path="/uploads/x.png", kind="avatar"),
                asynchronous=False,
            )


class TestMemberReactionCommands:
    def test_reaction_persists(self, member_id):
        current_domain.process(
            AddMemberReaction(member_id=member_id, author_id="user-m1", polarity="upvote"),
            asynchronous=False,
        )
        assert [str(r.author_id) for r in _load(member_id).reactions] == ["user-m1"]

    def test_duplicate_reaction_conflicts(self, member_id):
        command = AddMemberReaction(member_id=member_id, author_id="user-m2", polarity="upvote")
        current_domain.process(command, asynchronous=False)
        with pytest.raises(ConflictError):
            current_domain.process(command, asynchronous=False)

    def test_remove_reaction(self, member_id):
        current_domain.process(
            AddMemberReaction(member_id=member_id, author_id="user-m3", polarity="downvote"),
            asynchronous=False,
        )
        current_domain.process(RemoveMemberReaction(member_id=member_id, author_id="user-m3", requester_id="user-m3"), asynchronous=False)
        assert len(_load(member_id).reactions) == 0

    def test_moderator_removes_reaction(self, member_id):
        current_domain.process(
            AddMemberReaction(member_id=member_id, author_id="user-m5", polarity="downvote"),
            asynchronous=False,
        )
        current_domain.process(
            RemoveMemberReaction(
                member_id=member_id,
                author_id="user-m5",
                requester_id="mod-m5",
                requester_rank="MODERATOR",
            ),
            asynchronous=False,
        )
        assert len(_load(member_id).reactions) == 0

    def test_other_user_cannot_remove_reaction(self, member_id):
        current_domain.process(
            AddMemberReaction(member_id=member_id, author_id="user-m6", polarity="upvote"),
            asynchronous=False,
        )
        with pytest.raises(AuthorizationError):
            current_domain.process(
                RemoveMemberReaction(member_id=member_id, author_id="user-m6", requester_id="user-m7"),
                asynchronous=False,
            )
        assert len(_load(member_id).reactions) == 1

    def test_remove_absent_reaction_succeeds(self, member_id):
        current_domain.process(
            RemoveMemberReaction(member_id=member_id, author_id="user-m4", requester_id="user-m4"),
            asynchronous=False,
        )


class TestDeleteMemberCommand:
    def test_member_is_gone(self, member_id):
        current_domain.process(DeleteMember(member_id=member_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            _load(member_id)

    def test_unknown_member(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(DeleteMember(member_id="no-such-member"), asynchronous=False)
