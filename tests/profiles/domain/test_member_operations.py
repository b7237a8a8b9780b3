"""Tests for presence, photo and reaction operations on a Member."""

from datetime import UTC, datetime

import pytest
from profiles.member.member import Member
from protean.exceptions import ValidationError
from shared.errors import AuthorizationError, ConflictError


def _make_member():
    return Member.register(username="potter", name="Sam Potter")


class TestRegistration:
    def test_defaults(self):
        member = _make_member()
        assert member.rank == "AUTHENTICATED"
        assert member.coins == 0.0
        assert member.online.online is False
        assert len(member.reactions) == 0

    def test_username_required(self):
        with pytest.raises(ValidationError):
            Member.register(username=None)


class TestPresence:
    def test_connect_overwrites_presence(self):
        member = _make_member()
        seen = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)
        member.update_presence(online=True, mode=1, last=seen)
        assert member.online.online is True
        assert member.online.mode == 1
        assert member.online.last == seen

    def test_disconnect_stamps_last_seen(self):
        member = _make_member()
        member.update_presence(online=True, mode=1)
        member.update_presence(online=False)
        assert member.online.online is False
        assert member.online.mode == 0
        assert member.online.last is not None


class TestPhotos:
    def test_photo_sets_only_photo(self):
        member = _make_member()
        member.update_photo(path="/uploads/p/1.jpg", kind="photo")
        assert member.photo == "/uploads/p/1.jpg"
        assert member.cover is None

    def test_cover_sets_only_cover(self):
        member = _make_member()
        member.update_photo(path="/uploads/c/1.jpg", kind="cover")
        assert member.cover == "/uploads/c/1.jpg"
        assert member.photo is None

    def test_unknown_kind_rejected(self):
        member = _make_member()
        with pytest.raises(ValidationError):
            member.update_photo(path="/uploads/x.jpg", kind="banner")
        assert member.photo is None
        assert member.cover is None


class TestReactions:
    def test_add_reaction(self):
        member = _make_member()
        member.add_reaction(author_id="user-001", polarity="downvote")
        assert len(member.reactions) == 1
        assert member.reactions[0].polarity == 1

    def test_second_reaction_conflicts(self):
        member = _make_member()
        member.add_reaction(author_id="user-001", polarity="upvote")
        with pytest.raises(ConflictError):
            member.add_reaction(author_id="user-001", polarity="upvote")

    def test_invalid_polarity_rejected(self):
        member = _make_member()
        with pytest.raises(ValidationError):
            member.add_reaction(author_id="user-001", polarity="love")

    def test_remove_reactions_by_author(self):
        member = _make_member()
        member.add_reaction(author_id="user-001", polarity="upvote")
        member.add_reaction(author_id="user-002", polarity="upvote")
        assert member.remove_reactions_by("user-001") == 1
        assert [str(r.author_id) for r in member.reactions] == ["user-002"]

    def test_remove_absent_reaction(self):
        assert _make_member().remove_reactions_by("user-001") == 0

    def test_other_user_cannot_remove(self):
        member = _make_member()
        member.add_reaction(author_id="user-001", polarity="upvote")
        with pytest.raises(AuthorizationError):
            member.remove_reactions_by("user-001", requester_id="user-002", requester_rank="SELLER")
        assert len(member.reactions) == 1

    def test_administrator_removes_any_reaction(self):
        member = _make_member()
        member.add_reaction(author_id="user-001", polarity="upvote")
        assert member.remove_reactions_by("user-001", requester_id="admin-1", requester_rank="ADMINISTRATOR") == 1


class TestPublicView:
    def test_restricted_fields_are_hidden(self):
        member = Member.register(username="potter", email="sam@example.com", rank="MODERATOR")
        member.add_reaction(author_id="user-001", polarity="upvote")
        view = member.public_view()

        assert view["username"] == "potter"
        assert view["reactions"] == [{"author": "user-001", "type": 0}]
        for restricted in ("email", "password", "rank", "coins", "sessions", "ip"):
            assert restricted not in view
