"""Member aggregate — a platform user's profile document.

Public profile fields (photo, cover, stats, presence, name, username,
specialty, offer and received reactions) sit next to restricted
administrative fields (credentials state, wallet, rank, suspension,
sessions, devices, listings, audit timestamps). Which fields the generic
update path may touch is decided by a ``ProtectedFieldPolicy``, never by
the caller's rank.
"""

import copy
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Dict,
    Float,
    HasMany,
    Identifier,
    Integer,
    List,
    String,
    Text,
    ValueObject,
)
from protean.utils.reflection import declared_fields

from profiles.domain import profiles
from shared.errors import AuthorizationError, ConflictError
from shared.polarity import Polarity
from shared.ranks import Rank, is_elevated

PUBLIC_FIELDS = (
    "offer",
    "photo",
    "cover",
    "stats",
    "online",
    "name",
    "username",
    "specialty",
    "reactions",
)


class PhotoKind(Enum):
    PHOTO = "photo"
    COVER = "cover"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@profiles.value_object(part_of="Member")
class Presence:
    """Online state, rewritten on every connect and disconnect."""

    online = Boolean(default=False)
    mode = Integer(default=0, min_value=0)
    last = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@profiles.entity(part_of="Member")
class MemberReaction:
    """An up/down reaction another user left on this member."""

    author_id = Identifier(required=True)
    polarity = Integer(required=True, min_value=0, max_value=1)
    reacted_at = DateTime(required=True)


_VALUE_OBJECTS = {"online": Presence}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@profiles.aggregate
class Member:
    # Public profile
    username = String(required=True, max_length=50)
    name = String(max_length=100)
    specialty = String(max_length=100)
    offer = Text()
    photo = String(max_length=500)
    cover = String(max_length=500)
    stats = Dict()
    online = ValueObject(Presence)
    reactions = HasMany(MemberReaction)

    # Restricted
    email = Dict()  # address, status, expiration, token
    password = Dict()  # hash, status, expiration, token
    ip = String(max_length=45)
    coins = Float(default=0.0)
    suspension = Dict()
    premium = Dict()
    rank = String(choices=Rank, default=Rank.AUTHENTICATED.value)
    transactions = List(content_type=Dict)
    market = List(content_type=String)
    device = List(content_type=Dict)
    sessions = List(content_type=Dict)

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_reaction_per_author(self):
        authors = [str(r.author_id) for r in self.reactions]
        if len(authors) != len(set(authors)):
            raise ValidationError({"reactions": ["A user can react to a member only once"]})

    @classmethod
    def register(cls, username, name=None, email=None, rank=None):
        """Seed a member document. Registration proper lives outside this context."""
        now = datetime.now(UTC)
        return cls(
            username=username,
            name=name,
            email={"address": email, "status": False} if email else {},
            rank=rank.value if isinstance(rank, Rank) else (rank or Rank.AUTHENTICATED.value),
            stats={},
            online=Presence(online=False, mode=0),
            coins=0.0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Generic, policy-gated update
    # -------------------------------------------------------------------
    def update_field(self, key, value, policy):
        """Replace the single field (or sub-key) addressed by ``key``.

        ``key`` is a dotted path: ``name``, ``stats.views``, ``online.mode``.
        Protected keys are refused whatever the caller's rank.
        """
        if not key or not isinstance(key, str):
            raise ValidationError({"key": ["A field name is required"]})

        if policy.protects(key):
            raise AuthorizationError({key: ["This field cannot be changed through a profile update"]})

        head, _, rest = key.partition(".")
        field = declared_fields(type(self)).get(head)
        if field is None or head == "id" or isinstance(field, HasMany):
            raise ValidationError({key: [f"Unknown member field '{head}'"]})

        if not rest:
            vo_cls = _VALUE_OBJECTS.get(head)
            if vo_cls is not None and isinstance(value, dict):
                value = vo_cls(**value)
            setattr(self, head, value)
            return

        if head in _VALUE_OBJECTS:
            if "." in rest:
                raise ValidationError({key: [f"'{head}' has no nested field '{rest}'"]})
            current = getattr(self, head)
            data = current.to_dict() if current is not None else {}
            data[rest] = value
            setattr(self, head, _VALUE_OBJECTS[head](**data))
            return

        if not isinstance(field, Dict):
            raise ValidationError({key: [f"'{head}' has no nested fields"]})

        data = copy.deepcopy(getattr(self, head) or {})
        node = data
        *parents, leaf = rest.split(".")
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[leaf] = value
        setattr(self, head, data)

    # -------------------------------------------------------------------
    # Dedicated operations
    # -------------------------------------------------------------------
    def update_presence(self, online, mode=0, last=None):
        """Overwrite the whole presence block."""
        self.online = Presence(online=bool(online), mode=mode or 0, last=last or datetime.now(UTC))

    def update_photo(self, path, kind):
        try:
            kind = PhotoKind(kind)
        except ValueError:
            raise ValidationError({"kind": [f"Unknown photo kind '{kind}', expected 'photo' or 'cover'"]}) from None

        if kind == PhotoKind.PHOTO:
            self.photo = path
        else:
            self.cover = path

    def reaction_by(self, author_id):
        return next((r for r in self.reactions if str(r.author_id) == str(author_id)), None)

    def add_reaction(self, author_id, polarity):
        polarity = Polarity.parse(polarity)
        if self.reaction_by(author_id) is not None:
            raise ConflictError({"reaction": ["The user has already reacted to this member"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.add_reactions(MemberReaction(author_id=author_id, polarity=polarity.value, reacted_at=now))
            self.updated_at = now

    def remove_reactions_by(self, author_id, requester_id=None, requester_rank=None) -> int:
        """Drop every reaction ``author_id`` left on this member.

        Only the author or a moderator/administrator may do this.
        """
        if requester_id is not None and str(author_id) != str(requester_id) and not is_elevated(requester_rank):
            raise AuthorizationError({"reaction": ["Only the author or a moderator can remove this reaction"]})

        authored = [r for r in self.reactions if str(r.author_id) == str(author_id)]
        if not authored:
            return 0

        with atomic_change(self):
            for reaction in authored:
                self.remove_reactions(reaction)
            self.updated_at = datetime.now(UTC)
        return len(authored)

    def public_view(self) -> dict:
        view = {"member_id": str(self.id)}
        for name in PUBLIC_FIELDS:
            if name == "reactions":
                view[name] = [
                    {"author": str(r.author_id), "type": r.polarity}
                    for r in self.reactions
                ]
            elif name == "online":
                view[name] = self.online.to_dict() if self.online is not None else None
            else:
                view[name] = getattr(self, name)
        return view
