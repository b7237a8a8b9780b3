"""Public reads of member profiles. Restricted fields never leave this module."""

from protean.utils.globals import current_domain

from profiles.member.member import Member


def get_public_member(member_id) -> dict:
    return current_domain.repository_for(Member).get(member_id).public_view()


def list_members(limit=100) -> list[dict]:
    members = current_domain.repository_for(Member)._dao.query.limit(limit).all().items
    return [m.public_view() for m in members]
