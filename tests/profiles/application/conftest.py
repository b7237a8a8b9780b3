import pytest
from profiles.member.member import Member
from protean import current_domain


@pytest.fixture()
def member_id():
    member = Member.register(username="glassblower", name="Kim Glass", email="kim@example.com")
    current_domain.repository_for(Member).add(member)
    return str(member.id)
