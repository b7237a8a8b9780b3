"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
and match the exact field names expected by the API's Pydantic request
schemas. Identity travels in headers, already resolved by the gateway.
"""

import random
import uuid

from faker import Faker

fake = Faker()

MARKET_IDS = [1, 2, 3, 4]


def user_id(prefix: str = "lt-user") -> str:
    """Generate unique user ids like 'lt-user-a1b2c3d4'."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def identity(uid: str, rank: str | None = None) -> dict:
    """Headers the gateway would forward for an authenticated caller."""
    headers = {"X-User-Id": uid}
    if rank:
        headers["X-User-Rank"] = rank
    return headers


def listing_data(market_id: int | None = None) -> dict:
    """Generate a SubmitProductRequest payload."""
    return {
        "market_id": market_id if market_id is not None else random.choice(MARKET_IDS),
        "title": fake.catch_phrase()[:200],
        "description": fake.paragraph(nb_sentences=3),
        "price": round(random.uniform(1, 500), 2),
        "currency": random.choice(["USD", "EUR", "GBP"]),
        "photos": [f"/uploads/{uuid.uuid4().hex}.jpg" for _ in range(random.randint(0, 3))],
    }


def comment_body() -> dict:
    return {"body": fake.sentence(nb_words=12)[:2000]}


def reaction(polarity: str | None = None) -> dict:
    return {"polarity": polarity or random.choice(["upvote", "downvote"])}
