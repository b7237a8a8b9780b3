"""Contention scenario for the one-reaction-per-user rule.

Every simulated user hammers the same listing with the same identity, so
first reactions race each other. Only 201 (this request won) and 409 (an
earlier or concurrent request won) are acceptable; anything else means the
conditional write let something through or fell over.
"""

import random

from locust import HttpUser, constant_pacing, events, task

from loadtests.data_generators import identity, listing_data, reaction

SHARED_AUTHORS = [f"lt-contender-{i}" for i in range(10)]

_listing = {"product_id": None}


@events.test_start.add_listener
def _reset_shared_listing(**_kwargs):
    _listing["product_id"] = None


class ReactionStormUser(HttpUser):
    """Many users, few identities, one listing."""

    wait_time = constant_pacing(0.05)

    def on_start(self):
        if _listing["product_id"] is not None:
            return
        resp = self.client.post(
            "/market/products",
            json=listing_data(),
            headers=identity("lt-contention-seller", "SELLER"),
            name="[CONTENTION] POST /market/products",
        )
        product_id = resp.json()["product_id"]
        self.client.put(
            f"/market/products/{product_id}/approve",
            headers=identity("lt-moderator", "MODERATOR"),
            name="[CONTENTION] PUT /market/products/{id}/approve",
        )
        _listing["product_id"] = product_id

    @task(5)
    def react(self):
        author = random.choice(SHARED_AUTHORS)
        with self.client.post(
            f"/market/products/{_listing['product_id']}/reactions",
            json=reaction(),
            headers=identity(author),
            catch_response=True,
            name="[CONTENTION] POST /market/products/{id}/reactions",
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected status: {resp.status_code}")

    @task(2)
    def withdraw(self):
        author = random.choice(SHARED_AUTHORS)
        self.client.delete(
            f"/market/products/{_listing['product_id']}/reactions/{author}",
            headers=identity(author),
            name="[CONTENTION] DELETE /market/products/{id}/reactions/{author}",
        )

    @task(1)
    def check_tally(self):
        with self.client.get(
            f"/market/products/{_listing['product_id']}",
            headers=identity("lt-auditor"),
            catch_response=True,
            name="[CONTENTION] GET /market/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read failed: {resp.status_code}")
                return
            body = resp.json()
            if body["upvotes"] + body["downvotes"] > len(SHARED_AUTHORS):
                resp.failure("More reactions than distinct authors")
