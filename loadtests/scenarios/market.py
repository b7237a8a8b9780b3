"""Market domain load test scenarios.

Stateful SequentialTaskSet journeys covering the listing lifecycle:
submission, moderation, discussion, purchase and reaction. Steps execute
in order — each depends on the previous step succeeding.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    comment_body,
    identity,
    listing_data,
    reaction,
    user_id,
)
from loadtests.helpers.state import ListingState

MODERATOR = identity("lt-moderator", "MODERATOR")


class ListingLifecycleJourney(SequentialTaskSet):
    """Submit -> Approve -> Comment -> Purchase -> Verify -> React.

    Models a seller listing a product and the first buyer engaging with it.
    Generates 5 events: ProductSubmitted, ProductApproved, CommentAdded,
    PurchaseRecorded, ProductReactionAdded.
    """

    def on_start(self):
        self.state = ListingState(seller_id=user_id("lt-seller"))
        self.buyer = user_id("lt-buyer")

    @task
    def submit_listing(self):
        payload = listing_data()
        with self.client.post(
            "/market/products",
            json=payload,
            headers=identity(self.state.seller_id, "SELLER"),
            catch_response=True,
            name="POST /market/products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_id = resp.json()["product_id"]
                self.state.market_id = payload["market_id"]
            else:
                resp.failure(f"Submit listing failed: {resp.status_code}")
                self.interrupt()

    @task
    def approve_listing(self):
        with self.client.put(
            f"/market/products/{self.state.product_id}/approve",
            headers=MODERATOR,
            catch_response=True,
            name="PUT /market/products/{id}/approve",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "Approved"
            else:
                resp.failure(f"Approve failed: {resp.status_code}")
                self.interrupt()

    @task
    def comment(self):
        with self.client.post(
            f"/market/products/{self.state.product_id}/comments",
            json=comment_body(),
            headers=identity(self.buyer),
            catch_response=True,
            name="POST /market/products/{id}/comments",
        ) as resp:
            if resp.status_code == 201:
                self.state.comment_ids.append(resp.json()["comment_id"])
            else:
                resp.failure(f"Comment failed: {resp.status_code}")

    @task
    def record_purchase(self):
        with self.client.post(
            f"/market/products/{self.state.product_id}/buyers",
            json={"user_id": self.buyer},
            catch_response=True,
            name="POST /market/products/{id}/buyers",
        ) as resp:
            if resp.status_code == 201:
                self.state.buyer_ids.append(self.buyer)
            else:
                resp.failure(f"Record purchase failed: {resp.status_code}")

    @task
    def verify_purchase(self):
        with self.client.get(
            f"/market/products/{self.state.product_id}/verify/purchase",
            headers=identity(self.buyer),
            catch_response=True,
            name="GET /market/products/{id}/verify/purchase",
        ) as resp:
            if resp.status_code != 200 or resp.json()["verified"] is not True:
                resp.failure(f"Purchase not verified: {resp.status_code}")

    @task
    def react(self):
        with self.client.post(
            f"/market/products/{self.state.product_id}/reactions",
            json=reaction(),
            headers=identity(self.buyer),
            catch_response=True,
            name="POST /market/products/{id}/reactions",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"React failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class BrowsingJourney(SequentialTaskSet):
    """Page through a market and open a listing.

    Read-only; exercises the visibility filter for an ordinary user.
    """

    def on_start(self):
        self.viewer = identity(user_id("lt-viewer"))

    @task
    def list_market(self):
        market_id = random.choice([1, 2, 3, 4])
        with self.client.get(
            f"/market/{market_id}/products",
            params={"page": random.randint(0, 2)},
            headers=self.viewer,
            catch_response=True,
            name="GET /market/{market_id}/products",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List failed: {resp.status_code}")
                self.interrupt()
            self.listings = [p["product_id"] for p in resp.json()]

    @task
    def open_listing(self):
        if not self.listings:
            self.interrupt()
        with self.client.get(
            f"/market/products/{random.choice(self.listings)}",
            headers=self.viewer,
            catch_response=True,
            name="GET /market/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Open listing failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class ModerationQueueJourney(SequentialTaskSet):
    """A moderator drains part of the pending queue."""

    @task
    def review_queue(self):
        with self.client.get(
            "/market/products/pending",
            headers=MODERATOR,
            catch_response=True,
            name="GET /market/products/pending",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Queue failed: {resp.status_code}")
                self.interrupt()
            self.pending = [p["product_id"] for p in resp.json()][:5]

    @task
    def approve_some(self):
        for product_id in self.pending:
            self.client.put(
                f"/market/products/{product_id}/approve",
                headers=MODERATOR,
                name="PUT /market/products/{id}/approve",
            )
        self.interrupt()


class MarketUser(HttpUser):
    """Realistic mixed marketplace workload.

    Browsing dominates; listing journeys create write pressure and the
    moderation queue keeps pending listings from piling up.
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        BrowsingJourney: 6,
        ListingLifecycleJourney: 3,
        ModerationQueueJourney: 1,
    }
