"""Catalogue browsing load: listing, searching and product detail views."""

import random

from locust import HttpUser, between, task

from loadtests.data_generators import search_params
from loadtests.helpers.response import extract_error_detail


class BrowsingUser(HttpUser):
    """Anonymous visitor reading the catalogue; never writes."""

    wait_time = between(0.5, 2)
    weight = 3

    def on_start(self):
        self.product_ids = []

    @task(3)
    def search(self):
        with self.client.get("/products", params=search_params(), catch_response=True, name="GET /products") as resp:
            if resp.status_code == 200:
                self.product_ids = [p["id"] for p in resp.json()] or self.product_ids
            else:
                resp.failure(f"List products failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task(2)
    def featured(self):
        self.client.get("/products/featured", name="GET /products/featured")

    @task(2)
    def product_detail(self):
        if not self.product_ids:
            return
        product_id = random.choice(self.product_ids)
        with self.client.get(f"/products/{product_id}", catch_response=True, name="GET /products/{id}") as resp:
            # Products may be deleted by admins mid-run.
            if resp.status_code == 404:
                resp.success()
                self.product_ids.remove(product_id)
