"""Cart and checkout load scenarios.

ShopperUser walks the full happy path. CheckoutContentionUser makes every
simulated shopper race for the same low-stock product, so most checkouts
must be refused with InsufficientStock while stock never goes negative.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import product_data, registration_data, shipping_data
from loadtests.helpers.response import error_code, extract_error_detail
from loadtests.helpers.state import ShopperState

ADMIN_CREDENTIALS = {"email": "admin@phonestore.com", "password": "admin123"}
EXPECTED_REFUSALS = {"InsufficientStock", "EmptyCart"}


def _register(client, state: ShopperState) -> bool:
    payload = registration_data()
    with client.post("/users/register", json=payload, catch_response=True, name="POST /users/register") as resp:
        if resp.status_code == 201:
            state.user_id = resp.json()["id"]
            state.email = payload["email"]
            return True
        resp.failure(f"Register failed: {resp.status_code} — {extract_error_detail(resp)}")
        return False


class ShopperJourney(SequentialTaskSet):
    """Register -> Browse -> Add 1-3 lines -> Adjust one -> Checkout -> History."""

    def on_start(self):
        self.state = ShopperState()
        if not _register(self.client, self.state):
            self.interrupt()

    @task
    def browse(self):
        resp = self.client.get("/products", name="GET /products")
        if resp.status_code == 200:
            self.state.product_ids = [p["id"] for p in resp.json() if p["stock"] > 0]
        if not self.state.product_ids:
            self.interrupt()

    @task
    def add_lines(self):
        for product_id in random.sample(self.state.product_ids, k=min(3, len(self.state.product_ids))):
            with self.client.post(
                f"/users/{self.state.user_id}/cart",
                json={"product_id": product_id, "quantity": random.randint(1, 2)},
                catch_response=True,
                name="POST /users/{id}/cart",
            ) as resp:
                if resp.status_code == 200:
                    self.state.cart_lines += 1
                elif error_code(resp) in EXPECTED_REFUSALS:
                    resp.success()

    @task
    def adjust_line(self):
        if not self.state.cart_lines:
            return
        product_id = random.choice(self.state.product_ids)
        self.client.put(
            f"/users/{self.state.user_id}/cart/{product_id}",
            json={"quantity": random.randint(0, 3)},
            name="PUT /users/{id}/cart/{product_id}",
        )

    @task
    def checkout(self):
        with self.client.post(
            f"/users/{self.state.user_id}/orders",
            json=shipping_data(),
            catch_response=True,
            name="POST /users/{id}/orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif error_code(resp) in EXPECTED_REFUSALS:
                resp.success()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def history(self):
        self.client.get(f"/users/{self.state.user_id}/orders", name="GET /users/{id}/orders")
        self.interrupt()


class ShopperUser(HttpUser):
    tasks = [ShopperJourney]
    wait_time = between(1, 3)
    weight = 2


class CheckoutContentionUser(HttpUser):
    """Every instance buys the same scarce product as fast as it can."""

    wait_time = between(0.1, 0.5)
    weight = 1
    scarce_product_id = None

    def on_start(self):
        self.state = ShopperState()
        if CheckoutContentionUser.scarce_product_id is None:
            CheckoutContentionUser.scarce_product_id = self._create_scarce_product()
        _register(self.client, self.state)

    def _create_scarce_product(self):
        admin = self.client.post("/users/login", json=ADMIN_CREDENTIALS, name="POST /users/login")
        if admin.status_code != 200:
            return None
        resp = self.client.post(
            "/products",
            json=product_data(stock=10),
            headers={"X-User-Id": str(admin.json()["id"])},
            name="POST /products",
        )
        return resp.json()["id"] if resp.status_code == 201 else None

    @task
    def grab_and_checkout(self):
        product_id = CheckoutContentionUser.scarce_product_id
        if product_id is None or self.state.user_id is None:
            return

        with self.client.post(
            f"/users/{self.state.user_id}/cart",
            json={"product_id": product_id, "quantity": 1},
            catch_response=True,
            name="POST /users/{id}/cart [contended]",
        ) as resp:
            if resp.status_code != 200:
                if error_code(resp) in EXPECTED_REFUSALS:
                    resp.success()
                return

        with self.client.post(
            f"/users/{self.state.user_id}/orders",
            json=shipping_data(),
            catch_response=True,
            name="POST /users/{id}/orders [contended]",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif error_code(resp) in EXPECTED_REFUSALS:
                resp.success()
            else:
                resp.failure(f"Contended checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
