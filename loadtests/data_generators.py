"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the API's pydantic request schemas and pass
the storefront's own input rules (non-empty shipping fields, passwords of at
least six characters).
"""

import random
import uuid

from faker import Faker

fake = Faker()

SEARCH_TERMS = ["iphone", "samsung", "pixel", "charger", "earbuds", "power bank", "dien thoai", "pro"]
CATEGORIES = ["Phone", "Accessory"]


def valid_email() -> str:
    local = fake.user_name()[:20]
    return f"{local}.{uuid.uuid4().hex[:6]}@{fake.free_email_domain()}"


def registration_data() -> dict:
    """Generate a RegisterRequest payload."""
    return {
        "name": fake.name()[:255],
        "email": valid_email(),
        "password": fake.password(length=10),
    }


def shipping_data() -> dict:
    """Generate a CheckoutRequest payload."""
    return {
        "shipping_name": fake.name()[:255],
        "shipping_phone": fake.numerify("09########"),
        "shipping_address": fake.address().replace("\n", ", "),
    }


def product_data(stock: int | None = None) -> dict:
    """Generate a ProductRequest payload for the admin endpoints."""
    word = fake.word().capitalize()
    return {
        "name": f"{word} {random.choice(['Phone', 'Charger', 'Case', 'Earbuds'])} {uuid.uuid4().hex[:4]}",
        "description": f"<p>{fake.sentence(nb_words=10)}</p>",
        "price": random.randint(10, 1500),
        "stock": random.randint(5, 200) if stock is None else stock,
        "category": random.choice(CATEGORIES),
        "image_url": fake.image_url(),
    }


def search_params() -> dict:
    params = {}
    if random.random() < 0.7:
        params["q"] = random.choice(SEARCH_TERMS)
    if random.random() < 0.3:
        params["category"] = random.choice(CATEGORIES)
    return params
