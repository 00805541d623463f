"""Store bootstrap: id counters, the administrator account and a demo catalogue."""

from protean.utils.globals import current_domain
from werkzeug.security import generate_password_hash

from storefront.catalogue.management import CreateProduct
from storefront.catalogue.product import Product
from storefront.counter.counter import ensure_counters, next_id
from storefront.domain import logger, setting
from storefront.identity.accounts import create_user, find_user_by_email
from storefront.shared.transaction import process

DEMO_PRODUCTS = [
    {
        "name": "iPhone 16 Pro",
        "description": "Latest Apple flagship with advanced camera system.",
        "price": 1299,
        "image_url": "https://images.unsplash.com/photo-1592750475338-74b7b21085ab?w=1000",
        "stock": 15,
        "category": "Phone",
    },
    {
        "name": "Samsung Galaxy S26",
        "description": "Premium Android phone with dynamic AMOLED display.",
        "price": 1199,
        "image_url": "https://images.unsplash.com/photo-1610945415295-d9bbf067e59c?w=1000",
        "stock": 20,
        "category": "Phone",
    },
    {
        "name": "Google Pixel 11",
        "description": "Pure Android experience with top AI camera features.",
        "price": 999,
        "image_url": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=1000",
        "stock": 12,
        "category": "Phone",
    },
    {
        "name": "65W Fast Charger",
        "description": "Universal USB-C fast charger for phones and tablets.",
        "price": 39,
        "image_url": "https://images.unsplash.com/photo-1583863788434-e58a36330cf0?w=1000",
        "stock": 100,
        "category": "Accessory",
    },
    {
        "name": "Wireless Earbuds Pro",
        "description": "Noise-cancelling earbuds with long battery life.",
        "price": 149,
        "image_url": "https://images.unsplash.com/photo-1590658268037-6bf12165a8df?w=1000",
        "stock": 45,
        "category": "Accessory",
    },
    {
        "name": "MagSafe Power Bank",
        "description": "Portable magnetic power bank for modern smartphones.",
        "price": 79,
        "image_url": "https://images.unsplash.com/photo-1609592424708-0d3cb52b62b4?w=1000",
        "stock": 30,
        "category": "Accessory",
    },
]


def ensure_admin():
    email = setting("admin_email", "admin@phonestore.com")
    admin = find_user_by_email(email)
    if admin is not None:
        return admin

    admin = create_user(
        name=setting("admin_name", "Store Admin"),
        email=email,
        password_hash=generate_password_hash(setting("admin_password", "admin123")),
        is_admin=True,
    )
    logger.info("admin_created", user_id=admin.id, email=admin.email)
    return admin


def seed_demo_catalogue() -> int:
    """Add the demo products if the catalogue is empty. Returns how many were added."""
    if current_domain.repository_for(Product).newest(1):
        return 0

    for values in DEMO_PRODUCTS:
        process(CreateProduct(product_id=next_id("products"), **values))

    logger.info("demo_catalogue_seeded", products=len(DEMO_PRODUCTS))
    return len(DEMO_PRODUCTS)


def initialise_store(with_demo_catalogue=None):
    """Idempotent: safe to run on every start."""
    if with_demo_catalogue is None:
        with_demo_catalogue = bool(setting("seed_demo_catalogue", True))

    ensure_counters()
    ensure_admin()
    if with_demo_catalogue:
        seed_demo_catalogue()
