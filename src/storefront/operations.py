"""Storefront operations as seen by the presentation layer.

Each function returns an ``Outcome``. Business failures come back as tagged
failures (``NotFound``, ``InsufficientStock``, ``EmptyCart``, ``InvalidInput``);
``StoreUnavailable`` is raised, not returned.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.items import AddToCart, RemoveCartItem, UpdateCartItem
from storefront.cart.queries import get_cart_count as _cart_count
from storefront.cart.queries import get_cart_items as _cart_items
from storefront.catalogue.management import CreateProduct, DeleteProduct, UpdateProduct
from storefront.catalogue.product import Product, validate_product_input
from storefront.catalogue.search import search_products
from storefront.counter.counter import next_id
from storefront.domain import setting
from storefront.identity import accounts
from storefront.ordering import checkout
from storefront.shared.errors import NotFound
from storefront.shared.outcome import Outcome, attempt
from storefront.shared.transaction import process


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
def list_products(category=None, q=None) -> Outcome:
    return attempt(search_products, query=q, category=category)


def featured_products(limit=None) -> Outcome:
    limit = int(limit or setting("featured_limit", 6))
    return attempt(current_domain.repository_for(Product).newest, limit)


def _get_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(int(product_id))
    except (ObjectNotFoundError, TypeError, ValueError):
        raise NotFound("Product not found.") from None


def get_product(product_id) -> Outcome:
    return attempt(_get_product, product_id)


def _create_product(name, description, price, stock, category, image_url) -> Product:
    # Validated before an id is minted so rejected input burns no id.
    values = validate_product_input(
        name=name,
        description=description,
        price=price,
        stock=stock,
        category=category,
        image_url=image_url,
    )
    product_id = next_id("products")
    process(CreateProduct(product_id=product_id, **values))
    return _get_product(product_id)


def create_product(name, description, price, stock, category, image_url) -> Outcome:
    return attempt(
        _create_product,
        name=name,
        description=description,
        price=price,
        stock=stock,
        category=category,
        image_url=image_url,
    )


def _update_product(product_id, **changes) -> Product:
    process(UpdateProduct(product_id=product_id, **{k: v for k, v in changes.items() if v is not None}))
    return _get_product(product_id)


def update_product(product_id, **changes) -> Outcome:
    """Apply a partial update; ``changes`` uses the product field names."""
    return attempt(_update_product, product_id, **changes)


def delete_product(product_id) -> Outcome:
    return attempt(lambda: process(DeleteProduct(product_id=product_id)))


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
def get_cart_items(user_id) -> Outcome:
    return attempt(_cart_items, user_id)


def get_cart_count(user_id) -> Outcome:
    return attempt(_cart_count, user_id)


def add_to_cart(user_id, product_id, quantity=1) -> Outcome:
    return attempt(lambda: process(AddToCart(user_id=user_id, product_id=product_id, quantity=quantity)))


def update_cart_item(user_id, product_id, quantity) -> Outcome:
    """Set a line's quantity. ``removed`` is set when the line was deleted."""

    def _update():
        stored = process(UpdateCartItem(user_id=user_id, product_id=product_id, quantity=quantity))
        if not stored:
            return Outcome.success(0, removed=True)
        return Outcome.success(stored)

    return attempt(_update)


def remove_cart_item(user_id, product_id) -> Outcome:
    return attempt(lambda: process(RemoveCartItem(user_id=user_id, product_id=product_id)))


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
def place_order(user_id, shipping) -> Outcome:
    return attempt(checkout.place_order, user_id, shipping)


def list_orders(user_id) -> Outcome:
    return attempt(checkout.list_orders_by_user, user_id)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
def register_user(name, email, password) -> Outcome:
    return attempt(accounts.register_user, name, email, password)


def authenticate(email, password) -> Outcome:
    return attempt(accounts.authenticate, email, password)


def login_with_oauth(provider, profile) -> Outcome:
    return attempt(accounts.login_with_oauth_profile, provider, profile)
