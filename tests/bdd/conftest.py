"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront import operations
from storefront.catalogue.product import Product


@pytest.fixture()
def shipping():
    return {
        "shipping_name": "Lan Nguyen",
        "shipping_phone": "0901234567",
        "shipping_address": "12 Le Loi, District 1",
    }


@pytest.fixture()
def shop():
    """Scenario state: named products and shoppers, and the last outcome."""
    return {"products": {}, "shoppers": {}, "outcome": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:d} with {stock:d} in stock'))
def _(shop, make_product, name, price, stock):
    shop["products"][name] = make_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('a shopper "{shopper}"'))
def _(shop, make_user, shopper):
    shop["shoppers"][shopper] = make_user(name=shopper, email=f"{shopper.lower()}@example.com")


@given(parsers.cfparse('"{shopper}" has {quantity:d} of "{name}" in the cart'))
def _(shop, shopper, quantity, name):
    outcome = operations.add_to_cart(shop["shoppers"][shopper].id, shop["products"][name].id, quantity)
    assert outcome.ok, outcome.reason


@given(parsers.cfparse('the stock of "{name}" is changed to {stock:d}'))
def _(shop, name, stock):
    assert operations.update_product(shop["products"][name].id, stock=stock).ok


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(shop, name, stock):
    assert current_domain.repository_for(Product).get(shop["products"][name].id).stock == stock


@then(parsers.cfparse('the operation fails with "{code}"'))
def _(shop, code):
    assert shop["outcome"].ok is False
    assert shop["outcome"].error == code


@then(parsers.cfparse('the failure reason is "{reason}"'))
def _(shop, reason):
    assert shop["outcome"].reason == reason


@then(parsers.cfparse('the cart of "{shopper}" holds {count:d} items'))
def _(shop, shopper, count):
    assert operations.get_cart_count(shop["shoppers"][shopper].id).value == count
