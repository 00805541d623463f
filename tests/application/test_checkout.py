"""Application tests for checkout: cart to order in one unit of work."""

from protean import current_domain
from storefront import operations
from storefront.cart.cart_item import CartItem
from storefront.catalogue.product import Product
from storefront.ordering.order import Order

SHIPPING = {
    "shipping_name": "Lan Nguyen",
    "shipping_phone": "0901234567",
    "shipping_address": "12 Le Loi, District 1",
}


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


def _orders():
    return current_domain.repository_for(Order)._dao.query.all().items


def _serve_stale_product_once(monkeypatch, stale):
    """Make the next product read return ``stale``; later reads hit the store."""
    repo_cls = type(current_domain.repository_for(Product))
    real_get = repo_cls.get
    reads = []

    def get(self, identifier):
        reads.append(identifier)
        if len(reads) == 1:
            return stale
        return real_get(self, identifier)

    monkeypatch.setattr(repo_cls, "get", get)
    return reads


class TestPlaceOrder:
    def test_checkout_converts_cart_into_order(self, make_product, make_user):
        user = make_user()
        product = make_product(name="Phone", price=100, stock=5)
        operations.add_to_cart(user.id, product.id, 2)

        outcome = operations.place_order(user.id, SHIPPING)

        assert outcome.ok
        order = outcome.value
        assert order.total_amount == 200
        assert order.status == "Pending"
        assert [(line.name, line.quantity, line.price_at_purchase) for line in order.lines] == [("Phone", 2, 100)]
        assert _stock(product.id) == 3
        assert operations.get_cart_count(user.id).value == 0

    def test_multi_line_total(self, make_product, make_user):
        user = make_user()
        phone = make_product(price=1299, stock=15)
        charger = make_product(price=39, stock=100)
        operations.add_to_cart(user.id, phone.id, 1)
        operations.add_to_cart(user.id, charger.id, 3)

        order = operations.place_order(user.id, SHIPPING).value

        assert order.total_amount == 1299 + 3 * 39
        assert _stock(phone.id) == 14
        assert _stock(charger.id) == 97

    def test_order_ids_come_from_the_counter(self, make_product, make_user):
        user = make_user()
        product = make_product(stock=10)

        operations.add_to_cart(user.id, product.id, 1)
        first = operations.place_order(user.id, SHIPPING).value
        operations.add_to_cart(user.id, product.id, 1)
        second = operations.place_order(user.id, SHIPPING).value

        assert (first.id, second.id) == (1, 2)

    def test_empty_cart(self, make_user):
        user = make_user()
        outcome = operations.place_order(user.id, SHIPPING)

        assert outcome.error == "EmptyCart"
        assert outcome.reason == "Your cart is empty."
        assert _orders() == []

    def test_missing_shipping_fields(self, make_product, make_user):
        user = make_user()
        product = make_product(stock=5)
        operations.add_to_cart(user.id, product.id, 1)

        outcome = operations.place_order(user.id, {**SHIPPING, "shipping_phone": ""})

        assert outcome.error == "InvalidInput"
        assert outcome.reason == "Please fill all shipping fields."
        assert _stock(product.id) == 5
        assert operations.get_cart_count(user.id).value == 1


class TestCheckoutAtomicity:
    def test_one_short_line_blocks_the_whole_order(self, make_product, make_user):
        user = make_user()
        plenty = make_product(name="Charger", stock=50)
        scarce = make_product(name="Pixel", stock=5)
        operations.add_to_cart(user.id, plenty.id, 4)
        operations.add_to_cart(user.id, scarce.id, 3)
        operations.update_product(scarce.id, stock=2)

        outcome = operations.place_order(user.id, SHIPPING)

        assert outcome.error == "InsufficientStock"
        assert outcome.reason == "Insufficient stock for Pixel."
        assert _stock(plenty.id) == 50
        assert _stock(scarce.id) == 2
        assert operations.get_cart_count(user.id).value == 7
        assert _orders() == []

    def test_vanished_product_blocks_the_order(self, make_product, make_user):
        user = make_user()
        kept = make_product(stock=5)
        gone = make_product(stock=5)
        operations.add_to_cart(user.id, kept.id, 1)
        operations.add_to_cart(user.id, gone.id, 1)

        repo = current_domain.repository_for(Product)
        repo._dao.delete(repo.get(gone.id))

        outcome = operations.place_order(user.id, SHIPPING)

        assert outcome.error == "NotFound"
        assert _stock(kept.id) == 5
        assert len(current_domain.repository_for(CartItem).for_user(user.id)) == 2

    def test_failed_checkout_leaves_a_gap_in_order_ids(self, make_product, make_user):
        user = make_user()
        product = make_product(stock=5)
        operations.add_to_cart(user.id, product.id, 5)
        operations.update_product(product.id, stock=1)
        assert operations.place_order(user.id, SHIPPING).error == "InsufficientStock"

        operations.update_cart_item(user.id, product.id, 1)
        order = operations.place_order(user.id, SHIPPING).value
        assert order.id == 2


class TestCompetingCheckouts:
    def test_second_checkout_sees_the_first_ones_stock(self, make_product, make_user):
        alice, bob = make_user(), make_user()
        product = make_product(name="Pixel", stock=5)
        operations.add_to_cart(alice.id, product.id, 3)
        operations.add_to_cart(bob.id, product.id, 3)

        first = operations.place_order(alice.id, SHIPPING)
        second = operations.place_order(bob.id, SHIPPING)

        assert first.ok
        assert second.error == "InsufficientStock"
        assert _stock(product.id) == 2
        assert operations.get_cart_count(bob.id).value == 3
        assert len(_orders()) == 1

    def test_stock_never_goes_negative(self, make_product, make_user):
        product = make_product(stock=4)
        shoppers = [make_user() for _ in range(3)]
        for shopper in shoppers:
            operations.add_to_cart(shopper.id, product.id, 2)

        results = [operations.place_order(shopper.id, SHIPPING) for shopper in shoppers]

        assert [r.ok for r in results] == [True, True, False]
        assert _stock(product.id) == 0


class TestVersionConflicts:
    def test_checkout_retries_after_a_competing_commit(self, make_product, make_user, monkeypatch):
        alice, bob = make_user(), make_user()
        product = make_product(name="Pixel", stock=5)
        operations.add_to_cart(alice.id, product.id, 3)
        operations.add_to_cart(bob.id, product.id, 3)

        # Bob's checkout reads the product before Alice's commit lands.
        stale = current_domain.repository_for(Product).get(product.id)
        assert operations.place_order(alice.id, SHIPPING).ok
        reads = _serve_stale_product_once(monkeypatch, stale)

        outcome = operations.place_order(bob.id, SHIPPING)

        assert len(reads) == 2
        assert outcome.error == "InsufficientStock"
        assert outcome.reason == "Insufficient stock for Pixel."
        monkeypatch.undo()
        assert _stock(product.id) == 2
        assert operations.get_cart_count(bob.id).value == 3
        assert [order.user_id for order in _orders()] == [alice.id]

    def test_retry_commits_when_stock_still_suffices(self, make_product, make_user, monkeypatch):
        alice, bob = make_user(), make_user()
        product = make_product(name="Pixel", stock=5)
        operations.add_to_cart(alice.id, product.id, 2)
        operations.add_to_cart(bob.id, product.id, 2)

        stale = current_domain.repository_for(Product).get(product.id)
        assert operations.place_order(alice.id, SHIPPING).ok
        reads = _serve_stale_product_once(monkeypatch, stale)

        outcome = operations.place_order(bob.id, SHIPPING)

        assert len(reads) == 2
        assert outcome.ok
        monkeypatch.undo()
        assert _stock(product.id) == 1
        assert len(_orders()) == 2


class TestOrderSnapshots:
    def test_orders_ignore_later_catalogue_edits(self, make_product, make_user):
        user = make_user()
        product = make_product(name="Pixel", price=999, stock=5)
        operations.add_to_cart(user.id, product.id, 1)
        order = operations.place_order(user.id, SHIPPING).value

        operations.update_product(product.id, name="Pixel (old)", price=499)
        operations.delete_product(product.id)

        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.total_amount == 999
        assert [(line.name, line.price_at_purchase) for line in stored.lines] == [("Pixel", 999)]

    def test_stored_order_embeds_lines_and_shipping(self, make_product, make_user):
        user = make_user()
        phone = make_product(name="Pixel", price=999, stock=5)
        charger = make_product(name="Charger", price=39, stock=50)
        operations.add_to_cart(user.id, phone.id, 1)
        operations.add_to_cart(user.id, charger.id, 2)
        order = operations.place_order(user.id, SHIPPING).value

        stored = current_domain.repository_for(Order).get(order.id)
        assert [line.snapshot() for line in stored.lines] == [
            {"product_id": phone.id, "name": "Pixel", "quantity": 1, "price_at_purchase": 999},
            {"product_id": charger.id, "name": "Charger", "quantity": 2, "price_at_purchase": 39},
        ]
        assert stored.shipping.name == "Lan Nguyen"
        assert stored.shipping.address == "12 Le Loi, District 1"
        assert stored.to_payload()["shipping_phone"] == "0901234567"


class TestOrderHistory:
    def test_orders_listed_newest_first(self, make_product, make_user):
        user = make_user()
        product = make_product(stock=10)
        for _ in range(3):
            operations.add_to_cart(user.id, product.id, 1)
            operations.place_order(user.id, SHIPPING)

        assert [order.id for order in operations.list_orders(user.id).value] == [3, 2, 1]

    def test_history_is_per_user(self, make_product, make_user):
        alice, bob = make_user(), make_user()
        product = make_product(stock=10)
        operations.add_to_cart(alice.id, product.id, 1)
        operations.place_order(alice.id, SHIPPING)

        assert operations.list_orders(bob.id).value == []
        assert len(operations.list_orders(alice.id).value) == 1
