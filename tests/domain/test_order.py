"""Tests for the Order aggregate and shipping details."""

import json

import pytest
from storefront.ordering.events import OrderPlaced
from storefront.ordering.order import Order, OrderLine, OrderStatus, ShippingDetails
from storefront.shared.errors import InvalidInput

SHIPPING_FORM = {
    "shipping_name": "  Lan Nguyen ",
    "shipping_phone": "0901234567",
    "shipping_address": "12 Le Loi, District 1",
}


def _place(**overrides):
    values = {
        "order_id": 1,
        "user_id": 5,
        "shipping": ShippingDetails.from_form(SHIPPING_FORM),
        "purchases": [
            {"product_id": 10, "name": "iPhone 16 Pro", "quantity": 1, "price_at_purchase": 1299},
            {"product_id": 11, "name": "65W Fast Charger", "quantity": 2, "price_at_purchase": 39},
        ],
    }
    values.update(overrides)
    return Order.place(**values)


class TestShippingDetails:
    def test_from_form_trims_values(self):
        shipping = ShippingDetails.from_form(SHIPPING_FORM)
        assert shipping.name == "Lan Nguyen"

    @pytest.mark.parametrize("missing", ["shipping_name", "shipping_phone", "shipping_address"])
    def test_every_field_is_required(self, missing):
        form = {**SHIPPING_FORM, missing: "   "}
        with pytest.raises(InvalidInput) as exc:
            ShippingDetails.from_form(form)
        assert exc.value.reason == "Please fill all shipping fields."


class TestOrderPlacement:
    def test_total_is_sum_of_line_totals(self):
        order = _place()
        assert order.total_amount == 1299 + 2 * 39

    def test_status_is_pending(self):
        assert _place().status == OrderStatus.PENDING.value

    def test_lines_keep_purchase_order(self):
        order = _place()
        assert [line.product_id for line in order.lines] == [10, 11]

    def test_lines_are_snapshots(self):
        line = _place().lines[1]
        assert isinstance(line, OrderLine)
        assert line.snapshot() == {"product_id": 11, "name": "65W Fast Charger", "quantity": 2, "price_at_purchase": 39}
        assert line.line_total == 78

    def test_shipping_is_embedded_on_order(self):
        order = _place()
        assert order.shipping == ShippingDetails(name="Lan Nguyen", phone="0901234567", address="12 Le Loi, District 1")

    def test_lines_are_positioned_in_purchase_order(self):
        assert [line.position for line in _place().lines] == [0, 1]

    def test_raises_order_placed_event(self):
        order = _place()
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_id == 1
        assert event.total_amount == order.total_amount
        assert [item["name"] for item in json.loads(event.items)] == ["iPhone 16 Pro", "65W Fast Charger"]

    def test_payload_lists_items(self):
        payload = _place().to_payload()
        assert payload["status"] == "Pending"
        assert payload["items"][0]["price_at_purchase"] == 1299
