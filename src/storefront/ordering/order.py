"""Order aggregate — the frozen result of a checkout.

Order lines are embedded snapshots (name and price at the moment of
purchase), not references to live products, so later catalogue edits or
deletions never change a placed order. Orders expose no mutators.
"""

import json
from datetime import datetime
from enum import Enum

from protean.fields import DateTime, HasMany, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.ordering.events import OrderPlaced
from storefront.shared.errors import InvalidInput
from storefront.shared.paging import scan


class OrderStatus(Enum):
    PENDING = "Pending"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingDetails:
    """Where and to whom the order ships, as entered at checkout."""

    name = String(required=True, max_length=255, sanitize=False)
    phone = String(required=True, max_length=50, sanitize=False)
    address = Text(required=True, sanitize=False)

    @classmethod
    def from_form(cls, shipping):
        """Build from a ``shipping_name``/``shipping_phone``/``shipping_address`` mapping."""
        name = str(shipping.get("shipping_name") or "").strip()
        phone = str(shipping.get("shipping_phone") or "").strip()
        address = str(shipping.get("shipping_address") or "").strip()

        if not name or not phone or not address:
            raise InvalidInput("Please fill all shipping fields.")

        return cls(name=name, phone=phone, address=address)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderLine:
    """One purchased product, priced as it was at checkout."""

    position = Integer(required=True, min_value=0)
    product_id = Integer(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    quantity = Integer(required=True, min_value=1)
    price_at_purchase = Integer(required=True, min_value=0)

    @property
    def line_total(self) -> int:
        return self.quantity * self.price_at_purchase

    def snapshot(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "price_at_purchase": self.price_at_purchase,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    id = Integer(identifier=True)
    user_id = Integer(required=True)
    total_amount = Integer(required=True, min_value=0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    shipping = ValueObject(ShippingDetails, required=True)
    items = HasMany(OrderLine)
    created_at = DateTime(default=datetime.now)

    @classmethod
    def place(cls, order_id, user_id, shipping: ShippingDetails, purchases):
        """Create a Pending order from ``purchases``, in cart order."""
        lines = [
            OrderLine(
                position=position,
                product_id=int(p["product_id"]),
                name=p["name"],
                quantity=int(p["quantity"]),
                price_at_purchase=int(p["price_at_purchase"]),
            )
            for position, p in enumerate(purchases)
        ]
        order = cls(
            id=order_id,
            user_id=user_id,
            total_amount=sum(line.line_total for line in lines),
            status=OrderStatus.PENDING.value,
            shipping=shipping,
            created_at=datetime.now(),
        )
        for line in lines:
            order.add_items(line)

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                user_id=order.user_id,
                items=json.dumps([line.snapshot() for line in lines]),
                total_amount=order.total_amount,
                placed_at=order.created_at,
            )
        )
        return order

    @property
    def lines(self) -> list[OrderLine]:
        """Order lines in the sequence they were purchased."""
        return sorted(self.items or [], key=lambda line: line.position)

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "total_amount": self.total_amount,
            "status": self.status,
            "shipping_name": self.shipping.name,
            "shipping_phone": self.shipping.phone,
            "shipping_address": self.shipping.address,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "items": [line.snapshot() for line in self.lines],
        }


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_user(self, user_id) -> list[Order]:
        """Newest first."""
        return scan(self._dao.query.filter(user_id=int(user_id)), order_by="-created_at")
