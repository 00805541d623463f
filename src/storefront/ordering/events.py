"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Integer, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out into an order and its stock committed."""

    order_id = Integer(required=True)
    user_id = Integer(required=True)
    items = Text(required=True, sanitize=False)  # JSON: list of line snapshots
    total_amount = Integer(required=True)
    placed_at = DateTime(required=True)
