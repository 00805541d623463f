"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue by an administrator."""

    product_id = Integer(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    category = String(required=True, max_length=100, sanitize=False)
    price = Integer(required=True)
    stock = Integer(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    """An administrator changed one or more product fields."""

    product_id = Integer(required=True)
    changed_fields = Text(required=True, sanitize=False)  # JSON list of field names
    price = Integer(required=True)
    stock = Integer(required=True)
    updated_at = DateTime(required=True)
