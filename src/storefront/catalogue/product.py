"""Product aggregate — the catalogue entry and the stock it holds.

``stock`` is the single shared resource contended by concurrent carts and
checkouts. It is only ever decremented by ``withdraw`` after the caller has
read it inside the same unit of work, never blindly.
"""

import json
from datetime import datetime

from protean.fields import DateTime, Integer, String, Text

from storefront.catalogue.events import ProductCreated, ProductDetailsUpdated
from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock, InvalidInput
from storefront.shared.paging import scan
from storefront.shared.text import plain_text_from_html

EDITABLE_FIELDS = ("name", "description", "price", "image_url", "stock", "category")


def validate_product_input(name, description, price, stock, category, image_url):
    """Enforce the admin input contract before anything is written.

    Returns the cleaned values; raises ``InvalidInput`` on any violation.
    """
    name = str(name or "").strip()
    description = str(description or "").strip()
    category = str(category or "").strip()
    image_url = str(image_url or "").strip()

    try:
        price = int(price)
        stock = int(stock)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid product input.") from None

    if not name or not plain_text_from_html(description) or not category or not image_url or price < 0 or stock < 0:
        raise InvalidInput("Invalid product input.")

    return {
        "name": name,
        "description": description,
        "price": price,
        "stock": stock,
        "category": category,
        "image_url": image_url,
    }


@storefront.aggregate
class Product:
    id: Integer(identifier=True)
    name: String(required=True, max_length=255, sanitize=False)
    description: Text(required=True, sanitize=False)
    plain_description: Text(sanitize=False)
    price: Integer(required=True, min_value=0)
    image_url: String(required=True, max_length=500, sanitize=False)
    stock: Integer(required=True, min_value=0, default=0)
    category: String(required=True, max_length=100, sanitize=False)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @classmethod
    def create(cls, product_id, name, description, price, image_url, stock, category, created_at=None):
        now = created_at or datetime.now()
        product = cls(
            id=product_id,
            name=name,
            description=description,
            plain_description=plain_text_from_html(description),
            price=price,
            image_url=image_url,
            stock=stock,
            category=category,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                category=product.category,
                price=product.price,
                stock=product.stock,
                created_at=product.created_at,
            )
        )
        return product

    def editable_values(self) -> dict:
        return {field: getattr(self, field) for field in EDITABLE_FIELDS}

    def update_details(self, **changes):
        """Merge ``changes`` into the product; untouched fields keep their values."""
        changed = [field for field in EDITABLE_FIELDS if field in changes and changes[field] != getattr(self, field)]
        if not changed:
            return changed

        for field in changed:
            setattr(self, field, changes[field])
        if "description" in changed:
            self.plain_description = plain_text_from_html(changes["description"])
        self.updated_at = datetime.now()

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                changed_fields=json.dumps(changed),
                price=self.price,
                stock=self.stock,
                updated_at=self.updated_at,
            )
        )
        return changed

    def withdraw(self, quantity):
        """Take ``quantity`` units out of stock for a committed purchase."""
        if quantity > self.stock:
            raise InsufficientStock(self.name)
        self.stock -= quantity
        self.updated_at = datetime.now()

    @property
    def matchable_description(self) -> str:
        return self.plain_description or plain_text_from_html(self.description)

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "image_url": self.image_url,
            "stock": self.stock,
            "category": self.category,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@storefront.repository(part_of=Product)
class ProductRepository:
    def all_products(self) -> list[Product]:
        return scan(self._dao.query)

    def by_category(self, category) -> list[Product]:
        return scan(self._dao.query.filter(category=category))

    def newest(self, limit) -> list[Product]:
        return self._dao.query.order_by("-created_at").limit(limit).all().items
