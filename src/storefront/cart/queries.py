"""Cart read model: lines joined with live product data."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.cart_item import CartItem
from storefront.catalogue.product import Product


@dataclass(frozen=True)
class CartLine:
    """A cart row as displayed: current name, price and stock, not frozen ones."""

    product_id: int
    quantity: int
    name: str
    price: int
    image_url: str
    stock: int

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "name": self.name,
            "price": self.price,
            "image_url": self.image_url,
            "stock": self.stock,
            "subtotal": self.subtotal,
        }


def get_cart_items(user_id) -> list[CartLine]:
    rows = current_domain.repository_for(CartItem).for_user(user_id)
    product_repo = current_domain.repository_for(Product)

    lines = []
    for row in rows:
        try:
            product = product_repo.get(row.product_id)
        except ObjectNotFoundError:
            continue
        lines.append(
            CartLine(
                product_id=row.product_id,
                quantity=row.quantity,
                name=product.name,
                price=product.price,
                image_url=product.image_url,
                stock=product.stock,
            )
        )
    return lines


def get_cart_count(user_id) -> int:
    return sum(row.quantity for row in current_domain.repository_for(CartItem).for_user(user_id))


def cart_total(lines) -> int:
    return sum(line.subtotal for line in lines)
