"""CartItem aggregate — one row per (user, product) pair.

The row identity is derived from the pair, so repeated adds can only ever
update the same row, never create a second one.
"""

from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String

from storefront.domain import storefront
from storefront.shared.paging import scan


def cart_item_key(user_id, product_id) -> str:
    return f"{int(user_id)}_{int(product_id)}"


@storefront.aggregate
class CartItem:
    id: String(identifier=True, max_length=50)
    user_id: Integer(required=True)
    product_id: Integer(required=True)
    quantity: Integer(required=True, min_value=1)

    @classmethod
    def start(cls, user_id, product_id, quantity):
        return cls(
            id=cart_item_key(user_id, product_id),
            user_id=int(user_id),
            product_id=int(product_id),
            quantity=quantity,
        )

    def set_quantity(self, quantity):
        self.quantity = quantity


@storefront.repository(part_of=CartItem)
class CartItemRepository:
    def find(self, user_id, product_id) -> CartItem | None:
        try:
            return self.get(cart_item_key(user_id, product_id))
        except ObjectNotFoundError:
            return None

    def for_user(self, user_id) -> list[CartItem]:
        return scan(self._dao.query.filter(user_id=int(user_id)), order_by=None)

    def for_product(self, product_id) -> list[CartItem]:
        return scan(self._dao.query.filter(product_id=int(product_id)), order_by=None)

    def remove(self, item: CartItem) -> None:
        self._dao.delete(item)
