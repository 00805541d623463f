"""Checkout — converts a user's cart into an order in one unit of work.

Inside the transaction every cart line is re-validated against the product's
current stock before anything is written. Only when all lines pass are stock
decremented, the order written and cart lines deleted; any failure rolls the
whole unit of work back.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart_item import CartItem
from storefront.catalogue.product import Product
from storefront.counter.counter import next_id
from storefront.domain import logger, storefront
from storefront.ordering.order import Order, ShippingDetails
from storefront.shared.errors import EmptyCart, InsufficientStock, NotFound, StorefrontError
from storefront.shared.transaction import process


@storefront.command(part_of="Order")
class PlaceOrder:
    order_id: Integer(required=True)
    user_id: Integer(required=True)
    shipping_name: String(required=True, max_length=255, sanitize=False)
    shipping_phone: String(required=True, max_length=50, sanitize=False)
    shipping_address: Text(required=True, sanitize=False)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(CartItem)
        product_repo = current_domain.repository_for(Product)

        rows = cart_repo.for_user(command.user_id)
        if not rows:
            raise EmptyCart()

        checked = []
        for row in rows:
            try:
                product = product_repo.get(row.product_id)
            except ObjectNotFoundError:
                raise NotFound("Product not found in cart.") from None
            if row.quantity > product.stock:
                raise InsufficientStock(product.name)
            checked.append((row, product))

        order = Order.place(
            order_id=command.order_id,
            user_id=command.user_id,
            shipping=ShippingDetails(
                name=command.shipping_name,
                phone=command.shipping_phone,
                address=command.shipping_address,
            ),
            purchases=[
                {
                    "product_id": product.id,
                    "name": product.name,
                    "quantity": row.quantity,
                    "price_at_purchase": product.price,
                }
                for row, product in checked
            ],
        )
        for row, product in checked:
            product.withdraw(row.quantity)
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)
        for row, _ in checked:
            cart_repo.remove(row)

        logger.info(
            "order_placed",
            order_id=order.id,
            user_id=order.user_id,
            lines=len(checked),
            total_amount=order.total_amount,
        )
        return order.id


def place_order(user_id, shipping) -> Order:
    """Check out ``user_id``'s cart.

    Raises ``InvalidInput``, ``EmptyCart``, ``NotFound`` or
    ``InsufficientStock`` without changing anything; ``StoreUnavailable``
    when the store cannot commit.
    """
    details = ShippingDetails.from_form(shipping)

    if not current_domain.repository_for(CartItem).for_user(user_id):
        raise EmptyCart()

    # Minted outside the checkout transaction; a failed checkout leaves a gap.
    order_id = next_id("orders")
    try:
        process(
            PlaceOrder(
                order_id=order_id,
                user_id=int(user_id),
                shipping_name=details.name,
                shipping_phone=details.phone,
                shipping_address=details.address,
            )
        )
    except StorefrontError as exc:
        logger.info("checkout_rejected", user_id=user_id, order_id=order_id, code=exc.code, reason=exc.reason)
        raise

    return current_domain.repository_for(Order).get(order_id)


def list_orders_by_user(user_id) -> list[Order]:
    return current_domain.repository_for(Order).for_user(user_id)
