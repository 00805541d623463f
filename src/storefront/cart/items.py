"""Cart line management — commands and handler.

Every mutation re-reads the product's stock inside its unit of work and clamps
the line quantity to it.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer
from protean.utils.globals import current_domain

from storefront.cart.cart_item import CartItem
from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.shared.errors import InsufficientStock, NotFound


@storefront.command(part_of="CartItem")
class AddToCart:
    user_id: Integer(required=True)
    product_id: Integer(required=True)
    quantity: Integer(required=True, min_value=1)


@storefront.command(part_of="CartItem")
class UpdateCartItem:
    user_id: Integer(required=True)
    product_id: Integer(required=True)
    quantity: Integer(required=True)


@storefront.command(part_of="CartItem")
class RemoveCartItem:
    user_id: Integer(required=True)
    product_id: Integer(required=True)


def _current_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFound("Product not found.") from None


@storefront.command_handler(part_of=CartItem)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = _current_product(command.product_id)

        # Checked against total stock, not what is left after this cart line.
        if product.stock < command.quantity:
            raise InsufficientStock(product.name)

        repo = current_domain.repository_for(CartItem)
        item = repo.find(command.user_id, command.product_id)
        current = item.quantity if item else 0
        new_quantity = min(current + command.quantity, product.stock)

        if item is None:
            item = CartItem.start(command.user_id, command.product_id, new_quantity)
        else:
            item.set_quantity(new_quantity)
        repo.add(item)

        logger.info(
            "cart_item_added",
            user_id=command.user_id,
            product_id=command.product_id,
            requested=command.quantity,
            quantity=new_quantity,
        )
        return new_quantity

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        """Returns the stored quantity, or 0 when the line was removed."""
        repo = current_domain.repository_for(CartItem)
        item = repo.find(command.user_id, command.product_id)

        if command.quantity <= 0:
            if item is not None:
                repo.remove(item)
            logger.info("cart_item_removed", user_id=command.user_id, product_id=command.product_id)
            return 0

        product = _current_product(command.product_id)
        new_quantity = min(command.quantity, product.stock)

        # A sold-out product cannot hold a positive line.
        if new_quantity <= 0:
            if item is not None:
                repo.remove(item)
            logger.info("cart_item_removed", user_id=command.user_id, product_id=command.product_id, reason="sold_out")
            return 0

        if item is None:
            item = CartItem.start(command.user_id, command.product_id, new_quantity)
        else:
            item.set_quantity(new_quantity)
        repo.add(item)

        logger.info(
            "cart_item_updated",
            user_id=command.user_id,
            product_id=command.product_id,
            requested=command.quantity,
            quantity=new_quantity,
        )
        return new_quantity

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(CartItem)
        item = repo.find(command.user_id, command.product_id)
        if item is not None:
            repo.remove(item)
            logger.info("cart_item_removed", user_id=command.user_id, product_id=command.product_id)
