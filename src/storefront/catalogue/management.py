"""Admin product management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart_item import CartItem
from storefront.catalogue.product import Product, validate_product_input
from storefront.domain import logger, storefront
from storefront.shared.errors import NotFound


@storefront.command(part_of="Product")
class CreateProduct:
    product_id: Integer(required=True)
    name: String(required=True, max_length=255, sanitize=False)
    description: Text(required=True, sanitize=False)
    price: Integer(required=True)
    image_url: String(required=True, max_length=500, sanitize=False)
    stock: Integer(required=True)
    category: String(required=True, max_length=100, sanitize=False)


@storefront.command(part_of="Product")
class UpdateProduct:
    """Partial update: fields left unset keep their current values."""

    product_id: Integer(required=True)
    name: String(max_length=255, sanitize=False)
    description: Text(sanitize=False)
    price: Integer()
    image_url: String(max_length=500, sanitize=False)
    stock: Integer()
    category: String(max_length=100, sanitize=False)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Integer(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        values = validate_product_input(
            name=command.name,
            description=command.description,
            price=command.price,
            stock=command.stock,
            category=command.category,
            image_url=command.image_url,
        )
        product = Product.create(product_id=command.product_id, **values)
        current_domain.repository_for(Product).add(product)

        logger.info("product_created", product_id=product.id, category=product.category, stock=product.stock)
        return product.id

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            raise NotFound("Product not found.") from None

        merged = product.editable_values()
        for field in merged:
            value = getattr(command, field)
            # An empty image reference means "keep the current image".
            if value is None or (field == "image_url" and not value):
                continue
            merged[field] = value

        changed = product.update_details(**validate_product_input(**merged))
        repo.add(product)

        logger.info("product_updated", product_id=product.id, changed_fields=changed)
        return product.id

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        cart_repo = current_domain.repository_for(CartItem)

        # Cart lines go with the product; historical orders keep their snapshot.
        cart_lines = cart_repo.for_product(command.product_id)
        for line in cart_lines:
            cart_repo.remove(line)

        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            product = None
        if product is not None:
            repo._dao.delete(product)

        logger.info("product_deleted", product_id=command.product_id, cart_lines_removed=len(cart_lines))
        return len(cart_lines)
