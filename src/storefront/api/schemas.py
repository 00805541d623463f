"""Pydantic request/response schemas for the Storefront API.

External contracts only; domain rules (stock, non-empty fields) are
enforced by the domain so failures carry the storefront's own error tags.
An add-to-cart quantity below 1 is refused here with a 422.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# --- Error ---


class ErrorResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"error": "Insufficient stock for iPhone 16 Pro.", "code": "InsufficientStock"}]}}

    error: str
    code: str


# --- Products ---


class ProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "iPhone 16 Pro",
                    "description": "<p>Latest Apple flagship with advanced camera system.</p>",
                    "price": 1299,
                    "stock": 15,
                    "category": "Phone",
                    "image_url": "https://images.unsplash.com/photo-1592750475338-74b7b21085ab?w=1000",
                }
            ]
        }
    }

    name: str
    description: str
    price: int
    stock: int
    category: str
    image_url: str


class ProductUpdateRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"price": 1199, "stock": 12}]}}

    name: str | None = None
    description: str | None = None
    price: int | None = None
    stock: int | None = None
    category: str | None = None
    image_url: str | None = None


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: int
    image_url: str
    stock: int
    category: str
    created_at: datetime | None = None


class DeletedResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "deleted", "cart_lines_removed": 2}]}}

    status: str = "deleted"
    cart_lines_removed: int = 0


# --- Accounts ---


class RegisterRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"name": "Lan Nguyen", "email": "lan@example.com", "password": "secret1"}]}}

    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class OAuthLoginRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"id": "1234567890", "display_name": "Lan Nguyen", "emails": [{"value": "lan@example.com"}]}]
        }
    }

    id: str | None = None
    display_name: str | None = None
    emails: list = Field(default_factory=list)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    is_admin: bool = False


# --- Cart ---


class AddToCartRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": 1, "quantity": 2}]}}

    product_id: int
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"quantity": 3}]}}

    quantity: int


class CartLineResponse(BaseModel):
    product_id: int
    quantity: int
    name: str
    price: int
    image_url: str
    stock: int
    subtotal: int


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    total: int
    count: int


class CartQuantityResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": 1, "quantity": 2, "removed": False}]}}

    product_id: int
    quantity: int
    removed: bool = False


class CartCountResponse(BaseModel):
    count: int


# --- Orders ---


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_name": "Lan Nguyen",
                    "shipping_phone": "0901234567",
                    "shipping_address": "12 Le Loi, District 1, Ho Chi Minh City",
                }
            ]
        }
    }

    shipping_name: str = ""
    shipping_phone: str = ""
    shipping_address: str = ""


class OrderLineResponse(BaseModel):
    product_id: int
    name: str
    quantity: int
    price_at_purchase: int


class OrderResponse(BaseModel):
    id: int
    user_id: int
    total_amount: int
    status: str
    shipping_name: str
    shipping_phone: str
    shipping_address: str
    created_at: datetime | None = None
    items: list[OrderLineResponse]


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
