"""FastAPI routes for the Storefront — products, accounts, carts and orders."""

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.exceptions import ObjectNotFoundError

from storefront import operations
from storefront.api.schemas import (
    AddToCartRequest,
    CartCountResponse,
    CartLineResponse,
    CartQuantityResponse,
    CartResponse,
    CheckoutRequest,
    DeletedResponse,
    LoginRequest,
    OAuthLoginRequest,
    OrderResponse,
    ProductRequest,
    ProductResponse,
    ProductUpdateRequest,
    RegisterRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UserResponse,
)
from storefront.cart.queries import cart_total
from storefront.identity.accounts import get_user
from storefront.shared.outcome import Outcome

HTTP_STATUS = {
    "NotFound": 404,
    "InsufficientStock": 409,
    "EmptyCart": 409,
    "InvalidInput": 400,
}


class OutcomeError(Exception):
    """A failed ``Outcome`` on its way to becoming an error response."""

    def __init__(self, outcome: Outcome):
        self.outcome = outcome
        self.status_code = HTTP_STATUS.get(outcome.error, 400)
        super().__init__(outcome.reason)


def unwrap(outcome: Outcome):
    if not outcome.ok:
        raise OutcomeError(outcome)
    return outcome.value


def _user_response(user) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email, is_admin=bool(user.is_admin))


async def require_admin(x_user_id: int | None = Header(default=None)):
    """Resolve ``X-User-Id`` to an administrator, or refuse the request."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Please sign in.")
    try:
        user = get_user(x_user_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=401, detail="Please sign in.") from None
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required.")
    return user


product_router = APIRouter(prefix="/products", tags=["products"])
user_router = APIRouter(prefix="/users", tags=["users"])
cart_router = APIRouter(prefix="/users/{user_id}/cart", tags=["cart"])
order_router = APIRouter(prefix="/users/{user_id}/orders", tags=["orders"])


# --- Product endpoints ---


@product_router.get("", response_model=list[ProductResponse])
async def list_products(q: str | None = None, category: str | None = None) -> list[ProductResponse]:
    products = unwrap(operations.list_products(category=category, q=q))
    return [ProductResponse(**p.to_payload()) for p in products]


@product_router.get("/featured", response_model=list[ProductResponse])
async def featured_products(limit: int | None = None) -> list[ProductResponse]:
    products = unwrap(operations.featured_products(limit))
    return [ProductResponse(**p.to_payload()) for p in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int) -> ProductResponse:
    product = unwrap(operations.get_product(product_id))
    return ProductResponse(**product.to_payload())


@product_router.post("", status_code=201, response_model=ProductResponse, dependencies=[Depends(require_admin)])
async def create_product(body: ProductRequest) -> ProductResponse:
    product = unwrap(operations.create_product(**body.model_dump()))
    return ProductResponse(**product.to_payload())


@product_router.put("/{product_id}", response_model=ProductResponse, dependencies=[Depends(require_admin)])
async def update_product(product_id: int, body: ProductUpdateRequest) -> ProductResponse:
    product = unwrap(operations.update_product(product_id, **body.model_dump(exclude_none=True)))
    return ProductResponse(**product.to_payload())


@product_router.delete("/{product_id}", response_model=DeletedResponse, dependencies=[Depends(require_admin)])
async def delete_product(product_id: int) -> DeletedResponse:
    removed = unwrap(operations.delete_product(product_id))
    return DeletedResponse(cart_lines_removed=removed or 0)


# --- Account endpoints ---


@user_router.post("/register", status_code=201, response_model=UserResponse)
async def register(body: RegisterRequest) -> UserResponse:
    user = unwrap(operations.register_user(body.name, body.email, body.password))
    return _user_response(user)


@user_router.post("/login", response_model=UserResponse)
async def login(body: LoginRequest) -> UserResponse:
    user = unwrap(operations.authenticate(body.email, body.password))
    return _user_response(user)


@user_router.post("/oauth/{provider}", response_model=UserResponse)
async def oauth_login(provider: str, body: OAuthLoginRequest) -> UserResponse:
    """Sign in with a profile already fetched from ``provider``."""
    user = unwrap(operations.login_with_oauth(provider, body.model_dump()))
    return _user_response(user)


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: int) -> CartResponse:
    lines = unwrap(operations.get_cart_items(user_id))
    return CartResponse(
        items=[CartLineResponse(**line.to_dict()) for line in lines],
        total=cart_total(lines),
        count=sum(line.quantity for line in lines),
    )


@cart_router.get("/count", response_model=CartCountResponse)
async def get_cart_count(user_id: int) -> CartCountResponse:
    return CartCountResponse(count=unwrap(operations.get_cart_count(user_id)))


@cart_router.post("", response_model=CartQuantityResponse)
async def add_to_cart(user_id: int, body: AddToCartRequest) -> CartQuantityResponse:
    quantity = unwrap(operations.add_to_cart(user_id, body.product_id, body.quantity))
    return CartQuantityResponse(product_id=body.product_id, quantity=quantity)


@cart_router.put("/{product_id}", response_model=CartQuantityResponse)
async def update_cart_item(user_id: int, product_id: int, body: UpdateCartItemRequest) -> CartQuantityResponse:
    outcome = operations.update_cart_item(user_id, product_id, body.quantity)
    quantity = unwrap(outcome)
    return CartQuantityResponse(product_id=product_id, quantity=quantity, removed=outcome.removed)


@cart_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_cart_item(user_id: int, product_id: int) -> StatusResponse:
    unwrap(operations.remove_cart_item(user_id, product_id))
    return StatusResponse()


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def checkout(user_id: int, body: CheckoutRequest) -> OrderResponse:
    order = unwrap(operations.place_order(user_id, body.model_dump()))
    return OrderResponse(**order.to_payload())


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(user_id: int) -> list[OrderResponse]:
    orders = unwrap(operations.list_orders(user_id))
    return [OrderResponse(**order.to_payload()) for order in orders]
