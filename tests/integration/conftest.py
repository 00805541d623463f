import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    from storefront.api import cart_router, order_router, product_router, register_error_handlers, user_router
    from storefront.domain import storefront

    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with storefront.domain_context():
            return await call_next(request)

    app.include_router(product_router)
    app.include_router(user_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def admin():
    from storefront.seed import ensure_admin

    return ensure_admin()


@pytest.fixture()
def admin_headers(admin):
    return {"X-User-Id": str(admin.id)}
