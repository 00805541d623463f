"""Failure taxonomy for storefront operations.

Business failures (``NotFound``, ``InsufficientStock``, ``EmptyCart``,
``InvalidInput``) are raised inside command handlers so the unit of work rolls
back, and are turned into tagged ``Outcome`` failures at the operations
boundary. ``StoreUnavailable`` is transient and always propagates.
"""


class StorefrontError(Exception):
    code = "StorefrontError"
    default_reason = "Operation failed."

    def __init__(self, reason=None):
        self.reason = reason or self.default_reason
        super().__init__(self.reason)


class NotFound(StorefrontError):
    code = "NotFound"
    default_reason = "Not found."


class InsufficientStock(StorefrontError):
    code = "InsufficientStock"
    default_reason = "Not enough stock available."

    def __init__(self, product_name=None, reason=None):
        self.product_name = product_name
        if reason is None and product_name:
            reason = f"Insufficient stock for {product_name}."
        super().__init__(reason)


class EmptyCart(StorefrontError):
    code = "EmptyCart"
    default_reason = "Your cart is empty."


class InvalidInput(StorefrontError):
    code = "InvalidInput"
    default_reason = "Invalid input."


class StoreUnavailable(StorefrontError):
    """The store could not complete a transaction. Safe to retry."""

    code = "StoreUnavailable"
    default_reason = "The store is temporarily unavailable. Please try again."
