"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across
users except the product ids discovered from the catalogue.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks a simulated shopper from sign-up to checkout."""

    user_id: int | None = None
    email: str | None = None
    product_ids: list[int] = field(default_factory=list)
    cart_lines: int = 0
    order_ids: list[int] = field(default_factory=list)
