"""Storefront domain — catalogue, cart, checkout and customer accounts.

A single domain hosts every aggregate so that one unit of work can span
products, cart lines, orders and id counters at checkout.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")


def setting(name, default=None):
    """Read an application setting from the ``[custom]`` config section."""
    custom = storefront.config.get("custom") or {}
    return custom.get(name, default)
