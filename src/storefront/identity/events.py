"""Domain events for the User aggregate."""

from protean.fields import Boolean, DateTime, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A new account was created, by sign-up, OAuth first login or seeding."""

    user_id = Integer(required=True)
    email = String(required=True, max_length=254, sanitize=False)
    is_admin = Boolean(default=False)
    registered_at = DateTime(required=True)
