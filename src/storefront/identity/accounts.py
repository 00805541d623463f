"""Account operations: lookup, sign-up, password login and OAuth login.

Password hashing is delegated to werkzeug; OAuth handshakes happen outside the
storefront, which only receives the provider's profile.
"""

import secrets

from protean.utils.globals import current_domain
from werkzeug.security import generate_password_hash

from storefront.counter.counter import next_id
from storefront.domain import logger
from storefront.identity.registration import RegisterUser
from storefront.identity.user import User, normalize_email
from storefront.shared.errors import InvalidInput
from storefront.shared.transaction import process

MIN_PASSWORD_LENGTH = 6


def find_user_by_email(email) -> User | None:
    return current_domain.repository_for(User).find_by_email(email)


def get_user(user_id) -> User:
    return current_domain.repository_for(User).get(int(user_id))


def create_user(name, email, password_hash, is_admin=False) -> User:
    """Persist a new user with a freshly minted id."""
    user_id = next_id("users")
    process(
        RegisterUser(
            user_id=user_id,
            name=name,
            email=normalize_email(email),
            password_hash=password_hash,
            is_admin=is_admin,
        )
    )
    return get_user(user_id)


def register_user(name, email, password) -> User:
    name = str(name or "").strip()
    email = normalize_email(email)
    password = password or ""

    if not name or not email or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Invalid input. Password must be at least {MIN_PASSWORD_LENGTH} characters.")

    # Checked again inside the registration transaction, and backed by a
    # unique constraint on the email field.
    if find_user_by_email(email) is not None:
        raise InvalidInput("Email already in use.")

    return create_user(name, email, generate_password_hash(password))


def authenticate(email, password) -> User:
    user = find_user_by_email(email)
    if user is None or not user.verify_password(password):
        logger.info("login_rejected", email=normalize_email(email))
        raise InvalidInput("Invalid email or password.")
    return user


def _profile_email(profile) -> str:
    emails = profile.get("emails") or []
    if not emails:
        return ""
    first = emails[0]
    value = first.get("value") if isinstance(first, dict) else first
    return normalize_email(value)


def login_with_oauth_profile(provider, profile) -> User:
    """Resolve (or create on first login) the user behind an OAuth profile.

    ``profile`` is the provider payload: ``id``, ``display_name`` and a list of
    ``emails`` (strings or ``{"value": ...}`` mappings).
    """
    email = _profile_email(profile)
    if not email:
        raise InvalidInput(f"Cannot login with {provider}: no email returned by provider.")

    user = find_user_by_email(email)
    if user is not None:
        return user

    name = str(profile.get("display_name") or email.split("@")[0] or "User").strip()
    # Unusable password: the account can only sign in through the provider.
    password_hash = generate_password_hash(f"oauth:{provider}:{profile.get('id')}:{secrets.token_hex(16)}")
    user = create_user(name, email, password_hash)
    logger.info("oauth_user_created", provider=provider, user_id=user.id)
    return user
