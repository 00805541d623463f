"""User aggregate — storefront accounts and their credentials."""

from datetime import datetime

from protean.fields import Boolean, DateTime, Integer, String
from werkzeug.security import check_password_hash

from storefront.domain import storefront
from storefront.identity.events import UserRegistered


def normalize_email(email) -> str:
    return str(email or "").strip().lower()


@storefront.aggregate
class User:
    """A registered shopper or administrator.

    Email addresses are stored lower-cased, so lookups are case-insensitive,
    and are unique across accounts.
    """

    id: Integer(identifier=True)
    name: String(required=True, max_length=255, sanitize=False)
    email: String(required=True, max_length=254, unique=True, sanitize=False)
    password_hash: String(required=True, max_length=512)
    is_admin: Boolean(default=False)
    created_at: DateTime(default=datetime.now)

    @classmethod
    def register(cls, user_id, name, email, password_hash, is_admin=False):
        user = cls(
            id=user_id,
            name=name,
            email=normalize_email(email),
            password_hash=password_hash,
            is_admin=bool(is_admin),
            created_at=datetime.now(),
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                is_admin=user.is_admin,
                registered_at=user.created_at,
            )
        )
        return user

    def verify_password(self, password) -> bool:
        return check_password_hash(self.password_hash, password or "")


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email) -> User | None:
        return self._dao.query.filter(email=normalize_email(email)).all().first
