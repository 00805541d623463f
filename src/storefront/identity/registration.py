"""User registration — command and handler."""

from protean import handle
from protean.fields import Boolean, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.identity.user import User
from storefront.shared.errors import InvalidInput


@storefront.command(part_of="User")
class RegisterUser:
    user_id: Integer(required=True)
    name: String(required=True, max_length=255, sanitize=False)
    email: String(required=True, max_length=254, sanitize=False)
    password_hash: String(required=True, max_length=512)
    is_admin: Boolean(default=False)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise InvalidInput("Email already in use.")

        user = User.register(
            user_id=command.user_id,
            name=command.name,
            email=command.email,
            password_hash=command.password_hash,
            is_admin=command.is_admin,
        )
        repo.add(user)

        logger.info("user_registered", user_id=user.id, is_admin=user.is_admin)
        return user.id
