"""Account creation: self-registration and admin-created users."""

from protean import handle
from protean.fields import List, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.shared.errors import UserErrors


@storefront.command(part_of="User")
class RegisterUser:
    email = String(required=True, max_length=254)
    password = String(required=True, max_length=128, sanitize=False)
    first_name = String(max_length=100)
    last_name = String(max_length=100)


@storefront.command(part_of="User")
class CreateUser:
    email = String(required=True, max_length=254)
    password = String(required=True, max_length=128, sanitize=False)
    first_name = String(max_length=100)
    last_name = String(max_length=100)
    roles = List(String(max_length=20))


@storefront.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        return self._open_account(command, roles=None)

    @handle(CreateUser)
    def create_user(self, command):
        return self._open_account(command, roles=command.roles)

    def _open_account(self, command, roles):
        repo = current_domain.repository_for(User)
        if repo.email_taken(command.email):
            raise UserErrors.DUPLICATE_EMAIL.to_exception()

        user = User.register(
            email=command.email,
            password=command.password,
            first_name=command.first_name,
            last_name=command.last_name,
            roles=roles,
        )
        repo.add(user)
        return str(user.id)
