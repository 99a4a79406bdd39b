"""Profile maintenance: names and password changes by the account owner."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class UpdateProfile:
    user_id = Identifier(required=True)
    first_name = String(max_length=100)
    last_name = String(max_length=100)


@storefront.command(part_of="User")
class ChangePassword:
    user_id = Identifier(required=True)
    current_password = String(required=True, max_length=128, sanitize=False)
    new_password = String(required=True, max_length=128, sanitize=False)


@storefront.command_handler(part_of=User)
class ProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.update_profile(command.first_name, command.last_name)
        repo.add(user)

    @handle(ChangePassword)
    def change_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_password(command.current_password, command.new_password)
        repo.add(user)
