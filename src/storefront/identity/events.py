"""Domain events raised by the User aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A new account was opened, either by self-registration or by an admin."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True, max_length=254)
    roles = String(max_length=255)
    registered_at = DateTime(required=True)


@storefront.event(part_of="User")
class ProfileUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    first_name = String(max_length=100)
    last_name = String(max_length=100)


@storefront.event(part_of="User")
class PasswordResetRequested:
    """A reset token was issued; the token itself never leaves the aggregate."""

    __version__ = 1

    user_id = Identifier(required=True)
    expires_at = DateTime(required=True)


@storefront.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    changed_at = DateTime(required=True)
