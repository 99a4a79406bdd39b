"""User aggregate: shop accounts, their roles and credential lifecycle."""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.fields import DateTime, List, String

from storefront.domain import storefront
from storefront.identity.events import (
    PasswordChanged,
    PasswordResetRequested,
    ProfileUpdated,
    UserRegistered,
)
from storefront.identity.passwords import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    hash_token,
    verify_password,
)
from storefront.shared.email import EmailAddress
from storefront.shared.errors import AuthErrors, UserErrors


class Role(Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"


ROLE_NAMES = frozenset(role.value for role in Role)


def _check_password_strength(password):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise UserErrors.WEAK_PASSWORD.to_exception()


def _check_names(first_name, last_name):
    if not first_name or not first_name.strip():
        raise UserErrors.EMPTY_FIRST_NAME.to_exception()
    if not last_name or not last_name.strip():
        raise UserErrors.EMPTY_LAST_NAME.to_exception()


@storefront.aggregate
class User:
    email = String(required=True, max_length=254, unique=True)
    password_hash = String(required=True, max_length=255)
    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    roles = List(String(max_length=20))
    password_reset_token = String(max_length=128)
    password_reset_expires_at = DateTime()
    created_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(cls, email, password, first_name, last_name, roles=None):
        """Open an account. Roles default to Customer only."""
        address = EmailAddress.normalized(email).address
        _check_names(first_name, last_name)
        _check_password_strength(password)

        roles = list(dict.fromkeys(roles or [Role.CUSTOMER.value]))
        for role in roles:
            if role not in ROLE_NAMES:
                raise UserErrors.invalid_role(role).to_exception()

        now = datetime.now(UTC)
        user = cls(
            email=address,
            password_hash=hash_password(password),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            roles=roles,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=address,
                roles=",".join(roles),
                registered_at=now,
            )
        )
        return user

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self):
        return self.has_role(Role.ADMIN.value)

    def has_role(self, role):
        return role in (self.roles or [])

    def check_password(self, password):
        return verify_password(password, self.password_hash)

    # -------------------------------------------------------------------
    # Profile & credentials
    # -------------------------------------------------------------------
    def update_profile(self, first_name, last_name):
        _check_names(first_name, last_name)

        self.first_name = first_name.strip()
        self.last_name = last_name.strip()

        self.raise_(
            ProfileUpdated(
                user_id=str(self.id),
                first_name=self.first_name,
                last_name=self.last_name,
            )
        )

    def change_password(self, current_password, new_password):
        if not self.check_password(current_password):
            raise AuthErrors.INVALID_CREDENTIALS.to_exception()
        self._set_password(new_password)

    def request_password_reset(self, token, ttl_minutes):
        """Remember a digest of ``token``; it stays valid for ``ttl_minutes``."""
        expires_at = datetime.now(UTC) + timedelta(minutes=ttl_minutes)
        self.password_reset_token = hash_token(token)
        self.password_reset_expires_at = expires_at

        self.raise_(PasswordResetRequested(user_id=str(self.id), expires_at=expires_at))

    def reset_password(self, token, new_password):
        if not self.password_reset_token or not token or hash_token(token) != self.password_reset_token:
            raise AuthErrors.INVALID_TOKEN.to_exception()

        expires_at = self.password_reset_expires_at
        if expires_at is None or _as_utc(expires_at) < datetime.now(UTC):
            raise AuthErrors.INVALID_TOKEN.to_exception()

        self._set_password(new_password)
        self.password_reset_token = None
        self.password_reset_expires_at = None

    def _set_password(self, new_password):
        _check_password_strength(new_password)
        self.password_hash = hash_password(new_password)
        self.raise_(PasswordChanged(user_id=str(self.id), changed_at=datetime.now(UTC)))


def _as_utc(value):
    # SQL drivers may hand back naive timestamps
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email):
        return self.query.filter(email=(email or "").strip().lower()).all().first

    def email_taken(self, email):
        return self.find_by_email(email) is not None
