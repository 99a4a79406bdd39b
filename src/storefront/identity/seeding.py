"""Development seed data."""

import structlog
from protean.utils.globals import current_domain

from storefront import config
from storefront.identity.user import Role, User

logger = structlog.get_logger(__name__)


def seed_admin(email=None, password=None):
    """Create the administrator account unless one with that email exists.

    Returns the user id of the (new or existing) admin.
    """
    email = email or config.SEED_ADMIN_EMAIL
    password = password or config.SEED_ADMIN_PASSWORD

    repo = current_domain.repository_for(User)
    existing = repo.find_by_email(email)
    if existing is not None:
        return str(existing.id)

    admin = User.register(
        email=email,
        password=password,
        first_name="Admin",
        last_name="User",
        roles=[Role.ADMIN.value, Role.CUSTOMER.value],
    )
    repo.add(admin)
    logger.info("admin_seeded", email=admin.email)
    return str(admin.id)
