"""Credential checks for login."""

import structlog
from protean.utils.globals import current_domain

from storefront.identity.user import User
from storefront.shared.errors import AuthErrors

logger = structlog.get_logger(__name__)


def authenticate(email, password):
    """Return the user owning ``email`` if ``password`` matches.

    Unknown emails and wrong passwords fail identically so the response does
    not reveal which accounts exist.
    """
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None or not user.check_password(password):
        logger.info("login_rejected", email=(email or "").strip().lower())
        raise AuthErrors.INVALID_CREDENTIALS.to_exception()

    logger.info("login_succeeded", user_id=str(user.id))
    return user
