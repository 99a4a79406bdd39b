"""Password recovery: forgot-password tokens and resets."""

import secrets

import structlog
from protean import handle
from protean.exceptions import SendError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront import config
from storefront.domain import storefront
from storefront.identity.user import User
from storefront.notification import get_mailer
from storefront.notification.templates import PasswordResetTemplate
from storefront.shared.errors import AuthErrors

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class ForgotPassword:
    email = String(required=True, max_length=254)


@storefront.command(part_of="User")
class ResetPassword:
    email = String(required=True, max_length=254)
    token = String(required=True, max_length=128, sanitize=False)
    new_password = String(required=True, max_length=128, sanitize=False)


@storefront.command_handler(part_of=User)
class PasswordRecoveryHandler:
    @handle(ForgotPassword)
    def forgot_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)
        if user is None:
            # Same outcome as a known address; nothing to send.
            logger.info("password_reset_unknown_email")
            return

        token = secrets.token_urlsafe(32)
        user.request_password_reset(token, config.PASSWORD_RESET_TTL_MINUTES)
        repo.add(user)

        content = PasswordResetTemplate.render({"token": token, "ttl_minutes": config.PASSWORD_RESET_TTL_MINUTES})
        try:
            get_mailer().send(to=user.email, subject=content["subject"], body=content["body"])
        except SendError:
            # The token stays valid, so asking again once mail is back works.
            logger.exception("password_reset_email_failed", user_id=str(user.id))
            return
        logger.info("password_reset_requested", user_id=str(user.id))

    @handle(ResetPassword)
    def reset_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)
        if user is None:
            raise AuthErrors.INVALID_REQUEST.to_exception()

        user.reset_password(command.token, command.new_password)
        repo.add(user)
        logger.info("password_reset_completed", user_id=str(user.id))
