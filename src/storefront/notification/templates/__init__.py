"""Email templates: each renders a subject/body dict from a context dict."""

from storefront.notification.templates.order_confirmation import OrderConfirmationTemplate
from storefront.notification.templates.password_reset import PasswordResetTemplate

__all__ = ["OrderConfirmationTemplate", "PasswordResetTemplate"]
