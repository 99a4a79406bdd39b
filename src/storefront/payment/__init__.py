"""Payment service factory.

Provides get_payment_service() / set_payment_service() to swap implementations.
The default service knows the simulated Stripe and PayPal providers.
"""

from storefront.payment.mock_strategies import PayPalPaymentStrategy, StripePaymentStrategy
from storefront.payment.service import PaymentService

_current_service: PaymentService | None = None


def get_payment_service() -> PaymentService:
    """Return the current payment service, building the default on first use."""
    global _current_service
    if _current_service is None:
        _current_service = PaymentService([StripePaymentStrategy(), PayPalPaymentStrategy()])
    return _current_service


def set_payment_service(service: PaymentService) -> None:
    """Override the active payment service (useful for tests)."""
    global _current_service
    _current_service = service


def reset_payment_service() -> None:
    """Reset to the default service."""
    global _current_service
    _current_service = None
