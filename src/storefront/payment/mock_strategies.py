"""Simulated payment providers.

No external calls are made. Both providers approve every charge unless told
otherwise through ``configure``, which makes them usable in development and
tests alike.
"""

from uuid import uuid4

import structlog

from storefront.payment.port import PaymentResult, PaymentStrategy

logger = structlog.get_logger(__name__)


class MockPaymentStrategy(PaymentStrategy):
    provider = "mock"
    reference_prefix = "mock_"

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def charge(self, amount: float, currency: str, reference: str) -> PaymentResult:
        self.calls.append({"amount": amount, "currency": currency, "reference": reference})

        if not self.should_succeed:
            logger.info("payment_declined", provider=self.provider, reference=reference, reason=self.failure_reason)
            return PaymentResult(success=False, failure_reason=self.failure_reason)

        transaction_id = f"{self.reference_prefix}{uuid4().hex[:24]}"
        logger.info("payment_approved", provider=self.provider, reference=reference, transaction_id=transaction_id)
        return PaymentResult(success=True, transaction_id=transaction_id)


class StripePaymentStrategy(MockPaymentStrategy):
    provider = "stripe"
    reference_prefix = "ch_"


class PayPalPaymentStrategy(MockPaymentStrategy):
    provider = "paypal"
    reference_prefix = "PAY-"
