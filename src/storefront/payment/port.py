"""Payment strategy port (abstract interface).

Every provider the storefront can charge through implements this contract.
Checkout only sees ``PaymentService``; the strategies behind it are swappable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of a charge attempt."""

    success: bool
    transaction_id: str | None = None
    failure_reason: str | None = None


class PaymentStrategy(ABC):
    """A single payment provider."""

    provider: str

    @abstractmethod
    def charge(self, amount: float, currency: str, reference: str) -> PaymentResult:
        """Charge ``amount`` in ``currency``; ``reference`` identifies the order."""
        ...
