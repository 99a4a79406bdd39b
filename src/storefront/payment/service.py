"""Provider selection in front of the payment strategies."""

from storefront.payment.port import PaymentResult, PaymentStrategy
from storefront.shared.errors import PaymentErrors


class PaymentService:
    def __init__(self, strategies: list[PaymentStrategy]) -> None:
        self._strategies = {strategy.provider.lower(): strategy for strategy in strategies}

    @property
    def providers(self) -> list[str]:
        return sorted(self._strategies)

    def supports(self, provider: str | None) -> bool:
        return bool(provider) and provider.strip().lower() in self._strategies

    def strategy_for(self, provider: str | None) -> PaymentStrategy:
        """Strategy registered under ``provider``, matched case-insensitively."""
        if not self.supports(provider):
            raise PaymentErrors.invalid_provider(provider).to_exception()
        return self._strategies[provider.strip().lower()]

    def process_payment(self, provider: str, amount: float, currency: str, reference: str) -> PaymentResult:
        return self.strategy_for(provider).charge(amount, currency, reference)
