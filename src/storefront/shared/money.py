"""Money value object for monetary amounts with currency."""

from protean import invariant
from protean.fields import Float, String

from storefront.domain import storefront
from storefront.shared.errors import MoneyErrors

DEFAULT_CURRENCY = "USD"


@storefront.value_object
class Money:
    """An amount in a single ISO 4217 currency, rounded to cents."""

    amount: Float(required=True)
    currency: String(default=DEFAULT_CURRENCY)

    @invariant.post
    def amount_cannot_be_negative(self):
        if self.amount is not None and self.amount < 0:
            raise MoneyErrors.NEGATIVE_AMOUNT.to_exception()

    @invariant.post
    def currency_must_be_iso_code(self):
        if not self.currency or not self.currency.strip():
            raise MoneyErrors.EMPTY_CURRENCY.to_exception()
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise MoneyErrors.INVALID_CURRENCY.to_exception()

    @classmethod
    def of(cls, amount, currency=DEFAULT_CURRENCY):
        return cls(amount=round(float(amount), 2), currency=(currency or DEFAULT_CURRENCY).strip().upper())

    @classmethod
    def zero(cls, currency=DEFAULT_CURRENCY):
        return cls.of(0, currency)
