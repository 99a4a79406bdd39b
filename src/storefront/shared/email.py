"""EmailAddress value object for validated email addresses."""

import re

from protean import invariant
from protean.fields import String

from storefront.domain import storefront
from storefront.shared.errors import EmailErrors

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@storefront.value_object
class EmailAddress:
    """A syntactically valid email address, kept in lower case."""

    address: String(max_length=254)

    @invariant.post
    def verify_email_address(self):
        if not self.address or not self.address.strip():
            raise EmailErrors.EMPTY.to_exception()

        if not _EMAIL_PATTERN.match(self.address):
            raise EmailErrors.INVALID.to_exception()

    @classmethod
    def normalized(cls, address):
        return cls(address=(address or "").strip().lower())
