"""SKU value object for stock keeping unit codes."""

import re

from protean import invariant
from protean.fields import String

from storefront.domain import storefront
from storefront.shared.errors import SkuErrors

MAX_SKU_LENGTH = 50
_SKU_PATTERN = re.compile(r"^[a-zA-Z0-9-]*$")


@storefront.value_object
class SKU:
    """Stock keeping unit: letters, digits and hyphens, at most 50 characters.

    E.g., "ELEC-PHN-001", "shoe-run-42"
    """

    code: String(max_length=255)

    @invariant.post
    def code_must_be_valid_format(self):
        code = (self.code or "").strip()

        if not code:
            raise SkuErrors.EMPTY.to_exception()

        if len(code) > MAX_SKU_LENGTH:
            raise SkuErrors.TOO_LONG.to_exception()

        if not _SKU_PATTERN.match(code):
            raise SkuErrors.INVALID_CHARACTERS.to_exception()
