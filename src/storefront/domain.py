"""Storefront domain: catalogue, carts, checkout and order administration.

A single bounded context backed by one relational store. Carts, products and
orders are plain CQRS aggregates; the checkout flow coordinates them through
an application service with its own optimistic-concurrency retry loop.
"""

import structlog
from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
