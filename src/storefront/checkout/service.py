"""Checkout: turns a user's cart into a paid-for Pending order.

Flow:
    1. Provider check, before anything is touched
    2. Cart + product load, stock validation, order assembly
    3. One Unit of Work: deduct stock, persist the Pending order, clear the cart
       (retried on version conflicts, re-validating stock each time)
    4. Charge the order total through the selected provider
    5a. Success → record the payment reference, order stays Pending
    5b. Failure → restore stock, cancel the order, raise Order.PaymentFailed
    6. Confirmation email, best effort and optionally deferred

Only stock deduction, order persistence and cart clearing share a transaction.
Payment runs after the order is durable so a crash mid-charge still leaves a
record to reconcile.
"""

import random
import time

import structlog
from protean import UnitOfWork
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.domain import storefront
from storefront.identity.user import User
from storefront.notification import get_mailer
from storefront.notification.templates import OrderConfirmationTemplate
from storefront.order.order import Order
from storefront.payment import get_payment_service
from storefront.product.product import Product
from storefront.shared.errors import OrderErrors

logger = structlog.get_logger(__name__)

MAX_RETRIES = 3
BACKOFF_SECONDS = (0.01, 0.05)
DEFAULT_PROVIDER = "stripe"


@storefront.application_service(part_of=Order)
class CheckoutService:
    def place_order(self, user_id, payment_provider=DEFAULT_PROVIDER, schedule=None):
        """Check out the user's cart and return the resulting order.

        ``schedule(func, *args)`` defers the confirmation email, e.g. to a
        web framework's background tasks. Without it the email is sent inline.

        Raises:
            ValidationError: ``Payment.InvalidProvider``, ``Order.EmptyCart``,
                ``Order.ProductNotFound``, ``Order.OutOfStock`` or
                ``Order.PaymentFailed``.
            ExpectedVersionError: conflicts outlasted every retry even though
                stock is still sufficient.
        """
        payments = get_payment_service()
        strategy = payments.strategy_for(payment_provider)

        order = self._with_retry(
            lambda: self._reserve(user_id),
            action="place_order",
            on_exhausted=lambda: self._load_and_assemble(user_id),
        )
        logger.info("order_reserved", order_id=str(order.id), user_id=str(user_id), total=order.total.amount)

        result = strategy.charge(order.total.amount, order.total.currency, str(order.id))
        if not result.success:
            logger.warning(
                "payment_failed",
                order_id=str(order.id),
                provider=strategy.provider,
                reason=result.failure_reason,
            )
            self._with_retry(lambda: self._compensate(order, result.failure_reason), action="compensate")
            raise OrderErrors.payment_failed(result.failure_reason).to_exception()

        order = self._with_retry(
            lambda: self._record_payment(order, strategy.provider, result.transaction_id),
            action="record_payment",
        )
        logger.info("order_paid", order_id=str(order.id), provider=strategy.provider)

        if schedule is None:
            self.send_confirmation(order)
        else:
            schedule(self.send_confirmation, order)
        return order

    # -------------------------------------------------------------------
    # Retry loop
    # -------------------------------------------------------------------
    def _with_retry(self, operation, action, on_exhausted=None):
        """Run ``operation``, retrying up to MAX_RETRIES times on version conflicts.

        When the retries run out ``on_exhausted`` gets a last chance to turn the
        conflict into a business failure; otherwise the conflict propagates.
        """
        for attempt in range(MAX_RETRIES + 1):
            try:
                return operation()
            except ExpectedVersionError:
                if attempt == MAX_RETRIES:
                    logger.error("checkout_conflict_exhausted", action=action, attempts=attempt + 1)
                    if on_exhausted is not None:
                        on_exhausted()
                    raise

                logger.warning("checkout_conflict", action=action, attempt=attempt + 1)
                time.sleep(random.uniform(*BACKOFF_SECONDS))

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def _load_and_assemble(self, user_id):
        """Load the cart and its products, validate stock and build the order."""
        cart = current_domain.repository_for(Cart).for_user(user_id)
        if cart is None or cart.is_empty:
            raise OrderErrors.EMPTY_CART.to_exception()

        products = current_domain.repository_for(Product).find_many([item.product_id for item in cart.items])

        lines = []
        for item in cart.items:
            product = products.get(str(item.product_id))
            if product is None:
                raise OrderErrors.product_not_found(str(item.product_id)).to_exception()
            if not product.has_stock(item.quantity):
                raise OrderErrors.out_of_stock(product.name, product.stock, item.quantity).to_exception()

            lines.append(
                {
                    "product_id": str(product.id),
                    "product_name": product.name,
                    "quantity": item.quantity,
                    "unit_price": product.price,
                    "currency": product.currency,
                }
            )

        return cart, products, Order.place(user_id, lines)

    def _reserve(self, user_id):
        with UnitOfWork():
            cart, products, order = self._load_and_assemble(user_id)

            product_repo = current_domain.repository_for(Product)
            for item in order.items:
                product = products[str(item.product_id)]
                product.change_stock(-item.quantity)
                product_repo.add(product)

            current_domain.repository_for(Order).add(order)

            cart.clear()
            current_domain.repository_for(Cart).add(cart)

        return order

    def _compensate(self, order, reason):
        with UnitOfWork():
            product_repo = current_domain.repository_for(Product)
            products = product_repo.find_many([item.product_id for item in order.items])
            for item in order.items:
                product = products.get(str(item.product_id))
                if product is None:
                    logger.warning(
                        "compensation_product_missing",
                        order_id=str(order.id),
                        product_id=str(item.product_id),
                    )
                    continue
                product.change_stock(item.quantity)
                product_repo.add(product)

            order_repo = current_domain.repository_for(Order)
            cancelled = order_repo.get(order.id)
            cancelled.cancel(reason=f"Payment failed: {reason or 'unknown reason'}")
            order_repo.add(cancelled)

        logger.info("order_compensated", order_id=str(order.id))
        return cancelled

    def _record_payment(self, order, provider, reference):
        with UnitOfWork():
            order_repo = current_domain.repository_for(Order)
            paid = order_repo.get(order.id)
            paid.record_payment(provider, reference)
            order_repo.add(paid)
        return paid

    def send_confirmation(self, order):
        """Fire-and-forget confirmation email; failures are logged, never raised."""
        try:
            user = current_domain.repository_for(User).get_or_none(order.user_id)
            if user is None:
                logger.warning("order_confirmation_no_recipient", order_id=str(order.id))
                return

            content = OrderConfirmationTemplate.render(
                {
                    "order_id": str(order.id),
                    "customer_name": user.first_name,
                    "currency": order.total.currency,
                    "total": order.total.amount,
                    "items": [
                        {
                            "product_name": item.product_name,
                            "quantity": item.quantity,
                            "unit_price": item.unit_price,
                        }
                        for item in order.items
                    ],
                }
            )
            get_mailer().send(to=user.email, subject=content["subject"], body=content["body"])
        except Exception:
            logger.exception("order_confirmation_failed", order_id=str(order.id))
