"""Application tests for checkout: reservation, payment, compensation and retries."""

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError, ValidationError

from storefront.cart.cart import Cart
from storefront.checkout import service as checkout_module
from storefront.checkout.service import MAX_RETRIES, CheckoutService
from storefront.order.order import Order, OrderStatus
from storefront.product.product import Product


@pytest.fixture(autouse=True)
def _no_backoff(monkeypatch):
    monkeypatch.setattr(checkout_module, "BACKOFF_SECONDS", (0, 0))


@pytest.fixture()
def laptop(make_product):
    return make_product(price=999.0, stock=5)


@pytest.fixture()
def mouse(make_product):
    return make_product(name="Mouse", sku="ACC-MSE", price=25.5, stock=10)


def _stock(product):
    return current_domain.repository_for(Product).get(product.id).stock


def _cart(user):
    return current_domain.repository_for(Cart).for_user(str(user.id))


def _orders(user):
    return current_domain.repository_for(Order).for_user(str(user.id))


class TestSuccessfulCheckout:
    def test_order_is_placed_and_paid(self, customer, laptop, mouse, fill_cart, stripe):
        fill_cart((laptop, 1), (mouse, 2))

        order = CheckoutService().place_order(str(customer.id), payment_provider="stripe")

        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.status == OrderStatus.PENDING.value
        assert stored.total.amount == 1050.0
        assert stored.total.currency == "USD"
        assert stored.payment_provider == "stripe"
        assert stored.payment_reference.startswith("ch_")
        assert len(stored.items) == 2

        assert stripe.calls == [{"amount": 1050.0, "currency": "USD", "reference": str(order.id)}]

    def test_items_snapshot_name_and_price(self, customer, laptop, fill_cart):
        fill_cart((laptop, 2))

        order = CheckoutService().place_order(str(customer.id))

        item = current_domain.repository_for(Order).get(order.id).items[0]
        assert item.product_name == "Ultrabook 14"
        assert item.unit_price == 999.0
        assert item.quantity == 2

    def test_stock_is_deducted(self, customer, laptop, mouse, fill_cart):
        fill_cart((laptop, 2), (mouse, 3))

        CheckoutService().place_order(str(customer.id))

        assert _stock(laptop) == 3
        assert _stock(mouse) == 7

    def test_cart_is_emptied_not_deleted(self, customer, laptop, fill_cart):
        fill_cart((laptop, 1))

        CheckoutService().place_order(str(customer.id))

        cart = _cart(customer)
        assert cart is not None
        assert cart.is_empty

    def test_whole_stock_can_be_bought(self, customer, laptop, fill_cart):
        fill_cart((laptop, 5))
        CheckoutService().place_order(str(customer.id))
        assert _stock(laptop) == 0

    def test_paypal_provider(self, customer, laptop, fill_cart):
        fill_cart((laptop, 1))

        order = CheckoutService().place_order(str(customer.id), payment_provider="PayPal")

        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.payment_provider == "paypal"
        assert stored.payment_reference.startswith("PAY-")

    def test_confirmation_email_is_sent(self, customer, laptop, fill_cart, mailer):
        fill_cart((laptop, 1))

        order = CheckoutService().place_order(str(customer.id))

        assert len(mailer.sent_emails) == 1
        email = mailer.sent_emails[0]
        assert email["to"] == "jane@example.com"
        assert email["subject"] == f"Order #{order.id} Confirmed"
        assert "Ultrabook 14 x1" in email["body"]

    def test_email_failure_does_not_fail_checkout(self, customer, laptop, fill_cart, mailer):
        mailer.configure(should_succeed=False)
        fill_cart((laptop, 1))

        order = CheckoutService().place_order(str(customer.id))

        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.payment_reference is not None
        assert mailer.sent_emails == []

    def test_confirmation_can_be_deferred(self, customer, laptop, fill_cart, mailer):
        fill_cart((laptop, 1))
        deferred = []

        order = CheckoutService().place_order(
            str(customer.id), schedule=lambda func, *args: deferred.append((func, args))
        )

        assert mailer.sent_emails == []
        assert len(deferred) == 1

        func, args = deferred[0]
        func(*args)

        assert mailer.messages_to("jane@example.com")[0]["subject"] == f"Order #{order.id} Confirmed"

    def test_nothing_is_deferred_when_payment_fails(self, customer, laptop, fill_cart, stripe):
        stripe.configure(should_succeed=False)
        fill_cart((laptop, 1))
        deferred = []

        with pytest.raises(ValidationError):
            CheckoutService().place_order(str(customer.id), schedule=lambda func, *args: deferred.append(func))

        assert deferred == []


class TestRejectedCheckout:
    def test_unknown_provider_changes_nothing(self, customer, laptop, fill_cart, payments):
        fill_cart((laptop, 2))

        with pytest.raises(ValidationError) as exc:
            CheckoutService().place_order(str(customer.id), payment_provider="bitcoin")

        assert "Payment.InvalidProvider" in exc.value.messages
        assert _stock(laptop) == 5
        assert _cart(customer).item_for(laptop.id).quantity == 2
        assert _orders(customer) == []

    def test_without_cart(self, customer):
        with pytest.raises(ValidationError) as exc:
            CheckoutService().place_order(str(customer.id))
        assert "Order.EmptyCart" in exc.value.messages

    def test_with_emptied_cart(self, customer, laptop, fill_cart):
        fill_cart((laptop, 1))
        CheckoutService().place_order(str(customer.id))

        with pytest.raises(ValidationError) as exc:
            CheckoutService().place_order(str(customer.id))
        assert "Order.EmptyCart" in exc.value.messages

    def test_out_of_stock(self, customer, laptop, mouse, fill_cart, stripe):
        fill_cart((mouse, 1), (laptop, 6))

        with pytest.raises(ValidationError) as exc:
            CheckoutService().place_order(str(customer.id))

        assert exc.value.messages["Order.OutOfStock"] == [
            "Not enough stock for product 'Ultrabook 14'. Available: 5, Requested: 6"
        ]
        assert _stock(laptop) == 5
        assert _stock(mouse) == 10
        assert len(_cart(customer).items) == 2
        assert _orders(customer) == []
        assert stripe.calls == []

    def test_product_removed_after_adding(self, customer, laptop, fill_cart):
        fill_cart((laptop, 1))
        repo = current_domain.repository_for(Product)
        repo.remove(repo.get(laptop.id))

        with pytest.raises(ValidationError) as exc:
            CheckoutService().place_order(str(customer.id))
        assert "Order.ProductNotFound" in exc.value.messages


class TestPaymentFailure:
    def test_declined_payment_is_compensated(self, customer, laptop, mouse, fill_cart, stripe, mailer):
        stripe.configure(should_succeed=False, failure_reason="Card declined")
        fill_cart((laptop, 2), (mouse, 1))

        with pytest.raises(ValidationError) as exc:
            CheckoutService().place_order(str(customer.id))

        assert exc.value.messages["Order.PaymentFailed"] == ["Payment failed: Card declined"]

        # Stock is back where it started
        assert _stock(laptop) == 5
        assert _stock(mouse) == 10

        # The order survives as a cancelled record
        orders = _orders(customer)
        assert len(orders) == 1
        assert orders[0].status == OrderStatus.CANCELLED.value
        assert orders[0].cancellation_reason == "Payment failed: Card declined"
        assert orders[0].payment_reference is None

        # The cart stays empty and no confirmation goes out
        assert _cart(customer).is_empty
        assert mailer.sent_emails == []

    def test_compensation_skips_vanished_products(self, customer, laptop, mouse, fill_cart, stripe, monkeypatch):
        fill_cart((laptop, 1), (mouse, 1))
        stripe.configure(should_succeed=False)

        original_charge = stripe.charge

        def charge_and_drop_mouse(amount, currency, reference):
            repo = current_domain.repository_for(Product)
            repo.remove(repo.get(mouse.id))
            return original_charge(amount, currency, reference)

        monkeypatch.setattr(stripe, "charge", charge_and_drop_mouse)

        with pytest.raises(ValidationError):
            CheckoutService().place_order(str(customer.id))

        assert _stock(laptop) == 5
        assert _orders(customer)[0].status == OrderStatus.CANCELLED.value


class TestConcurrencyRetries:
    def _flaky(self, service, monkeypatch, failures, before_failure=None, step="_reserve"):
        original = getattr(service, step)
        attempts = []

        def flaky(*args):
            attempts.append(args)
            if failures is None or len(attempts) <= failures:
                if before_failure is not None:
                    before_failure()
                raise ExpectedVersionError("Version conflict")
            return original(*args)

        monkeypatch.setattr(service, step, flaky)
        return attempts

    def test_conflicts_are_retried(self, customer, laptop, fill_cart, monkeypatch):
        fill_cart((laptop, 2))
        service = CheckoutService()
        attempts = self._flaky(service, monkeypatch, failures=2)

        order = service.place_order(str(customer.id))

        assert len(attempts) == 3
        assert current_domain.repository_for(Order).get(order.id).payment_reference is not None
        assert _stock(laptop) == 3

    def test_conflicts_outlasting_retries_propagate(self, customer, laptop, fill_cart, monkeypatch, stripe):
        fill_cart((laptop, 2))
        service = CheckoutService()
        attempts = self._flaky(service, monkeypatch, failures=None)

        with pytest.raises(ExpectedVersionError):
            service.place_order(str(customer.id))

        assert len(attempts) == MAX_RETRIES + 1
        assert _stock(laptop) == 5
        assert _orders(customer) == []
        assert stripe.calls == []

    def test_exhausted_retries_report_drained_stock(self, customer, laptop, fill_cart, monkeypatch):
        fill_cart((laptop, 2))

        def competitor_buys_everything():
            repo = current_domain.repository_for(Product)
            product = repo.get(laptop.id)
            if product.stock:
                product.change_stock(-product.stock)
                repo.add(product)

        service = CheckoutService()
        self._flaky(service, monkeypatch, failures=None, before_failure=competitor_buys_everything)

        with pytest.raises(ValidationError) as exc:
            service.place_order(str(customer.id))

        assert exc.value.messages["Order.OutOfStock"] == [
            "Not enough stock for product 'Ultrabook 14'. Available: 0, Requested: 2"
        ]

    def test_compensation_conflicts_are_retried(self, customer, laptop, fill_cart, monkeypatch, stripe):
        stripe.configure(should_succeed=False, failure_reason="Card declined")
        fill_cart((laptop, 2))
        service = CheckoutService()
        attempts = self._flaky(service, monkeypatch, failures=2, step="_compensate")

        with pytest.raises(ValidationError) as exc:
            service.place_order(str(customer.id))

        assert "Order.PaymentFailed" in exc.value.messages
        assert len(attempts) == 3
        assert _stock(laptop) == 5
        assert _orders(customer)[0].status == OrderStatus.CANCELLED.value

    def test_compensation_conflicts_outlasting_retries_propagate(
        self, customer, laptop, fill_cart, monkeypatch, stripe
    ):
        stripe.configure(should_succeed=False)
        fill_cart((laptop, 2))
        service = CheckoutService()
        attempts = self._flaky(service, monkeypatch, failures=None, step="_compensate")

        with pytest.raises(ExpectedVersionError):
            service.place_order(str(customer.id))

        assert len(attempts) == MAX_RETRIES + 1
        # Left for reconciliation: stock stays reserved against a Pending order
        assert _stock(laptop) == 3
        assert _orders(customer)[0].status == OrderStatus.PENDING.value

    def test_payment_recording_conflicts_are_retried(self, customer, laptop, fill_cart, monkeypatch, mailer):
        fill_cart((laptop, 1))
        service = CheckoutService()
        attempts = self._flaky(service, monkeypatch, failures=2, step="_record_payment")

        order = service.place_order(str(customer.id))

        assert len(attempts) == 3
        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.payment_provider == "stripe"
        assert stored.payment_reference.startswith("ch_")
        assert len(mailer.sent_emails) == 1

    def test_payment_recording_conflicts_outlasting_retries_propagate(
        self, customer, laptop, fill_cart, monkeypatch, stripe, mailer
    ):
        fill_cart((laptop, 1))
        service = CheckoutService()
        attempts = self._flaky(service, monkeypatch, failures=None, step="_record_payment")

        with pytest.raises(ExpectedVersionError):
            service.place_order(str(customer.id))

        assert len(attempts) == MAX_RETRIES + 1
        assert len(stripe.calls) == 1
        order = _orders(customer)[0]
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_reference is None
        assert _stock(laptop) == 4
        assert mailer.sent_emails == []
