import os
from pathlib import Path

import pytest

# Cheap hashes and no real mail in tests; must be set before storefront is imported
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")
os.environ.setdefault("EMAIL_BACKEND", "fake")

from protean.integrations.pytest import DomainFixture  # noqa: E402


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Swappable adapters, fresh for every test
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def mailer():
    from storefront.notification import reset_mailer, set_mailer
    from storefront.notification.fake_email import FakeEmailAdapter

    adapter = FakeEmailAdapter()
    set_mailer(adapter)
    yield adapter
    reset_mailer()


@pytest.fixture(autouse=True)
def payments():
    from storefront.payment import reset_payment_service, set_payment_service
    from storefront.payment.mock_strategies import PayPalPaymentStrategy, StripePaymentStrategy
    from storefront.payment.service import PaymentService

    service = PaymentService([StripePaymentStrategy(), PayPalPaymentStrategy()])
    set_payment_service(service)
    yield service
    reset_payment_service()


@pytest.fixture()
def stripe(payments):
    return payments.strategy_for("stripe")


@pytest.fixture(autouse=True)
def storage(tmp_path):
    from storefront.storage import reset_storage, set_storage
    from storefront.storage.local import LocalFileStorage

    local = LocalFileStorage(tmp_path / "uploads")
    set_storage(local)
    yield local
    reset_storage()


@pytest.fixture(autouse=True)
def _rate_limits():
    from storefront.api.rate_limit import reset_rate_limits

    reset_rate_limits()
    yield
    reset_rate_limits()


# ---------------------------------------------------------------------------
# Persisted building blocks
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer():
    from protean import current_domain

    from storefront.identity.user import User

    user = User.register(email="jane@example.com", password="Secret123!", first_name="Jane", last_name="Doe")
    current_domain.repository_for(User).add(user)
    return user


@pytest.fixture()
def admin():
    from protean import current_domain

    from storefront.identity.user import Role, User

    user = User.register(
        email="admin@example.com",
        password="Admin123!",
        first_name="Ada",
        last_name="Admin",
        roles=[Role.ADMIN.value, Role.CUSTOMER.value],
    )
    current_domain.repository_for(User).add(user)
    return user


@pytest.fixture()
def category():
    from protean import current_domain

    from storefront.category.category import Category

    laptops = Category.create(name="Laptops", description="Portable computers")
    current_domain.repository_for(Category).add(laptops)
    return laptops


@pytest.fixture()
def make_product(category):
    from protean import current_domain

    from storefront.product.product import Product

    def _make(name="Ultrabook 14", sku="LAP-UB14", price=999.0, stock=10, currency="USD", **kwargs):
        product = Product.create(
            name=name,
            sku=sku,
            price=price,
            stock=stock,
            currency=currency,
            category_id=str(category.id),
            **kwargs,
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def fill_cart(customer):
    """Put ``(product, quantity)`` pairs into the customer's cart."""
    from protean import current_domain

    from storefront.cart.items import AddToCart

    def _fill(*lines):
        for product, quantity in lines:
            current_domain.process(
                AddToCart(user_id=str(customer.id), product_id=str(product.id), quantity=quantity),
                asynchronous=False,
            )

    return _fill
