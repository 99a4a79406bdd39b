"""Shared BDD fixtures and step definitions for checkout and order handling."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from storefront.cart.cart import Cart
from storefront.checkout.service import CheckoutService
from storefront.order.order import Order
from storefront.product.product import Product


@pytest.fixture()
def error():
    """Container for the business error raised by a When step."""
    return {"exc": None}


@pytest.fixture()
def catalogue():
    """Products created by Given steps, keyed by name."""
    return {}


@pytest.fixture(autouse=True)
def _instant_retries(monkeypatch):
    monkeypatch.setattr("storefront.checkout.service.BACKOFF_SECONDS", (0, 0))


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def _(make_product, catalogue, name, price, stock):
    sku = f"SKU-{len(catalogue) + 1:03d}"
    catalogue[name] = make_product(name=name, sku=sku, price=price, stock=stock)


@given(parsers.cfparse('the customer has {quantity:d} of "{name}" in the cart'))
def _(fill_cart, catalogue, quantity, name):
    fill_cart((catalogue[name], quantity))


@given(parsers.cfparse('the "{provider}" gateway declines with "{reason}"'))
def _(payments, provider, reason):
    payments.strategy_for(provider).configure(should_succeed=False, failure_reason=reason)


@given(
    parsers.cfparse('the customer has placed an order for {quantity:d} of "{name}"'),
    target_fixture="order",
)
def _(fill_cart, customer, catalogue, quantity, name):
    fill_cart((catalogue[name], quantity))
    return CheckoutService().place_order(str(customer.id))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request is rejected with "{code}"'))
def _(error, code):
    assert isinstance(error["exc"], ValidationError)
    assert code in error["exc"].messages


@then(parsers.cfparse('the stock of "{name}" is {stock:d}'))
def _(catalogue, name, stock):
    product = current_domain.repository_for(Product).get(catalogue[name].id)
    assert product.stock == stock


@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert current_domain.repository_for(Order).get(order.id).status == status


@then("the cart is empty")
def _(customer):
    cart = current_domain.repository_for(Cart).for_user(str(customer.id))
    assert cart is not None
    assert cart.is_empty


@then(parsers.cfparse("the cart still holds {count:d} item"))
@then(parsers.cfparse("the cart still holds {count:d} items"))
def _(customer, count):
    assert current_domain.repository_for(Cart).for_user(str(customer.id)).item_count == count
