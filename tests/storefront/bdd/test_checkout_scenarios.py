"""BDD tests for multi-shop checkout."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.orders.port import OrderApiError

scenarios("features/checkout.feature")


@pytest.fixture()
def outcome():
    return {"order": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the Order API rejects orders with "{reason}"'))
def order_api_rejects(order_api, reason):
    order_api.configure(should_succeed=False, failure_reason=reason, status_code=422)


@given("the Order API is unreachable")
def order_api_unreachable(order_api):
    order_api.configure(should_succeed=False, network_failure=True, failure_reason="Order API timed out")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the shopper reviews the order for "{delivery_type}"'), target_fixture="summary")
def review_order(checkout, delivery_type):
    return checkout.preview(delivery_type)


def _place_order(checkout, shipping_address, delivery_type, payment_method, outcome, error):
    try:
        outcome["order"] = checkout.submit(shipping_address, delivery_type, payment_method)
    except (ValidationError, OrderApiError) as exc:
        error["exc"] = exc


@when(parsers.cfparse('the shopper places a "{delivery_type}" order paid by "{payment_method}"'))
def place_order(checkout, address, delivery_type, payment_method, outcome, error):
    _place_order(checkout, address, delivery_type, payment_method, outcome, error)


@when(parsers.cfparse('the shopper places a "{delivery_type}" order paid by "{payment_method}" without an address'))
def place_order_without_address(checkout, delivery_type, payment_method, outcome, error):
    _place_order(checkout, None, delivery_type, payment_method, outcome, error)


@when("the Order API comes back")
def order_api_recovers(order_api, error):
    order_api.configure(should_succeed=True)
    error["exc"] = None


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the subtotal is {amount:f}"))
def subtotal_is(summary, amount):
    assert summary.subtotal == pytest.approx(amount)


@then(parsers.cfparse("the delivery fee is {amount:f}"))
def delivery_fee_is(summary, amount):
    assert summary.delivery_fee == pytest.approx(amount)


@then(parsers.cfparse("the order total is {amount:f}"))
def order_total_is(summary, amount):
    assert summary.total == pytest.approx(amount)


@then("the order is accepted")
def order_accepted(outcome, error):
    assert error["exc"] is None, f"Checkout failed: {error['exc']}"
    assert outcome["order"] is not None
    assert outcome["order"].order_id


@then(parsers.cfparse("the order request has {count:d} shop orders"))
def request_has_shop_orders(order_api, count):
    assert len(order_api.calls[-1]["payload"]["shopOrders"]) == count


@then("the order request has no shipping address")
def request_has_no_address(order_api):
    assert "shippingAddress" not in order_api.calls[-1]["payload"]


@then("the checkout fails with a validation error")
def checkout_fails_validation(error):
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the checkout fails with "{message}"'))
def checkout_fails_with(error, message):
    assert isinstance(error["exc"], OrderApiError)
    assert str(error["exc"]) == message


@then("the Order API was not called")
def order_api_not_called(order_api):
    assert order_api.calls == []


@then("both submissions used the same idempotency key")
def same_idempotency_key(order_api):
    keys = [call["idempotency_key"] for call in order_api.calls]
    assert len(keys) == 2
    assert keys[0] == keys[1]
