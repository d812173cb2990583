"""Shared BDD fixtures and step definitions for the storefront cart."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.cart.events import CartCleared, CartLineAdded, CartLineQuantityUpdated, CartLineRemoved

# Map event name strings to classes for dynamic lookup in Then steps
_CART_EVENT_CLASSES = {
    "CartLineAdded": CartLineAdded,
    "CartLineQuantityUpdated": CartLineQuantityUpdated,
    "CartLineRemoved": CartLineRemoved,
    "CartCleared": CartCleared,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


@pytest.fixture()
def recorded_events(cart_service):
    events = []
    cart_service.subscribe(events.append)
    return events


@pytest.fixture()
def cart(cart_service):
    return cart_service


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart(cart_service, recorded_events):
    return cart_service


@given(
    parsers.cfparse('the cart holds {qty:d} of product "{product_id}" from shop "{shop_id}" at price {price:f}'),
    target_fixture="cart",
)
def cart_holding(cart, recorded_events, qty, product_id, shop_id, price):
    cart.add_line(product_id, shop_id, price=price, quantity=qty)
    recorded_events.clear()
    return cart


@given("the stored cart is corrupt")
def corrupt_stored_cart(storage):
    storage.items["cart"] = '[{"productId": "P1", "quantity":'


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_n_lines_singular(cart, count):
    assert len(cart.lines) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(cart, count):
    assert len(cart.lines) == count


@then(parsers.cfparse("the cart holds {count:d} item"))
def cart_holds_n_items(cart, count):
    assert cart.total_items == count


@then(parsers.cfparse("the cart total is {total:f}"))
def cart_total_is(cart, total):
    assert cart.total_price == pytest.approx(total)


@then(parsers.cfparse('line "{product_id}" from shop "{shop_id}" has quantity {qty:d}'))
def line_has_quantity(cart, product_id, shop_id, qty):
    line = cart.find_line(product_id, shop_id)
    assert line is not None, f"No line for {product_id} from {shop_id}"
    assert line.quantity == qty


@then("the cart is empty")
def cart_is_empty(cart):
    assert cart.is_empty
    assert cart.total_items == 0


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(recorded_events, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in recorded_events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in recorded_events]}"


@then("no cart event is raised")
def no_cart_event_raised(recorded_events):
    assert recorded_events == []
