"""BDD tests for the cart ledger."""

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, when
from storefront.cart.persistence import CartPersistence
from storefront.cart.service import CartService

scenarios("features/cart_ledger.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.cfparse(
        'product "{product_id}" from shop "{shop_id}" is added at price {price:f} with quantity {qty:d}'
    )
)
def add_product(cart, product_id, shop_id, price, qty, error):
    try:
        cart.add_line(product_id, shop_id, price=price, quantity=qty)
    except ValidationError as exc:
        error["exc"] = exc


@when(
    parsers.cfparse(
        'variant "{variant_id}" of product "{product_id}" from shop "{shop_id}" '
        "is added at price {price:f} with quantity {qty:d}"
    )
)
def add_variant(cart, variant_id, product_id, shop_id, price, qty):
    cart.add_line(product_id, shop_id, price=price, quantity=qty, variant_id=variant_id)


@when(
    parsers.cfparse(
        'product "{product_id}" from shop "{shop_id}" is added with quantity {qty:d} while {stock:d} are in stock'
    )
)
def add_product_with_stock(cart, product_id, shop_id, qty, stock, error):
    line = cart.find_line(product_id, shop_id)
    price = line.price if line else 1.0
    try:
        cart.add_line(product_id, shop_id, price=price, quantity=qty, available_stock=stock)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the quantity of product "{product_id}" from shop "{shop_id}" is set to {qty:d}'))
def set_quantity(cart, product_id, shop_id, qty):
    cart.update_quantity(product_id, shop_id, None, qty)


@when(parsers.cfparse('product "{product_id}" from shop "{shop_id}" is removed'))
def remove_product(cart, product_id, shop_id):
    cart.remove_line(product_id, shop_id)


@when("the client restarts", target_fixture="cart")
def restart_client(storage):
    return CartService(CartPersistence(storage))
