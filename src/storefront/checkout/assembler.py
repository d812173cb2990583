"""Checkout assembly — turns the shop-grouped cart into an order-creation request.

Pure transformation: nothing here owns state or talks to the network. One
sub-order is produced per shop, each carrying its own lines, subtotal and
delivery fee. The grand total is for display; the Order API computes the
authoritative figures.
"""

from dataclasses import dataclass

import pydantic
from protean.exceptions import ValidationError

from storefront.cart.grouping import ShopGroup
from storefront.checkout.schemas import (
    DeliveryType,
    OrderCreateRequest,
    OrderItem,
    PaymentMethod,
    ShippingAddress,
    ShopOrder,
)
from storefront.config import DEFAULT_DELIVERY_FEE

ORDER_TAX = 0.0
ORDER_DISCOUNT = 0.0


@dataclass(frozen=True)
class CheckoutSummary:
    """Order summary shown next to the checkout form."""

    subtotal: float
    delivery_fee: float
    total: float
    shop_count: int
    total_items: int


def _money(value: float) -> float:
    return round(value, 2)


def _coerce_choice(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field_name: [f"Must be one of: {choices}"]}) from exc


def _coerce_address(shipping_address) -> ShippingAddress | None:
    if shipping_address is None or isinstance(shipping_address, ShippingAddress):
        return shipping_address
    try:
        return ShippingAddress.model_validate(shipping_address)
    except pydantic.ValidationError as exc:
        fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
        raise ValidationError({"shipping_address": [f"Invalid fields: {', '.join(fields)}"]}) from exc


def delivery_fee_for(delivery_type, flat_fee: float = DEFAULT_DELIVERY_FEE) -> float:
    """Flat fee for home delivery, nothing for pickup."""
    delivery_type = _coerce_choice(DeliveryType, delivery_type, "delivery_type")
    return flat_fee if delivery_type == DeliveryType.DELIVERY else 0.0


def summarize(groups: list[ShopGroup], delivery_type, delivery_fee: float = DEFAULT_DELIVERY_FEE) -> CheckoutSummary:
    """Display totals for the checkout page."""
    delivery_type = _coerce_choice(DeliveryType, delivery_type, "delivery_type")
    fee_per_shop = delivery_fee_for(delivery_type, delivery_fee)
    subtotal = sum(group.subtotal for group in groups)
    fees = fee_per_shop * len(groups)
    return CheckoutSummary(
        subtotal=_money(subtotal),
        delivery_fee=_money(fees),
        total=_money(subtotal + fees),
        shop_count=len(groups),
        total_items=sum(group.item_count for group in groups),
    )


def _build_shop_order(group: ShopGroup, delivery_type: DeliveryType, fee: float) -> ShopOrder:
    items = [
        OrderItem(
            product=str(line.product_id),
            shop=group.shop_id,
            variant_id=str(line.variant_id) if line.variant_id else None,
            quantity=line.quantity,
            price=line.price,
            total_price=_money(line.price * line.quantity),
            name=line.name or None,
            image=line.image,
        )
        for line in group.items
    ]
    return ShopOrder(
        shop=group.shop_id,
        items=items,
        subtotal=_money(group.subtotal),
        tax=ORDER_TAX,
        delivery_fee=fee,
        discount=ORDER_DISCOUNT,
        total=_money(group.subtotal + ORDER_TAX + fee - ORDER_DISCOUNT),
        delivery_type=delivery_type,
    )


def build_order_request(
    groups: list[ShopGroup],
    shipping_address,
    delivery_type,
    payment_method,
    notes: str = "",
    delivery_fee: float = DEFAULT_DELIVERY_FEE,
    request_token: str | None = None,
) -> OrderCreateRequest:
    """Assemble the order-creation request for the given shop groups.

    Raises ValidationError when there is nothing to order, when a choice is
    unknown, or when a delivery order lacks a complete shipping address.
    """
    if not groups:
        raise ValidationError({"cart": ["Cannot check out an empty cart"]})

    delivery_type = _coerce_choice(DeliveryType, delivery_type, "delivery_type")
    payment_method = _coerce_choice(PaymentMethod, payment_method, "payment_method")

    if delivery_type == DeliveryType.DELIVERY:
        address = _coerce_address(shipping_address)
        missing = address.missing_fields() if address else list(ShippingAddress.REQUIRED_FIELDS)
        if missing:
            raise ValidationError({"shipping_address": [f"Missing required fields: {', '.join(missing)}"]})
    else:
        # Pickup orders are collected at the shop
        address = None

    fee = delivery_fee_for(delivery_type, delivery_fee)
    shop_orders = [_build_shop_order(group, delivery_type, fee) for group in groups]

    return OrderCreateRequest(
        shop_orders=shop_orders,
        shipping_address=address,
        delivery_type=delivery_type,
        payment_method=payment_method,
        notes=(notes or "").strip(),
        tax=_money(sum(order.tax for order in shop_orders)),
        delivery_fee=_money(sum(order.delivery_fee for order in shop_orders)),
        discount=_money(sum(order.discount for order in shop_orders)),
        request_token=request_token,
        grand_total=_money(sum(order.total for order in shop_orders)),
    )
