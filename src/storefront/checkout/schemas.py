"""Pydantic request/response schemas for the Order API.

These are external contracts (anti-corruption layer) — separate from the
internal cart aggregate. Field names are snake_case in Python and camelCase
on the wire.
"""

from enum import Enum
from typing import ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DeliveryType(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    MOBILE_MONEY = "mobile_money"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddress(WireModel):
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("street", "city", "state", "country", "zip_code")

    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""

    def missing_fields(self) -> list[str]:
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name).strip()]


class OrderItem(WireModel):
    product: str
    shop: str
    variant_id: str | None = None
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)
    total_price: float = Field(ge=0)
    name: str | None = None
    image: str | None = None


class ShopOrder(WireModel):
    shop: str
    items: list[OrderItem]
    subtotal: float = Field(ge=0)
    tax: float = Field(ge=0, default=0.0)
    delivery_fee: float = Field(ge=0, default=0.0)
    discount: float = Field(ge=0, default=0.0)
    total: float = Field(ge=0)
    delivery_type: DeliveryType


# ---------------------------------------------------------------------------
# Request / Response
# ---------------------------------------------------------------------------
class OrderCreateRequest(WireModel):
    shop_orders: list[ShopOrder] = Field(min_length=1)
    shipping_address: ShippingAddress | None = None
    delivery_type: DeliveryType
    payment_method: PaymentMethod
    notes: str = ""
    tax: float = 0.0
    delivery_fee: float = 0.0
    discount: float = 0.0
    request_token: str | None = None
    grand_total: float = Field(default=0.0, exclude=True)  # Display only; the server computes its own

    def to_payload(self) -> dict:
        """JSON-ready body for ``POST /orders``."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CreatedOrder(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    order_id: str = Field(validation_alias=AliasChoices("order_id", "_id", "id", "orderId"))
    order_number: str | None = Field(default=None, validation_alias=AliasChoices("order_number", "orderNumber"))
    grand_total: float | None = Field(default=None, validation_alias=AliasChoices("grand_total", "grandTotal"))
    payment_status: str | None = Field(
        default=None, validation_alias=AliasChoices("payment_status", "paymentStatus")
    )
