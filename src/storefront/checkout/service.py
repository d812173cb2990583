"""Checkout flow — submits the cart as one multi-shop order.

Coordinates the cart, the assembler and the Order API:

    1. Group the cart by shop and assemble the request (ValidationError stops
       here, before any network call)
    2. Submit it with an idempotency key while ``is_submitting`` is set
    3a. Success → clear the cart and hand back the created order
    3b. Failure → keep the cart as is, remember the error, re-raise for a retry

The idempotency key is tied to the request contents. Retrying the same
request after a timeout reuses the key, so the backend can recognise the
duplicate; changing the cart or the form produces a fresh key.
"""

import hashlib
import json
from uuid import uuid4

import structlog
from protean.exceptions import InvalidOperationError

from storefront.cart.service import CartService
from storefront.checkout.assembler import CheckoutSummary, build_order_request, summarize
from storefront.checkout.schemas import CreatedOrder, OrderCreateRequest
from storefront.config import DEFAULT_DELIVERY_FEE
from storefront.orders.port import OrderApi, OrderApiError

logger = structlog.get_logger(__name__)


def request_fingerprint(request: OrderCreateRequest) -> str:
    payload = request.model_copy(update={"request_token": None}).to_payload()
    return hashlib.sha256(json.dumps(payload, sort_keys=True).encode("utf-8")).hexdigest()


class CheckoutService:
    def __init__(
        self,
        cart_service: CartService,
        order_api: OrderApi,
        delivery_fee: float = DEFAULT_DELIVERY_FEE,
    ) -> None:
        self.cart_service = cart_service
        self.order_api = order_api
        self.delivery_fee = delivery_fee
        self.is_submitting: bool = False
        self.last_error: OrderApiError | None = None
        self._pending_token: str | None = None
        self._pending_fingerprint: str | None = None

    def preview(self, delivery_type) -> CheckoutSummary:
        """Subtotal, delivery fee and total for the current cart."""
        return summarize(self.cart_service.shop_groups(), delivery_type, self.delivery_fee)

    def _token_for(self, request: OrderCreateRequest) -> str:
        fingerprint = request_fingerprint(request)
        if self._pending_token is None or fingerprint != self._pending_fingerprint:
            self._pending_token = uuid4().hex
            self._pending_fingerprint = fingerprint
        return self._pending_token

    def submit(self, shipping_address, delivery_type, payment_method, notes: str = "") -> CreatedOrder:
        """Place the order for everything in the cart."""
        if self.is_submitting:
            raise InvalidOperationError("An order submission is already in progress")

        request = build_order_request(
            self.cart_service.shop_groups(),
            shipping_address=shipping_address,
            delivery_type=delivery_type,
            payment_method=payment_method,
            notes=notes,
            delivery_fee=self.delivery_fee,
        )
        token = self._token_for(request)
        request = request.model_copy(update={"request_token": token})

        self.is_submitting = True
        self.last_error = None
        try:
            order = self.order_api.create_order(request, idempotency_key=token)
        except OrderApiError as exc:
            self.last_error = exc
            logger.warning(
                "Checkout failed, cart kept for retry",
                error=str(exc),
                status_code=exc.status_code,
                retryable=exc.retryable,
                request_token=token,
            )
            raise
        finally:
            self.is_submitting = False

        self._pending_token = None
        self._pending_fingerprint = None
        self.cart_service.clear()

        logger.info(
            "Order placed",
            order_id=order.order_id,
            shop_count=len(request.shop_orders),
            grand_total=request.grand_total,
        )
        return order
