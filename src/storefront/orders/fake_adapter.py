"""Configurable fake Order API for development and testing.

Simulates the storefront backend without any network calls. It can be
configured at runtime to succeed, reject the order, or fail at the network
level, and it honours idempotency keys the way the real backend is expected
to: a repeated key returns the order created the first time.
"""

from uuid import uuid4

from storefront.checkout.schemas import CreatedOrder, OrderCreateRequest
from storefront.orders.port import NetworkError, OrderApi, OrderCreationError


class FakeOrderApi(OrderApi):
    """Configurable fake Order API."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.network_failure: bool = False
        self.status_code: int = 500
        self.failure_reason: str = "Failed to create order"
        self.calls: list[dict] = []
        self.orders: dict[str, CreatedOrder] = {}

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Failed to create order",
        network_failure: bool = False,
        status_code: int = 500,
    ) -> None:
        """Configure Order API behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.network_failure = network_failure
        self.status_code = status_code

    def create_order(self, request: OrderCreateRequest, idempotency_key: str) -> CreatedOrder:
        call = {
            "method": "create_order",
            "payload": request.to_payload(),
            "idempotency_key": idempotency_key,
        }
        self.calls.append(call)

        if not self.should_succeed:
            if self.network_failure:
                raise NetworkError(self.failure_reason)
            raise OrderCreationError(self.failure_reason, status_code=self.status_code)

        if idempotency_key in self.orders:
            return self.orders[idempotency_key]

        order = CreatedOrder(
            order_id=f"fake_ord_{uuid4().hex[:12]}",
            order_number=f"ORD-{len(self.orders) + 1:05d}",
            grand_total=request.grand_total,
            payment_status="pending",
        )
        self.orders[idempotency_key] = order
        return order
