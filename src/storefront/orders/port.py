"""Order API port (abstract interface).

Defines the contract for submitting an order-creation request to the
storefront backend. Swapping HttpOrderApi (real backend) for FakeOrderApi
(dev/test) requires no change to the checkout flow.
"""

from abc import ABC, abstractmethod

from storefront.checkout.schemas import CreatedOrder, OrderCreateRequest


class OrderApiError(Exception):
    """Submitting the order failed. The cart is left untouched so the shopper can retry."""

    retryable = True

    def __init__(self, message: str, status_code: int | None = None, errors: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}


class NetworkError(OrderApiError):
    """The Order API could not be reached, or did not answer in time."""


class OrderCreationError(OrderApiError):
    """The Order API answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None, errors: dict | None = None) -> None:
        super().__init__(message, status_code=status_code, errors=errors)
        # 4xx other than 408/409/429 is final
        self.retryable = status_code is None or status_code >= 500 or status_code in (408, 409, 429)


class OrderApi(ABC):
    """Abstract Order API interface."""

    @abstractmethod
    def create_order(self, request: OrderCreateRequest, idempotency_key: str) -> CreatedOrder:
        """Create an order. Raises NetworkError or OrderCreationError on failure."""
        ...
