"""Order API factory.

Provides build_order_api() to pick an implementation:
- HttpOrderApi against the storefront backend
- FakeOrderApi for development and testing
"""

from storefront.config import Settings
from storefront.orders.fake_adapter import FakeOrderApi
from storefront.orders.http_adapter import HttpOrderApi
from storefront.orders.port import NetworkError, OrderApi, OrderApiError, OrderCreationError

__all__ = [
    "FakeOrderApi",
    "HttpOrderApi",
    "NetworkError",
    "OrderApi",
    "OrderApiError",
    "OrderCreationError",
    "build_order_api",
]


def build_order_api(settings: Settings) -> OrderApi:
    """Return the Order API configured in ``settings``."""
    if settings.order_api_backend == "fake":
        return FakeOrderApi()
    return HttpOrderApi(
        api_url=settings.api_url,
        auth_token=settings.api_token,
        timeout=settings.api_timeout,
    )
