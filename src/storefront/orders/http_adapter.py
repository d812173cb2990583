"""Order API adapter for the storefront REST backend.

Posts the order-creation request as JSON to ``{api_url}/orders``. The
backend answers with the created order either bare or wrapped in the usual
``{"success": ..., "data": {...}}`` envelope; error bodies carry a
``message`` and optionally per-field ``errors``.
"""

import pydantic
import requests
import structlog

from storefront.checkout.schemas import CreatedOrder, OrderCreateRequest
from storefront.orders.port import NetworkError, OrderApi, OrderCreationError

logger = structlog.get_logger(__name__)


class HttpOrderApi(OrderApi):
    """Order API over HTTP, using a requests session."""

    def __init__(
        self,
        api_url: str,
        auth_token: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self, idempotency_key: str) -> dict:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Idempotency-Key": idempotency_key,
        }
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    @staticmethod
    def _error_body(response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def create_order(self, request: OrderCreateRequest, idempotency_key: str) -> CreatedOrder:
        url = f"{self.api_url}/orders"
        try:
            response = self.session.post(
                url,
                json=request.to_payload(),
                headers=self._headers(idempotency_key),
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise NetworkError(f"Order API timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"Could not reach Order API: {exc}") from exc

        if not response.ok:
            body = self._error_body(response)
            message = body.get("message") or body.get("error") or f"HTTP error! status: {response.status_code}"
            logger.warning(
                "Order API rejected order",
                status_code=response.status_code,
                message=message,
                idempotency_key=idempotency_key,
            )
            raise OrderCreationError(message, status_code=response.status_code, errors=body.get("errors"))

        try:
            body = response.json()
        except ValueError as exc:
            raise OrderCreationError("Order API returned a non-JSON response", status_code=response.status_code) from exc

        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            body = body["data"]

        try:
            return CreatedOrder.model_validate(body)
        except pydantic.ValidationError as exc:
            raise OrderCreationError(
                "Order API response did not include an order id", status_code=response.status_code
            ) from exc
