"""Storefront bounded context — client-side Shopping Cart and Checkout.

Holds the cart ledger a shopper builds across many vendor shops, the
per-shop projection used at checkout, and the assembly of the outbound
order-creation request.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
