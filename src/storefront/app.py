"""Storefront client composition root.

Builds the single cart for this client and everything that depends on it,
once, at start-up. Consumers receive the ``Storefront`` object (or the
service they need from it) explicitly; nothing reaches for a global cart.

Usage:
    from storefront.app import bootstrap

    app = bootstrap()
    app.cart.add_line("prod-1", "shop-1", price=10.0)
    order = app.checkout.submit(address, "delivery", "card")
"""

from dataclasses import dataclass

import structlog

from storefront.cart.persistence import CartPersistence
from storefront.cart.service import CartService
from storefront.checkout.service import CheckoutService
from storefront.config import Settings
from storefront.domain import storefront
from storefront.orders import build_order_api
from storefront.orders.port import OrderApi
from storefront.storage import build_storage
from storefront.storage.port import LocalStorage
from storefront.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


@dataclass
class Storefront:
    settings: Settings
    persistence: CartPersistence
    cart: CartService
    order_api: OrderApi
    checkout: CheckoutService


def create_storefront(
    settings: Settings | None = None,
    storage: LocalStorage | None = None,
    order_api: OrderApi | None = None,
) -> Storefront:
    """Wire the cart, persistence and checkout. Expects an active storefront domain context."""
    settings = settings or Settings.from_env()
    persistence = CartPersistence(storage or build_storage(settings), key=settings.cart_key)
    cart = CartService(persistence)
    order_api = order_api or build_order_api(settings)
    checkout = CheckoutService(cart, order_api, delivery_fee=settings.delivery_fee)

    logger.info(
        "Storefront ready",
        storage_backend=settings.storage_backend,
        order_api_backend=settings.order_api_backend,
        cart_lines=len(cart.lines),
    )
    return Storefront(
        settings=settings,
        persistence=persistence,
        cart=cart,
        order_api=order_api,
        checkout=checkout,
    )


def bootstrap(settings: Settings | None = None) -> Storefront:
    """Configure logging, initialize the domain and build the storefront."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_dir)

    storefront.init()
    storefront.domain_context().push()

    return create_storefront(settings)
