"""Cart service — the single owner of the shopper's cart in a running client.

Built once by the composition root and handed to every consumer that needs
the cart. Each mutation is applied to the ShoppingCart aggregate, the
resulting domain events are delivered to subscribed listeners, and then the
ledger is written to local storage. Listeners only read; they never mutate
the cart from inside a notification. A failing listener is logged and does
not stop the remaining listeners or the write.
"""

from collections.abc import Callable

import structlog

from storefront.cart.cart import ShoppingCart
from storefront.cart.grouping import ShopGroup, group_by_shop
from storefront.cart.persistence import CartPersistence

logger = structlog.get_logger(__name__)

Listener = Callable[[object], None]


class CartService:
    def __init__(self, persistence: CartPersistence) -> None:
        self.persistence = persistence
        self._listeners: list[Listener] = []
        self.cart = ShoppingCart.create(lines=persistence.load())
        logger.info(
            "Cart hydrated",
            line_count=len(self.cart.lines),
            total_items=self.cart.total_items,
        )

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    @property
    def lines(self) -> tuple:
        return tuple(self.cart.lines)

    @property
    def total_items(self) -> int:
        return self.cart.total_items

    @property
    def total_price(self) -> float:
        return self.cart.total_price

    @property
    def is_empty(self) -> bool:
        return self.cart.is_empty

    def find_line(self, product_id, shop_id, variant_id=None):
        return self.cart.find_line(product_id, shop_id, variant_id)

    def shop_groups(self) -> list[ShopGroup]:
        return group_by_shop(self.cart.lines)

    # -------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for cart events. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_line(
        self,
        product_id,
        shop_id,
        price,
        quantity=1,
        variant_id=None,
        name="",
        image=None,
        available_stock=None,
    ):
        line = self.cart.add_line(
            product_id=product_id,
            shop_id=shop_id,
            price=price,
            quantity=quantity,
            variant_id=variant_id,
            name=name,
            image=image,
            available_stock=available_stock,
        )
        logger.info(
            "Cart line added",
            product_id=str(line.product_id),
            shop_id=str(line.shop_id),
            variant_id=line.variant_id,
            quantity=quantity,
            line_quantity=line.quantity,
        )
        self._commit()
        return line

    def remove_line(self, product_id, shop_id, variant_id=None):
        line = self.cart.remove_line(product_id, shop_id, variant_id)
        if line is None:
            return None
        logger.info("Cart line removed", product_id=str(line.product_id), shop_id=str(line.shop_id))
        self._commit()
        return line

    def update_quantity(self, product_id, shop_id, variant_id, new_quantity):
        line = self.cart.update_quantity(product_id, shop_id, variant_id, new_quantity)
        if line is None:
            logger.debug(
                "Quantity update ignored",
                product_id=str(product_id),
                new_quantity=new_quantity,
            )
            return None
        logger.info(
            "Cart line quantity updated",
            product_id=str(line.product_id),
            shop_id=str(line.shop_id),
            new_quantity=line.quantity,
        )
        self._commit()
        return line

    def clear(self) -> int:
        removed = self.cart.clear()
        logger.info("Cart cleared", lines_removed=removed)
        self._commit()
        return removed

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _commit(self) -> None:
        """Notify listeners of pending events, then persist the ledger."""
        events = list(self.cart._events)
        self.cart._events.clear()

        for event in events:
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception:
                    logger.exception("Cart listener failed", event_type=type(event).__name__)

        self.persistence.save(self.cart.lines)
