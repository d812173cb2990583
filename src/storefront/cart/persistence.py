"""Cart persistence — mirrors the ledger into a local storage slot.

The slot (key ``"cart"`` by default) holds a JSON array with one object per
cart line. Persistence never interrupts the shopper: a missing, unreadable
or corrupt slot loads as an empty cart, and a failed write is logged while
the in-memory cart stays authoritative for the session.
"""

import json

import structlog
from protean.exceptions import ValidationError

from storefront.cart.cart import CartLine, LineDisplay, normalize_reference, normalize_variant
from storefront.config import DEFAULT_CART_KEY
from storefront.storage.port import LocalStorage, PersistenceError

logger = structlog.get_logger(__name__)


def serialize_line(line) -> dict:
    return {
        "productId": str(line.product_id),
        "shopId": str(line.shop_id),
        "variantId": str(line.variant_id) if line.variant_id else None,
        "quantity": line.quantity,
        "price": line.price,
        "name": line.name,
        "image": line.image,
    }


def deserialize_line(data) -> CartLine:
    """Build a CartLine from one stored entry. Raises ValueError on malformed data."""
    if not isinstance(data, dict):
        raise ValueError("Cart entry must be an object")

    quantity = data.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValueError(f"Invalid quantity: {quantity!r}")

    price = data.get("price")
    if isinstance(price, bool) or not isinstance(price, (int, float)) or price < 0:
        raise ValueError(f"Invalid price: {price!r}")

    try:
        return CartLine(
            product_id=normalize_reference(data.get("productId"), "product_id"),
            shop_id=normalize_reference(data.get("shopId"), "shop_id"),
            variant_id=normalize_variant(data.get("variantId")),
            quantity=quantity,
            price=float(price),
            display=LineDisplay(name=str(data.get("name") or ""), image=data.get("image")),
        )
    except ValidationError as exc:
        raise ValueError(f"Invalid cart entry: {exc.messages}") from exc


class CartPersistence:
    """Loads and saves cart lines through a LocalStorage slot."""

    def __init__(self, storage: LocalStorage, key: str = DEFAULT_CART_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> list[CartLine]:
        """Read the stored cart. Never raises; anything unusable becomes an empty cart."""
        try:
            raw = self.storage.get_item(self.key)
        except PersistenceError as exc:
            logger.error("Could not read stored cart", key=self.key, error=str(exc))
            return []

        if raw is None:
            return []

        try:
            entries = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Stored cart is not valid JSON, starting empty", key=self.key, error=str(exc))
            return []

        if not isinstance(entries, list):
            logger.warning("Stored cart is not a list, starting empty", key=self.key)
            return []

        lines: list[CartLine] = []
        by_key: dict[tuple, CartLine] = {}
        for position, entry in enumerate(entries):
            try:
                line = deserialize_line(entry)
            except ValueError as exc:
                logger.warning("Dropping malformed cart entry", key=self.key, position=position, error=str(exc))
                continue

            existing = by_key.get(line.key)
            if existing is not None:
                existing.quantity += line.quantity
                continue

            by_key[line.key] = line
            lines.append(line)

        return lines

    def save(self, lines) -> None:
        """Write the full ledger. Failures are logged, never raised."""
        try:
            payload = json.dumps([serialize_line(line) for line in lines], ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.error("Could not serialize cart", key=self.key, error=str(exc))
            return

        try:
            self.storage.set_item(self.key, payload)
        except PersistenceError as exc:
            logger.error("Could not persist cart", key=self.key, error=str(exc))

    def clear(self) -> None:
        """Remove the stored cart altogether."""
        try:
            self.storage.remove_item(self.key)
        except PersistenceError as exc:
            logger.error("Could not remove stored cart", key=self.key, error=str(exc))
