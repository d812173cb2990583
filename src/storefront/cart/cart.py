"""Shopping Cart aggregate — the client-side ledger of lines across vendor shops.

A line is identified by (product, shop, variant). Adding an identity that is
already present tops up its quantity; the ledger never holds two lines with
the same identity. Totals are always recomputed from the current lines.

The cart is a plain CQRS-style aggregate. It is not stored through a Protean
repository: ``CartService`` owns the single instance for the running client
and mirrors it into local storage after every change.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, Text, ValueObject

from storefront.cart.events import CartCleared, CartLineAdded, CartLineQuantityUpdated, CartLineRemoved
from storefront.domain import storefront


def normalize_reference(value, field_name):
    """Reduce an identifier or a nested reference (``{"_id": ...}``) to a plain string."""
    if isinstance(value, dict):
        value = value.get("_id") or value.get("id")
    elif value is not None and not isinstance(value, (str, int)):
        value = getattr(value, "id", None)

    if value is None or str(value).strip() == "":
        raise ValidationError({field_name: ["is required"]})
    return str(value).strip()


def normalize_variant(value):
    """Variants are optional: ``None`` and blank strings both mean the base product."""
    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get("_id") or value.get("id")
    value = str(value).strip() if value is not None else ""
    return value or None


def line_identity(product_id, shop_id, variant_id=None):
    """Normalised identity tuple used to match cart lines."""
    return (
        normalize_reference(product_id, "product_id"),
        normalize_reference(shop_id, "shop_id"),
        normalize_variant(variant_id),
    )


@storefront.value_object
class LineDisplay:
    """Display snapshot captured when the line is added. Never re-derived."""

    name = Text(default="")
    image = Text()


@storefront.entity(part_of="ShoppingCart")
class CartLine:
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    variant_id = Identifier()  # None is the base product
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)  # Unit price snapshot
    display = ValueObject(LineDisplay)

    @property
    def key(self):
        return (str(self.product_id), str(self.shop_id), str(self.variant_id) if self.variant_id else None)

    @property
    def line_total(self):
        return self.price * self.quantity

    @property
    def name(self):
        return self.display.name if self.display else ""

    @property
    def image(self):
        return self.display.image if self.display else None


@storefront.aggregate
class ShoppingCart:
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def line_identities_must_be_unique(self):
        identities = [line.key for line in self.lines]
        if len(identities) != len(set(identities)):
            raise ValidationError({"lines": ["Cart cannot hold two lines for the same product, shop and variant"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, lines=None):
        """Create an empty cart, or one hydrated from previously stored lines."""
        now = datetime.now(UTC)
        cart = cls(created_at=now, updated_at=now)
        for line in lines or []:
            cart.add_lines(line)
        return cart

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    @property
    def total_items(self):
        return sum(line.quantity for line in self.lines)

    @property
    def total_price(self):
        return sum(line.price * line.quantity for line in self.lines)

    @property
    def is_empty(self):
        return not self.lines

    def find_line(self, product_id, shop_id, variant_id=None):
        identity = line_identity(product_id, shop_id, variant_id)
        return next((line for line in self.lines if line.key == identity), None)

    # -------------------------------------------------------------------
    # Line management
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
        """Add a line to the cart, or increase the quantity of the matching line."""
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})
        if price is None or price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

        product_id, shop_id, variant_id = line_identity(product_id, shop_id, variant_id)
        existing = self.find_line(product_id, shop_id, variant_id)
        new_quantity = existing.quantity + quantity if existing else quantity

        if available_stock is not None:
            if available_stock <= 0:
                raise ValidationError({"quantity": ["Product is out of stock"]})
            if new_quantity > available_stock:
                raise ValidationError({"quantity": [f"Only {available_stock} available in stock"]})

        if existing:
            existing.quantity = new_quantity
            line = existing
        else:
            line = CartLine(
                product_id=product_id,
                shop_id=shop_id,
                variant_id=variant_id,
                quantity=quantity,
                price=price,
                display=LineDisplay(name=name or "", image=image),
            )
            self.add_lines(line)

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                line_id=str(line.id),
                product_id=product_id,
                shop_id=shop_id,
                variant_id=variant_id,
                quantity=quantity,
                new_quantity=new_quantity,
            )
        )
        return line

    def update_quantity(self, product_id, shop_id, variant_id, new_quantity):
        """Replace a line's quantity. Values below 1 and unknown lines are ignored."""
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int) or new_quantity < 1:
            return None

        line = self.find_line(product_id, shop_id, variant_id)
        if line is None:
            return None

        previous_quantity = line.quantity
        line.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        product_id, shop_id, variant_id = line.key
        self.raise_(
            CartLineQuantityUpdated(
                cart_id=str(self.id),
                line_id=str(line.id),
                product_id=product_id,
                shop_id=shop_id,
                variant_id=variant_id,
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )
        return line

    def remove_line(self, product_id, shop_id, variant_id=None):
        """Remove the matching line. Removing a line that is not there does nothing."""
        line = self.find_line(product_id, shop_id, variant_id)
        if line is None:
            return None

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        product_id, shop_id, variant_id = line.key
        self.raise_(
            CartLineRemoved(
                cart_id=str(self.id),
                line_id=str(line.id),
                product_id=product_id,
                shop_id=shop_id,
                variant_id=variant_id,
            )
        )
        return line

    def clear(self):
        """Empty the cart."""
        removed = list(self.lines)
        for line in removed:
            self.remove_lines(line)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                lines_removed=len(removed),
                cleared_at=now,
            )
        )
        return len(removed)
