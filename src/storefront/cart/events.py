"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartLineAdded:
    """A product was added to the cart, or an existing line was topped up."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    variant_id = Identifier()
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartLineQuantityUpdated:
    """The quantity of a cart line was replaced."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    variant_id = Identifier()
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartLineRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    variant_id = Identifier()


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed, after checkout or on an explicit empty-cart action."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)
    cleared_at = DateTime(required=True)
