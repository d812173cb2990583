"""Shop grouping — read-only per-vendor view of the cart.

Checkout and order placement are split per vendor, so the ledger is
partitioned by owning shop. Groups come out in order of each shop's first
appearance in the ledger.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ShopGroup:
    """Lines of a single shop together with their subtotal."""

    shop_id: str
    items: tuple
    subtotal: float

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)


def group_by_shop(lines) -> list[ShopGroup]:
    """Partition cart lines by shop, preserving first-occurrence order."""
    buckets: dict[str, list] = {}
    for line in lines:
        buckets.setdefault(str(line.shop_id), []).append(line)

    return [
        ShopGroup(
            shop_id=shop_id,
            items=tuple(items),
            subtotal=sum(line.price * line.quantity for line in items),
        )
        for shop_id, items in buckets.items()
    ]
