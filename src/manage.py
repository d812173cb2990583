"""Storefront cart maintenance CLI.

Inspects or resets the cart persisted on this device, using the same
settings (STOREFRONT_* environment variables) as the client.

Usage:
    python src/manage.py show-cart          # Print the stored cart grouped by shop
    python src/manage.py show-cart --json   # Print the raw stored entries
    python src/manage.py clear-cart         # Empty the stored cart
"""

import argparse
import json
import sys

from storefront.cart.persistence import serialize_line


def show_cart(app, as_json=False):
    """Print the stored cart, grouped by shop."""
    cart = app.cart

    if as_json:
        print(json.dumps([serialize_line(line) for line in cart.lines], indent=2))
        return

    if cart.is_empty:
        print("Cart is empty.")
        return

    print(f"Cart: {cart.total_items} item(s), total {cart.total_price:.2f}")
    for group in cart.shop_groups():
        print(f"Shop {group.shop_id}: {group.item_count} item(s), subtotal {group.subtotal:.2f}")
        for line in group.items:
            variant = f" [{line.variant_id}]" if line.variant_id else ""
            label = line.name or line.product_id
            print(f"  {label}{variant} x{line.quantity} @ {line.price:.2f} = {line.line_total:.2f}")


def clear_cart(app):
    """Empty the stored cart."""
    removed = app.cart.clear()
    print(f"Removed {removed} line(s) from the cart.")


def main(argv=None, app=None):
    parser = argparse.ArgumentParser(description="Storefront cart maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show-cart", help="Print the stored cart")
    show_parser.add_argument("--json", action="store_true", help="Print raw stored entries as JSON")

    subparsers.add_parser("clear-cart", help="Empty the stored cart")

    args = parser.parse_args(argv)

    if app is None:
        from storefront.app import bootstrap

        app = bootstrap()

    if args.command == "show-cart":
        show_cart(app, as_json=args.json)
    elif args.command == "clear-cart":
        clear_cart(app)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
