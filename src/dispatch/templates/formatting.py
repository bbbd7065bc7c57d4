"""Plain-text fragments shared by the mail templates."""


def money(amount) -> str:
    return f"${float(amount or 0):.2f}"


def item_lines(items: list[dict]) -> str:
    """One ``- 2 x Burger (Large) $10.00`` line per item."""
    lines = []
    for item in items:
        quantity = item.get("quantity") or 1
        name = item.get("name") or "Item"
        variant = f" ({item['variant']})" if item.get("variant") else ""
        lines.append(f"- {quantity} x {name}{variant} {money((item.get('price') or 0) * quantity)}")
    return "\n".join(lines) if lines else "- (no items)"


def items_synopsis(items: list[dict]) -> str:
    """Compact ``2 Burger, 1 Soda`` summary."""
    return ", ".join(f"{item.get('quantity') or 1} {item.get('name') or 'Item'}" for item in items)


def delivery_line(context: dict) -> str:
    if context.get("delivery_type") == "delivery":
        return f"Delivery to: {context.get('references') or 'Address not specified'}"
    return "Pickup at the store"
