"""Pure formatting of order emails: subjects and plain-text bodies.

Deterministic and side-effect free; both senders build their messages from
these functions so the two emails always describe an order the same way.
"""

from __future__ import annotations

from .order import NormalizedOrder, OrderItem, StoreConfig

#: Placeholder shown to store staff when the customer left no email.
EMAIL_PLACEHOLDER = "(not provided)"

#: Placeholder shown to store staff when the order carries no notes.
NOTES_PLACEHOLDER = "(none)"


def format_address(order: NormalizedOrder) -> str:
    """Join the address parts with ``", "``, skipping empty ones.

    Example:
        >>> from pesach_orders.domain.order import NormalizedOrder
        >>> order = NormalizedOrder(
        ...     order_ref="PES-001", created_at_iso="2024-03-01T10:00:00Z",
        ...     delivery_date="2024-03-20", delivery_slot="9-11am",
        ...     customer_name="A. Cohen", phone="0123456789",
        ...     address_line1="1 High St", postcode="AB1 2CD", items=(),
        ... )
        >>> format_address(order)
        '1 High St, AB1 2CD'
    """
    parts = (order.address_line1, order.address_line2, order.postcode)
    return ", ".join(part for part in parts if part)


def format_item(item: OrderItem) -> str:
    """Render one item as ``- <name>[ (<size>)] x <qty>``.

    Example:
        >>> format_item(OrderItem(name="Matzo", qty=2))
        '- Matzo x 2'
        >>> format_item(OrderItem(name="Wine", size="750ml", qty=1))
        '- Wine (750ml) x 1'
    """
    size = f" ({item.size})" if item.size else ""
    return f"- {item.name}{size} x {item.qty}"


def format_items(order: NormalizedOrder) -> str:
    """Render every item on its own line, in order."""
    return "\n".join(format_item(item) for item in order.items)


def store_order_subject(order: NormalizedOrder, store: StoreConfig) -> str:
    """Subject line of the notification sent to the store inbox."""
    return f"{store.store_name} Pesach Order {order.order_ref}"


def customer_confirmation_subject(order: NormalizedOrder, store: StoreConfig) -> str:
    """Subject line of the confirmation sent to the customer."""
    return f"{store.store_name} order confirmation ({order.order_ref})"


def build_store_order_body(order: NormalizedOrder) -> str:
    """Build the plain-text body store staff use to pick and deliver the order.

    Args:
        order: The order to describe.

    Returns:
        Newline-joined body with reference, timestamps, delivery window,
        customer block, items, item-line count and notes.
    """
    lines = [
        f"Order Ref: {order.order_ref}",
        f"Placed: {order.created_at_iso}",
        "",
        f"Delivery: {order.delivery_date} {order.delivery_slot}",
        "",
        "Customer:",
        f"Name: {order.customer_name}",
        f"Phone: {order.phone}",
        f"Email: {order.email or EMAIL_PLACEHOLDER}",
        f"Address: {format_address(order)}",
        "",
        "Items:",
        format_items(order),
        "",
        f"Total item lines: {len(order.items)}",
        f"Notes: {order.notes or NOTES_PLACEHOLDER}",
    ]
    return "\n".join(lines)


def build_customer_confirmation_body(order: NormalizedOrder, store: StoreConfig) -> str:
    """Build the thank-you body sent to the customer.

    Args:
        order: The confirmed order.
        store: Store metadata used for the greeting and the contact line.

    Returns:
        Newline-joined body ending with the store's phone and email for changes.
    """
    lines = [
        f"Thank you for your order with {store.store_name}.",
        "",
        f"Order Ref: {order.order_ref}",
        f"Requested delivery: {order.delivery_date} {order.delivery_slot}",
        "",
        "Items:",
        format_items(order),
        "",
        f"If anything needs changing, contact us at {store.contact_phone} or {store.contact_email}.",
    ]
    return "\n".join(lines)


__all__ = [
    "EMAIL_PLACEHOLDER",
    "NOTES_PLACEHOLDER",
    "build_customer_confirmation_body",
    "build_store_order_body",
    "customer_confirmation_subject",
    "format_address",
    "format_item",
    "format_items",
    "store_order_subject",
]
