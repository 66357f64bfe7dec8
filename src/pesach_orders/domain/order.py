"""Order and store value objects consumed by the mailer.

The storefront hands over orders that were already validated by the order
intake flow. These models only pin the shape: they are frozen, accept both
the snake_case field names used in Python and the camelCase keys of the web
form payload, and treat empty optional strings as absent.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


def _blank_to_none(value: Any) -> Any:
    """Map empty or whitespace-only strings to None, pass anything else through."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class OrderItem(BaseModel):
    """One line of an order.

    Example:
        >>> OrderItem(name="Matzo", qty=2).size is None
        True
        >>> OrderItem.model_validate({"name": "Wine", "size": "750ml", "qty": 1}).size
        '750ml'
    """

    model_config = _MODEL_CONFIG

    name: str
    size: str | None = None
    qty: int

    @field_validator("size", mode="before")
    @classmethod
    def _coerce_blank_size(cls, v: Any) -> Any:
        return _blank_to_none(v)


class NormalizedOrder(BaseModel):
    """A fully validated order ready for formatting and sending.

    Example:
        >>> order = NormalizedOrder.model_validate(
        ...     {
        ...         "orderRef": "PES-001",
        ...         "createdAtIso": "2024-03-01T10:00:00Z",
        ...         "deliveryDate": "2024-03-20",
        ...         "deliverySlot": "9-11am",
        ...         "customerName": "A. Cohen",
        ...         "phone": "0123456789",
        ...         "email": "",
        ...         "addressLine1": "1 High St",
        ...         "postcode": "AB1 2CD",
        ...         "items": [{"name": "Matzo", "qty": 2}],
        ...     }
        ... )
        >>> order.order_ref, order.email
        ('PES-001', None)
    """

    model_config = _MODEL_CONFIG

    order_ref: str
    created_at_iso: str
    delivery_date: str
    delivery_slot: str
    customer_name: str
    phone: str
    email: str | None = None
    address_line1: str
    address_line2: str | None = None
    postcode: str
    items: tuple[OrderItem, ...]
    notes: str | None = None

    @field_validator("email", "address_line2", "notes", mode="before")
    @classmethod
    def _coerce_blank_optionals(cls, v: Any) -> Any:
        """Empty form fields arrive as ``""``; they mean "not provided"."""
        return _blank_to_none(v)


class StoreConfig(BaseModel):
    """Display and contact metadata of the selling store.

    Distinct from the SMTP transport settings: this is what customers see.

    Example:
        >>> store = StoreConfig(store_name="Kosher Corner", contact_phone="020 7946 0000", contact_email="shop@example.com")
        >>> store.store_name
        'Kosher Corner'
    """

    model_config = _MODEL_CONFIG

    store_name: str
    contact_phone: str
    contact_email: str


__all__ = [
    "NormalizedOrder",
    "OrderItem",
    "StoreConfig",
]
