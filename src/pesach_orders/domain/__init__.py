"""Domain layer - pure business logic with no I/O or framework dependencies.

Contents:
    * :mod:`.order` - Order and store value objects
    * :mod:`.formatting` - Email subjects and plain-text bodies
    * :mod:`.enums` - Domain enumerations (OutputFormat, SendOutcome)
    * :mod:`.errors` - Domain exception types
"""

from __future__ import annotations

from .enums import OutputFormat, SendOutcome
from .errors import ConfigurationError
from .formatting import (
    build_customer_confirmation_body,
    build_store_order_body,
    customer_confirmation_subject,
    format_address,
    format_items,
    store_order_subject,
)
from .order import NormalizedOrder, OrderItem, StoreConfig

__all__ = [
    # Models
    "NormalizedOrder",
    "OrderItem",
    "StoreConfig",
    # Formatting
    "build_customer_confirmation_body",
    "build_store_order_body",
    "customer_confirmation_subject",
    "format_address",
    "format_items",
    "store_order_subject",
    # Enums
    "OutputFormat",
    "SendOutcome",
    # Errors
    "ConfigurationError",
]
