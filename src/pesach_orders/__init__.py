"""Public package surface: order models, email formatting and senders.

Routes imports through the architectural layers:
- Domain exports: order models and the plain-text email builders
- Composition exports: wired senders and configuration
- Metadata: package information
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Settings snapshot
from .adapters.email.settings import SmtpSettings, load_smtp_settings_from_env

# Composition exports (wired adapters)
from .composition import get_config, send_customer_confirmation_email, send_store_order_email

# Domain exports
from .domain import (
    ConfigurationError,
    NormalizedOrder,
    OrderItem,
    StoreConfig,
    build_customer_confirmation_body,
    build_store_order_body,
)

__all__ = [
    "ConfigurationError",
    "NormalizedOrder",
    "OrderItem",
    "SmtpSettings",
    "StoreConfig",
    "build_customer_confirmation_body",
    "build_store_order_body",
    "get_config",
    "load_smtp_settings_from_env",
    "print_info",
    "send_customer_confirmation_email",
    "send_store_order_email",
]
