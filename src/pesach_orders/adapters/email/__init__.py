"""Email adapter - order emails over SMTP.

Structure:
    * :mod:`.settings` - SMTP settings snapshot from the environment
    * :mod:`.transport` - One-shot aiosmtplib transport with pinned TLS name
    * :mod:`.orders` - Store notification and customer confirmation senders

Contents:
    * :class:`.settings.SmtpSettings` - SMTP settings container
    * :func:`.settings.load_smtp_settings_from_env` - Environment loader
    * :func:`.transport.make_transport` - Transport factory
    * :func:`.orders.send_store_order_email` - Store order notification
    * :func:`.orders.send_customer_confirmation_email` - Customer confirmation
"""

from __future__ import annotations

from .orders import send_customer_confirmation_email, send_store_order_email
from .settings import SmtpSettings, env_timeout_ms, load_smtp_settings_from_env, require_env
from .transport import MailTransport, TransportOptions, build_transport_options, make_transport

__all__ = [
    "MailTransport",
    "SmtpSettings",
    "TransportOptions",
    "build_transport_options",
    "env_timeout_ms",
    "load_smtp_settings_from_env",
    "make_transport",
    "require_env",
    "send_customer_confirmation_email",
    "send_store_order_email",
]
