"""Order email senders: store notification and customer confirmation.

Both senders are coroutines with one suspend point, the transport send.
Each call builds its own transport through ``transport_factory``, so the
two sends for an order may run concurrently. Neither retries nor catches:
configuration errors are raised before any network attempt and transport
errors reach the caller unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from email.message import EmailMessage
from typing import Protocol

from pesach_orders.domain.formatting import (
    build_customer_confirmation_body,
    build_store_order_body,
    customer_confirmation_subject,
    store_order_subject,
)
from pesach_orders.domain.order import NormalizedOrder, StoreConfig

from .settings import SmtpSettings, load_smtp_settings_from_env
from .transport import make_transport

logger = logging.getLogger(__name__)


class MessageTransport(Protocol):
    """Anything that can deliver one prepared message."""

    async def send(self, message: EmailMessage) -> None: ...


TransportFactory = Callable[[SmtpSettings], MessageTransport]


def build_message(
    *,
    from_address: str,
    to_address: str,
    subject: str,
    body: str,
    reply_to: str | None = None,
) -> EmailMessage:
    """Compose a plain-text message; ``Reply-To`` is only set when given.

    Example:
        >>> msg = build_message(from_address="shop@example.com", to_address="a@example.com", subject="Hi", body="Hello")
        >>> msg["Reply-To"] is None
        True
    """
    message = EmailMessage()
    message["From"] = from_address
    message["To"] = to_address
    message["Subject"] = subject
    if reply_to:
        message["Reply-To"] = reply_to
    message.set_content(body)
    return message


def _resolve_settings(settings: SmtpSettings | None) -> SmtpSettings:
    """Use the caller's snapshot, or read the environment at call time."""
    return settings if settings is not None else load_smtp_settings_from_env()


async def send_store_order_email(
    order: NormalizedOrder,
    store: StoreConfig,
    *,
    settings: SmtpSettings | None = None,
    transport_factory: TransportFactory = make_transport,
) -> None:
    """Notify the store's order inbox about a new order.

    Args:
        order: Order to report.
        store: Store metadata, used for the subject line.
        settings: SMTP settings snapshot. When None the environment is read now.
        transport_factory: Builds the one-shot transport for this send.

    Raises:
        ConfigurationError: SMTP_FROM, ORDERS_EMAIL or a transport setting is
            missing. Raised before any network I/O.
        aiosmtplib.SMTPException: The server rejected or timed out the send.
        OSError: DNS or network failure.
    """
    resolved = _resolve_settings(settings)
    from_address = resolved.require("from_address")
    to_address = resolved.require("orders_email")
    transport = transport_factory(resolved)
    subject = store_order_subject(order, store)
    message = build_message(
        from_address=from_address,
        to_address=to_address,
        subject=subject,
        body=build_store_order_body(order),
        reply_to=order.email,
    )

    logger.info("Sending store order email", extra={"order_ref": order.order_ref, "subject": subject})
    await transport.send(message)
    logger.info("Store order email sent", extra={"order_ref": order.order_ref})


async def send_customer_confirmation_email(
    order: NormalizedOrder,
    store: StoreConfig,
    *,
    settings: SmtpSettings | None = None,
    transport_factory: TransportFactory = make_transport,
) -> bool:
    """Send the customer a confirmation of their order.

    Replies go to the store inbox, not to the sending mailbox.

    Args:
        order: Confirmed order. Without ``email`` nothing is sent.
        store: Store metadata for the greeting and contact line.
        settings: SMTP settings snapshot. When None the environment is read now.
        transport_factory: Builds the one-shot transport for this send.

    Returns:
        False when the order has no customer email (skipped, nothing
        resolved, no network I/O); True after a completed send.

    Raises:
        ConfigurationError: SMTP_FROM, ORDERS_EMAIL or a transport setting is missing.
        aiosmtplib.SMTPException: The server rejected or timed out the send.
        OSError: DNS or network failure.
    """
    if not order.email:
        logger.info("No customer email, confirmation skipped", extra={"order_ref": order.order_ref})
        return False

    resolved = _resolve_settings(settings)
    from_address = resolved.require("from_address")
    transport = transport_factory(resolved)
    subject = customer_confirmation_subject(order, store)
    message = build_message(
        from_address=from_address,
        to_address=order.email,
        subject=subject,
        body=build_customer_confirmation_body(order, store),
        reply_to=resolved.require("orders_email"),
    )

    logger.info("Sending customer confirmation", extra={"order_ref": order.order_ref, "subject": subject})
    await transport.send(message)
    logger.info("Customer confirmation sent", extra={"order_ref": order.order_ref})
    return True


__all__ = [
    "MessageTransport",
    "TransportFactory",
    "build_message",
    "send_customer_confirmation_email",
    "send_store_order_email",
]
