"""In-memory email adapters for testing.

Runs the real order senders (configuration resolution, formatting, message
building) against a spy transport that records messages instead of opening
SMTP connections.

Contents:
    * :class:`TransportSpy` - Transport factory that captures sent messages.
    * :func:`load_smtp_settings_in_memory` - Settings loader that never reads ``os.environ``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from email.message import EmailMessage

from pesach_orders.domain.order import NormalizedOrder, StoreConfig

from ..email.orders import send_customer_confirmation_email, send_store_order_email
from ..email.settings import SmtpSettings, load_smtp_settings_from_env
from ..email.transport import build_transport_options


def _empty_message_list() -> list[EmailMessage]:
    return []


def _empty_settings_list() -> list[SmtpSettings]:
    return []


@dataclass
class _RecordingTransport:
    spy: TransportSpy

    async def send(self, message: EmailMessage) -> None:
        self.spy.sent_messages.append(message)
        if self.spy.raise_exception is not None:
            raise self.spy.raise_exception


@dataclass
class TransportSpy:
    """Captures transports built and messages sent.

    Each test should create its own spy. ``factory`` has the
    ``transport_factory`` signature of the senders; the two ``send_*``
    methods are the real senders bound to that factory, matching the
    send ports of ``AppServices``.

    Attributes:
        built_with: Settings passed to every transport built, in order.
        sent_messages: Every message handed to a transport.
        raise_exception: When set, each send records the message, then raises this.

    Example:
        >>> import asyncio
        >>> spy = TransportSpy()
        >>> transport = spy.factory(SmtpSettings(host="mail.example.com"))
        >>> msg = EmailMessage()
        >>> msg["Subject"] = "Hi"
        >>> asyncio.run(transport.send(msg))
        >>> [m["Subject"] for m in spy.sent_messages]
        ['Hi']
    """

    built_with: list[SmtpSettings] = field(default_factory=_empty_settings_list)
    sent_messages: list[EmailMessage] = field(default_factory=_empty_message_list)
    raise_exception: Exception | None = None

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.built_with.clear()
        self.sent_messages.clear()
        self.raise_exception = None

    def factory(self, settings: SmtpSettings) -> _RecordingTransport:
        """Build a recording transport; performs no I/O.

        Mandatory transport settings are checked like the real factory does.
        """
        build_transport_options(settings)
        self.built_with.append(settings)
        return _RecordingTransport(self)

    async def send_store_order_email(
        self, order: NormalizedOrder, store: StoreConfig, *, settings: SmtpSettings | None = None
    ) -> None:
        await send_store_order_email(order, store, settings=settings, transport_factory=self.factory)

    async def send_customer_confirmation_email(
        self, order: NormalizedOrder, store: StoreConfig, *, settings: SmtpSettings | None = None
    ) -> bool:
        return await send_customer_confirmation_email(order, store, settings=settings, transport_factory=self.factory)


def load_smtp_settings_in_memory(environ: Mapping[str, str] | None = None) -> SmtpSettings:
    """Parse settings from ``environ`` only; an absent mapping means an empty environment."""
    return load_smtp_settings_from_env(environ if environ is not None else {})


__all__ = [
    "TransportSpy",
    "load_smtp_settings_in_memory",
]
