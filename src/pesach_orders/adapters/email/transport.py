"""One-shot SMTP transport built from :class:`SmtpSettings`.

Each send builds its own :class:`MailTransport`; nothing is pooled or
cached, so concurrent sends never share a connection. Building a transport
performs no network I/O; DNS, connect and delivery all happen inside
:meth:`MailTransport.send`.

When ``SMTP_HOST_IP`` is set the transport dials that address instead of
resolving ``SMTP_HOST``, while certificate validation stays bound to
``SMTP_HOST``. Without the override the hostname is resolved under the DNS
timeout and the resolved address is dialed the same way, so both paths
verify the certificate against the configured hostname.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import socket
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any, Final

import aiosmtplib

from .settings import SmtpSettings

logger = logging.getLogger(__name__)

#: Port whose convention is TLS from the first byte instead of STARTTLS.
IMPLICIT_TLS_PORT: Final[int] = 465


@dataclass(frozen=True, slots=True)
class TransportOptions:
    """Resolved connection parameters for one send.

    Attributes:
        dial_host: Address or hostname the TCP connection goes to.
        tls_server_name: Hostname the server certificate must match.
        port: SMTP port.
        use_tls: Implicit TLS on connect (port 465) instead of STARTTLS.
        username: SMTP AUTH user.
        password: SMTP AUTH password.
        connection_timeout: Seconds allowed per step while connecting.
        greeting_timeout: Extra seconds the whole connect phase may take
            on top of ``connection_timeout`` before the server greeting
            counts as overdue. aiosmtplib reads the greeting inside
            ``connect()``, so it is not a separate deadline: a slow TCP
            connect leaves less time for the greeting and a fast one more.
        socket_timeout: Seconds of inactivity allowed per SMTP command.
        dns_timeout: Seconds allowed for resolving ``dial_host``.
    """

    dial_host: str
    tls_server_name: str
    port: int
    use_tls: bool
    username: str
    password: str
    connection_timeout: float
    greeting_timeout: float
    socket_timeout: float
    dns_timeout: float

    @property
    def dials_literal_ip(self) -> bool:
        """True when ``dial_host`` needs no DNS lookup."""
        return is_ip_literal(self.dial_host)

    def __repr__(self) -> str:
        return (
            f"TransportOptions(dial_host={self.dial_host!r}, tls_server_name={self.tls_server_name!r}, "
            f"port={self.port!r}, use_tls={self.use_tls!r}, username={self.username!r}, password='[REDACTED]', "
            f"connection_timeout={self.connection_timeout!r}, greeting_timeout={self.greeting_timeout!r}, "
            f"socket_timeout={self.socket_timeout!r}, dns_timeout={self.dns_timeout!r})"
        )


def is_ip_literal(host: str) -> bool:
    """Return True for IPv4/IPv6 literals.

    Example:
        >>> is_ip_literal("203.0.113.5"), is_ip_literal("2001:db8::1"), is_ip_literal("mail.example.com")
        (True, True, False)
    """
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def build_transport_options(settings: SmtpSettings) -> TransportOptions:
    """Resolve the mandatory SMTP settings into transport options.

    Pure: reads only ``settings``.

    Args:
        settings: SMTP settings snapshot.

    Returns:
        Options for a single send.

    Raises:
        ConfigurationError: When SMTP_HOST, SMTP_PORT, SMTP_USER or
            SMTP_PASS is missing.

    Example:
        >>> opts = build_transport_options(
        ...     SmtpSettings(host="mail.example.com", host_ip="203.0.113.5", port=465, username="u", password="p")
        ... )
        >>> opts.dial_host, opts.tls_server_name, opts.use_tls, opts.socket_timeout
        ('203.0.113.5', 'mail.example.com', True, 15.0)
    """
    host = settings.require("host")
    port = settings.require_port()
    username = settings.require("username")
    password = settings.require("password")
    return TransportOptions(
        dial_host=settings.host_ip or host,
        tls_server_name=host,
        port=port,
        use_tls=port == IMPLICIT_TLS_PORT,
        username=username,
        password=password,
        connection_timeout=settings.connection_timeout_ms / 1000,
        greeting_timeout=settings.greeting_timeout_ms / 1000,
        socket_timeout=settings.socket_timeout_ms / 1000,
        dns_timeout=settings.dns_timeout_ms / 1000,
    )


class HostnamePinnedSSLContext(ssl.SSLContext):
    """SSL context that validates every peer against one fixed hostname.

    The event loop passes the dialed address as ``server_hostname``; this
    context replaces it with :attr:`pinned_hostname` for both SNI and the
    certificate name check. Used for implicit TLS and for STARTTLS.
    """

    pinned_hostname: str = ""

    def wrap_bio(
        self,
        incoming: ssl.MemoryBIO,
        outgoing: ssl.MemoryBIO,
        server_side: bool = False,
        server_hostname: str | bytes | None = None,
        session: ssl.SSLSession | None = None,
    ) -> ssl.SSLObject:
        return super().wrap_bio(
            incoming,
            outgoing,
            server_side=server_side,
            server_hostname=self.pinned_hostname,
            session=session,
        )


def create_pinned_tls_context(hostname: str) -> HostnamePinnedSSLContext:
    """Return a verifying client TLS context bound to ``hostname``.

    Example:
        >>> ctx = create_pinned_tls_context("mail.example.com")
        >>> ctx.pinned_hostname, ctx.check_hostname, ctx.verify_mode == ssl.CERT_REQUIRED
        ('mail.example.com', True, True)
    """
    context = HostnamePinnedSSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.load_default_certs()
    context.pinned_hostname = hostname
    return context


class MailTransport:
    """Single-use SMTP client for one message.

    Example:
        >>> transport = MailTransport(
        ...     build_transport_options(SmtpSettings(host="mail.example.com", port=587, username="u", password="p"))
        ... )
        >>> transport.options.use_tls
        False
    """

    def __init__(self, options: TransportOptions) -> None:
        self.options = options

    def build_client(self, dial_address: str) -> aiosmtplib.SMTP:
        """Create the aiosmtplib client; no connection is opened."""
        opts = self.options
        return aiosmtplib.SMTP(
            hostname=dial_address,
            port=opts.port,
            use_tls=opts.use_tls,
            start_tls=False if opts.use_tls else None,
            tls_context=create_pinned_tls_context(opts.tls_server_name),
            timeout=opts.connection_timeout,
        )

    async def resolve_dial_address(self) -> str:
        """Return the address to dial, resolving DNS under the DNS timeout.

        Raises:
            aiosmtplib.SMTPConnectTimeoutError: When resolution exceeds the DNS timeout.
            OSError: When the name cannot be resolved.
        """
        opts = self.options
        if opts.dials_literal_ip:
            return opts.dial_host
        loop = asyncio.get_running_loop()
        try:
            infos: list[tuple[Any, ...]] = await asyncio.wait_for(
                loop.getaddrinfo(opts.dial_host, opts.port, type=socket.SOCK_STREAM),
                timeout=opts.dns_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise aiosmtplib.SMTPConnectTimeoutError(
                f"Timed out resolving {opts.dial_host} after {opts.dns_timeout}s"
            ) from exc
        if not infos:
            raise OSError(f"No address found for {opts.dial_host}")
        return str(infos[0][4][0])

    async def send(self, message: EmailMessage) -> None:
        """Connect, authenticate, deliver ``message`` and disconnect.

        Errors from DNS, connect, TLS, AUTH or delivery propagate unchanged.
        The connection is always closed, also on failure.

        Raises:
            aiosmtplib.SMTPException: On protocol-level failures and timeouts.
            OSError: On network failures.
        """
        opts = self.options
        dial_address = await self.resolve_dial_address()
        client = self.build_client(dial_address)
        logger.debug(
            "Connecting to SMTP server",
            extra={"address": dial_address, "port": opts.port, "server_name": opts.tls_server_name},
        )
        try:
            try:
                await asyncio.wait_for(
                    client.connect(timeout=opts.connection_timeout),
                    timeout=opts.connection_timeout + opts.greeting_timeout,
                )
            except asyncio.TimeoutError as exc:
                if isinstance(exc, aiosmtplib.SMTPException):
                    raise
                raise aiosmtplib.SMTPConnectTimeoutError(
                    f"Timed out waiting for greeting from {opts.tls_server_name} ({dial_address}:{opts.port})"
                ) from exc
            client.timeout = opts.socket_timeout
            await client.login(opts.username, opts.password)
            await client.send_message(message)
            await client.quit()
        finally:
            if client.is_connected:
                client.close()


def make_transport(settings: SmtpSettings) -> MailTransport:
    """Build a fresh one-shot transport from settings.

    Raises:
        ConfigurationError: When a mandatory SMTP setting is missing.
    """
    return MailTransport(build_transport_options(settings))


__all__ = [
    "IMPLICIT_TLS_PORT",
    "HostnamePinnedSSLContext",
    "MailTransport",
    "TransportOptions",
    "build_transport_options",
    "create_pinned_tls_context",
    "is_ip_literal",
    "make_transport",
]
