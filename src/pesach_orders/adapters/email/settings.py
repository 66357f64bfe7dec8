"""SMTP settings resolved from the process environment.

Provides the timeout resolver and the mandatory-variable accessor, plus the
``SmtpSettings`` model: one immutable snapshot of every SMTP-related
environment variable, built once by the caller and passed into the senders.

Environment variables:
    * ``SMTP_HOST`` (required) - mail server hostname
    * ``SMTP_HOST_IP`` - literal IP to dial instead of resolving ``SMTP_HOST``
    * ``SMTP_PORT`` (required) - 465 selects implicit TLS
    * ``SMTP_USER`` / ``SMTP_PASS`` (required) - credentials
    * ``SMTP_FROM`` (required) - sender address
    * ``ORDERS_EMAIL`` (required) - store order inbox, confirmation reply-to
    * ``SMTP_CONNECTION_TIMEOUT_MS`` / ``SMTP_GREETING_TIMEOUT_MS`` /
      ``SMTP_SOCKET_TIMEOUT_MS`` / ``SMTP_DNS_TIMEOUT_MS`` - optional timeouts
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from pesach_orders.domain.errors import ConfigurationError

DEFAULT_CONNECTION_TIMEOUT_MS: Final[float] = 10_000.0
DEFAULT_GREETING_TIMEOUT_MS: Final[float] = 10_000.0
DEFAULT_SOCKET_TIMEOUT_MS: Final[float] = 15_000.0
DEFAULT_DNS_TIMEOUT_MS: Final[float] = 8_000.0

#: Settings field -> environment variable it is read from.
ENV_VARIABLES: Final[dict[str, str]] = {
    "host": "SMTP_HOST",
    "host_ip": "SMTP_HOST_IP",
    "port": "SMTP_PORT",
    "username": "SMTP_USER",
    "password": "SMTP_PASS",
    "from_address": "SMTP_FROM",
    "orders_email": "ORDERS_EMAIL",
    "connection_timeout_ms": "SMTP_CONNECTION_TIMEOUT_MS",
    "greeting_timeout_ms": "SMTP_GREETING_TIMEOUT_MS",
    "socket_timeout_ms": "SMTP_SOCKET_TIMEOUT_MS",
    "dns_timeout_ms": "SMTP_DNS_TIMEOUT_MS",
}


def _environ(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def env_timeout_ms(name: str, fallback_ms: float, environ: Mapping[str, str] | None = None) -> float:
    """Return a positive, finite duration from the environment or the fallback.

    Never raises: unset, empty, non-numeric, zero, negative and non-finite
    values all yield ``fallback_ms``. Only plain decimal notation counts as
    numeric: digit separators (``1_000``) and prefixed integer literals
    (``0x10``) fall back too.

    Args:
        name: Environment variable holding a duration in milliseconds.
        fallback_ms: Value returned when the variable is missing or unusable.
        environ: Mapping to read from. Defaults to ``os.environ`` at call time.

    Returns:
        Parsed milliseconds or the fallback.

    Example:
        >>> env_timeout_ms("SMTP_SOCKET_TIMEOUT_MS", 15000, {"SMTP_SOCKET_TIMEOUT_MS": "2500"})
        2500.0
        >>> env_timeout_ms("SMTP_SOCKET_TIMEOUT_MS", 15000, {"SMTP_SOCKET_TIMEOUT_MS": "-1"})
        15000
        >>> env_timeout_ms("SMTP_SOCKET_TIMEOUT_MS", 15000, {"SMTP_SOCKET_TIMEOUT_MS": "soon"})
        15000
    """
    raw = _environ(environ).get(name)
    if not raw or "_" in raw:
        return fallback_ms
    try:
        parsed = float(raw)
    except ValueError:
        return fallback_ms
    if not math.isfinite(parsed) or parsed <= 0:
        return fallback_ms
    return parsed


def require_env(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Return a mandatory environment value or fail with ConfigurationError.

    Args:
        name: Environment variable name.
        environ: Mapping to read from. Defaults to ``os.environ`` at call time.

    Returns:
        The value with surrounding whitespace removed.

    Raises:
        ConfigurationError: When the variable is unset or blank.

    Example:
        >>> require_env("SMTP_FROM", {"SMTP_FROM": "shop@example.com"})
        'shop@example.com'
        >>> require_env("SMTP_FROM", {})  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ConfigurationError: Missing required environment variable: SMTP_FROM
    """
    value = (_environ(environ).get(name) or "").strip()
    if not value:
        raise ConfigurationError(f"Missing required environment variable: {name}")
    return value


def _optional_env(name: str, environ: Mapping[str, str]) -> str | None:
    value = (environ.get(name) or "").strip()
    return value or None


class SmtpSettings(BaseModel):
    """Immutable snapshot of the SMTP environment.

    Every field is optional at construction so a snapshot can always be
    taken; senders resolve the fields they need through :meth:`require`,
    which fails with the name of the missing environment variable.

    Example:
        >>> settings = SmtpSettings(host="mail.example.com", port=587)
        >>> settings.require("host")
        'mail.example.com'
        >>> settings.socket_timeout_ms
        15000.0
    """

    model_config = ConfigDict(frozen=True)

    host: str | None = None
    host_ip: str | None = None
    port: int | None = None
    username: str | None = None
    password: str | None = None
    from_address: str | None = None
    orders_email: str | None = None
    connection_timeout_ms: float = DEFAULT_CONNECTION_TIMEOUT_MS
    greeting_timeout_ms: float = DEFAULT_GREETING_TIMEOUT_MS
    socket_timeout_ms: float = DEFAULT_SOCKET_TIMEOUT_MS
    dns_timeout_ms: float = DEFAULT_DNS_TIMEOUT_MS

    @field_validator(
        "host",
        "host_ip",
        "username",
        "password",
        "from_address",
        "orders_email",
        mode="before",
    )
    @classmethod
    def _coerce_blank_to_none(cls, v: Any) -> Any:
        """Treat blank strings as "not configured" and strip the rest."""
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("port")
    @classmethod
    def _validate_port(cls, v: int | None) -> int | None:
        if v is not None and not 1 <= v <= 65535:
            raise ValueError(f"port must be 1-65535, got {v}")
        return v

    @field_validator(
        "connection_timeout_ms",
        "greeting_timeout_ms",
        "socket_timeout_ms",
        "dns_timeout_ms",
    )
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError(f"timeout must be positive, got {v}")
        return v

    def as_environ(self) -> dict[str, str]:
        """Return the configured fields keyed by their environment variable.

        Example:
            >>> SmtpSettings(host="mail.example.com", port=587).as_environ()["SMTP_PORT"]
            '587'
        """
        return {ENV_VARIABLES[name]: str(value) for name, value in self if value is not None}

    def require(self, field: str) -> str:
        """Return a mandatory setting through :func:`require_env`.

        Args:
            field: Name of a field, e.g. ``"orders_email"``.

        Returns:
            The configured value.

        Raises:
            ConfigurationError: Naming the environment variable when unset.
        """
        return require_env(ENV_VARIABLES[field], self.as_environ())

    def require_port(self) -> int:
        """Return the SMTP port or fail with ConfigurationError."""
        return int(self.require("port"))

    def __repr__(self) -> str:
        """Return string representation with the password redacted.

        Example:
            >>> "hunter2" in repr(SmtpSettings(password="hunter2"))
            False
        """
        fields: list[str] = []
        for name, value in self:
            if name == "password" and value is not None:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"SmtpSettings({', '.join(fields)})"


def _parse_port(environ: Mapping[str, str]) -> int | None:
    raw = _optional_env(ENV_VARIABLES["port"], environ)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_VARIABLES['port']} must be an integer port number, got {raw!r}") from exc


def load_smtp_settings_from_env(environ: Mapping[str, str] | None = None) -> SmtpSettings:
    """Take a snapshot of the SMTP environment.

    Missing mandatory variables are not an error here; they surface when a
    sender resolves them. Timeouts fall back to their defaults through
    :func:`env_timeout_ms`.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ`` at call time.

    Returns:
        The settings snapshot.

    Raises:
        ConfigurationError: When ``SMTP_PORT`` is not an integer in 1-65535.

    Example:
        >>> settings = load_smtp_settings_from_env(
        ...     {"SMTP_HOST": "mail.example.com", "SMTP_PORT": "465", "SMTP_DNS_TIMEOUT_MS": "0"}
        ... )
        >>> settings.port, settings.dns_timeout_ms
        (465, 8000.0)
    """
    env = _environ(environ)
    raw: dict[str, Any] = {
        "host": _optional_env(ENV_VARIABLES["host"], env),
        "host_ip": _optional_env(ENV_VARIABLES["host_ip"], env),
        "port": _parse_port(env),
        "username": _optional_env(ENV_VARIABLES["username"], env),
        "password": _optional_env(ENV_VARIABLES["password"], env),
        "from_address": _optional_env(ENV_VARIABLES["from_address"], env),
        "orders_email": _optional_env(ENV_VARIABLES["orders_email"], env),
        "connection_timeout_ms": env_timeout_ms(
            ENV_VARIABLES["connection_timeout_ms"], DEFAULT_CONNECTION_TIMEOUT_MS, env
        ),
        "greeting_timeout_ms": env_timeout_ms(ENV_VARIABLES["greeting_timeout_ms"], DEFAULT_GREETING_TIMEOUT_MS, env),
        "socket_timeout_ms": env_timeout_ms(ENV_VARIABLES["socket_timeout_ms"], DEFAULT_SOCKET_TIMEOUT_MS, env),
        "dns_timeout_ms": env_timeout_ms(ENV_VARIABLES["dns_timeout_ms"], DEFAULT_DNS_TIMEOUT_MS, env),
    }
    try:
        return SmtpSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid SMTP settings: {exc}") from exc


__all__ = [
    "DEFAULT_CONNECTION_TIMEOUT_MS",
    "DEFAULT_DNS_TIMEOUT_MS",
    "DEFAULT_GREETING_TIMEOUT_MS",
    "DEFAULT_SOCKET_TIMEOUT_MS",
    "ENV_VARIABLES",
    "SmtpSettings",
    "env_timeout_ms",
    "load_smtp_settings_from_env",
    "require_env",
]
