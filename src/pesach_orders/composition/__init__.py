"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

# Configuration services
from ..adapters.config.display import display_config, display_smtp_settings
from ..adapters.config.loader import get_config
from ..adapters.config.store import load_store_config_from_dict

# Email services
from ..adapters.email.orders import send_customer_confirmation_email, send_store_order_email
from ..adapters.email.settings import load_smtp_settings_from_env

# Logging services
from ..adapters.logging.setup import init_logging

# Static conformance assertions, checked by pyright at type-check time.
if TYPE_CHECKING:
    from ..adapters.email.settings import SmtpSettings
    from ..adapters.memory.email import TransportSpy
    from ..application.ports import (
        DisplayConfig,
        DisplaySmtpSettings,
        GetConfig,
        InitLogging,
        LoadSmtpSettings,
        LoadStoreConfigFromDict,
        SendCustomerConfirmationEmail,
        SendStoreOrderEmail,
    )

    _assert_get_config: GetConfig = get_config
    _assert_display_config: DisplayConfig = display_config
    _assert_display_smtp_settings: DisplaySmtpSettings = display_smtp_settings
    _assert_load_store_config: LoadStoreConfigFromDict = load_store_config_from_dict
    _assert_load_smtp_settings: LoadSmtpSettings = load_smtp_settings_from_env
    _assert_send_store_order_email: SendStoreOrderEmail = send_store_order_email
    _assert_send_customer_confirmation_email: SendCustomerConfirmationEmail = send_customer_confirmation_email
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    display_config: DisplayConfig
    display_smtp_settings: DisplaySmtpSettings
    load_store_config_from_dict: LoadStoreConfigFromDict
    load_smtp_settings: LoadSmtpSettings
    send_store_order_email: SendStoreOrderEmail
    send_customer_confirmation_email: SendCustomerConfirmationEmail
    init_logging: InitLogging


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        display_config=display_config,
        display_smtp_settings=display_smtp_settings,
        load_store_config_from_dict=load_store_config_from_dict,
        load_smtp_settings=load_smtp_settings_from_env,
        send_store_order_email=send_store_order_email,
        send_customer_confirmation_email=send_customer_confirmation_email,
        init_logging=init_logging,
    )


def build_testing(
    *,
    spy: TransportSpy | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    The order senders stay real; only their transport is replaced by the
    spy, so formatting and configuration resolution are exercised.

    Args:
        spy: TransportSpy capturing sent messages. A fresh one when None.
        environ: Environment the SMTP settings are read from. Empty when None;
            ``os.environ`` is never consulted.

    Returns:
        AppServices container with in-memory adapters.
    """
    from ..adapters.memory import (
        TransportSpy,
        display_config_in_memory,
        display_smtp_settings_in_memory,
        get_config_in_memory,
        init_logging_in_memory,
        load_smtp_settings_in_memory,
    )

    transport_spy = spy if spy is not None else TransportSpy()
    fixed_environ = dict(environ) if environ is not None else {}

    def _load_smtp_settings(environ: Mapping[str, str] | None = None) -> SmtpSettings:
        return load_smtp_settings_in_memory(environ if environ is not None else fixed_environ)

    return AppServices(
        get_config=get_config_in_memory,
        display_config=display_config_in_memory,
        display_smtp_settings=display_smtp_settings_in_memory,
        load_store_config_from_dict=load_store_config_from_dict,
        load_smtp_settings=_load_smtp_settings,
        send_store_order_email=transport_spy.send_store_order_email,
        send_customer_confirmation_email=transport_spy.send_customer_confirmation_email,
        init_logging=init_logging_in_memory,
    )


__all__ = [
    # Configuration
    "get_config",
    "display_config",
    "display_smtp_settings",
    "load_store_config_from_dict",
    # Email
    "load_smtp_settings_from_env",
    "send_store_order_email",
    "send_customer_confirmation_email",
    # Logging
    "init_logging",
    # Composition
    "AppServices",
    "build_production",
    "build_testing",
]
