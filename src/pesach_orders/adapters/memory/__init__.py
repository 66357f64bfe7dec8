"""In-memory adapter implementations for testing.

No filesystem, no SMTP, no logging framework.

Contents:
    * :mod:`.config` - In-memory configuration adapters
    * :mod:`.email` - Spy transport and environment-free settings loader
    * :mod:`.logging` - In-memory logging adapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import (
    display_config_in_memory,
    display_smtp_settings_in_memory,
    get_config_in_memory,
)
from .email import TransportSpy, load_smtp_settings_in_memory
from .logging import init_logging_in_memory

# Static conformance assertions
if TYPE_CHECKING:
    from pesach_orders.application.ports import (
        DisplayConfig,
        DisplaySmtpSettings,
        GetConfig,
        InitLogging,
        LoadSmtpSettings,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_display_smtp_settings: DisplaySmtpSettings = display_smtp_settings_in_memory
    _assert_load_smtp_settings: LoadSmtpSettings = load_smtp_settings_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory

__all__ = [
    "TransportSpy",
    "display_config_in_memory",
    "display_smtp_settings_in_memory",
    "get_config_in_memory",
    "init_logging_in_memory",
    "load_smtp_settings_in_memory",
]
