"""Application layer - port definitions.

Contents:
    * :mod:`.ports` - Callable Protocol definitions for adapter functions
"""

from __future__ import annotations

from .ports import (
    DisplayConfig,
    DisplaySmtpSettings,
    GetConfig,
    InitLogging,
    LoadSmtpSettings,
    LoadStoreConfigFromDict,
    SendCustomerConfirmationEmail,
    SendStoreOrderEmail,
)

__all__ = [
    "DisplayConfig",
    "DisplaySmtpSettings",
    "GetConfig",
    "InitLogging",
    "LoadSmtpSettings",
    "LoadStoreConfigFromDict",
    "SendCustomerConfirmationEmail",
    "SendStoreOrderEmail",
]
