"""Application ports - callable Protocol definitions for adapter functions.

Each Protocol defines a ``__call__`` whose signature matches the adapter
function wired in :mod:`pesach_orders.composition`. Module-level functions
satisfy these structurally (PEP 544). Infrastructure types are imported
under ``TYPE_CHECKING`` only.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.enums import OutputFormat
from ..domain.order import NormalizedOrder, StoreConfig

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.email.settings import SmtpSettings


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class DisplaySmtpSettings(Protocol):
    """Display the SMTP settings snapshot with credentials redacted."""

    def __call__(self, settings: SmtpSettings, *, output_format: OutputFormat = ...) -> None: ...


class LoadStoreConfigFromDict(Protocol):
    """Build StoreConfig from the ``[store]`` configuration section."""

    def __call__(self, config_dict: Mapping[str, Any]) -> StoreConfig: ...


class LoadSmtpSettings(Protocol):
    """Take a snapshot of the SMTP environment."""

    def __call__(self, environ: Mapping[str, str] | None = ...) -> SmtpSettings: ...


class SendStoreOrderEmail(Protocol):
    """Notify the store inbox about an order."""

    async def __call__(
        self, order: NormalizedOrder, store: StoreConfig, *, settings: SmtpSettings | None = ...
    ) -> None: ...


class SendCustomerConfirmationEmail(Protocol):
    """Confirm an order to the customer; False when there is no address."""

    async def __call__(
        self, order: NormalizedOrder, store: StoreConfig, *, settings: SmtpSettings | None = ...
    ) -> bool: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


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
