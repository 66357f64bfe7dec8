"""In-memory configuration adapters for testing.

Satisfy the same Protocols as the production adapters without filesystem
access or console output.
"""

from __future__ import annotations

from lib_layered_config import Config

from ...domain.enums import OutputFormat
from ..email.settings import SmtpSettings


def get_config_in_memory(
    *,
    profile: str | None = None,
    start_dir: str | None = None,
) -> Config:
    """Return an empty in-memory Config."""
    return Config({}, {})


def display_config_in_memory(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    profile: str | None = None,
) -> None:
    """No-op display."""


def display_smtp_settings_in_memory(
    settings: SmtpSettings,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
) -> None:
    """No-op display."""


__all__ = [
    "display_config_in_memory",
    "display_smtp_settings_in_memory",
    "get_config_in_memory",
]
