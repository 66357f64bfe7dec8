"""Display layered configuration and the SMTP environment snapshot.

The layered part delegates to lib_layered_config's Rich display; the SMTP
part renders :class:`SmtpSettings` with the password redacted, so operators
can check what a send would use without leaking credentials.
"""

from __future__ import annotations

import json

import lib_log_rich.runtime
from lib_layered_config import Config
from lib_layered_config import OutputFormat as LibOutputFormat
from lib_layered_config import display_config as _lib_display
from rich.console import Console
from rich.table import Table

from pesach_orders.adapters.email.settings import ENV_VARIABLES, SmtpSettings
from pesach_orders.domain.enums import OutputFormat

_REDACTED = "[REDACTED]"
_UNSET = "(not set)"


def _flush_logs() -> None:
    """Keep pending log lines from interleaving with the display."""
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()


def display_config(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    console: Console | None = None,
    profile: str | None = None,
) -> None:
    """Display the merged layered configuration.

    Args:
        config: Already-loaded layered configuration object.
        output_format: HUMAN for TOML-like display, JSON for JSON.
        section: Only display this section (e.g. ``store``).
        console: Rich Console for output; mainly for tests.
        profile: Profile name to include in provenance comments.

    Raises:
        ValueError: If the requested section does not exist.
    """
    _flush_logs()
    lib_format = LibOutputFormat(output_format.value)
    _lib_display(config, output_format=lib_format, section=section, profile=profile, console=console)


def smtp_settings_rows(settings: SmtpSettings) -> list[tuple[str, str]]:
    """Return ``(ENV_VARIABLE, display value)`` pairs with the password redacted.

    Example:
        >>> rows = dict(smtp_settings_rows(SmtpSettings(host="mail.example.com", password="secret")))
        >>> rows["SMTP_HOST"], rows["SMTP_PASS"], rows["ORDERS_EMAIL"]
        ('mail.example.com', '[REDACTED]', '(not set)')
    """
    rows: list[tuple[str, str]] = []
    for field_name, env_name in ENV_VARIABLES.items():
        value = getattr(settings, field_name)
        if value is None:
            shown = _UNSET
        elif field_name == "password":
            shown = _REDACTED
        else:
            shown = str(value)
        rows.append((env_name, shown))
    return rows


def display_smtp_settings(
    settings: SmtpSettings,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    console: Console | None = None,
) -> None:
    """Render the SMTP settings snapshot as a table or as JSON.

    Args:
        settings: Snapshot taken from the environment.
        output_format: HUMAN renders a Rich table, JSON a flat object.
        console: Rich Console for output; mainly for tests.
    """
    _flush_logs()
    out = console if console is not None else Console()
    rows = smtp_settings_rows(settings)
    if output_format is OutputFormat.JSON:
        out.print_json(json.dumps(dict(rows)))
        return
    table = Table(title="SMTP environment")
    table.add_column("Variable")
    table.add_column("Value")
    for env_name, shown in rows:
        table.add_row(env_name, shown)
    out.print(table)


__all__ = [
    "display_config",
    "display_smtp_settings",
    "smtp_settings_rows",
]
