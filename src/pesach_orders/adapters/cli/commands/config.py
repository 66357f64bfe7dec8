"""Configuration display command.

Contents:
    * :func:`cli_config` - Display merged configuration and the SMTP environment.
"""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click

from pesach_orders.domain.enums import OutputFormat
from pesach_orders.domain.errors import ConfigurationError

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


@click.command("config", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format (human-readable or JSON)",
)
@click.option(
    "--section",
    type=str,
    default=None,
    help="Show only a specific configuration section (e.g., 'store')",
)
@click.option(
    "--smtp/--no-smtp",
    "show_smtp",
    default=True,
    help="Also show the SMTP environment (password redacted)",
)
@click.pass_context
def cli_config(ctx: click.Context, output_format: str, section: str | None, show_smtp: bool) -> None:
    """Display the merged configuration and the SMTP environment snapshot.

    Precedence: defaults -> app -> host -> user -> dotenv -> env
    """
    cli_ctx = get_cli_context(ctx)
    fmt = OutputFormat(output_format.lower())

    extra = {"command": "config", "format": fmt.value, "profile": cli_ctx.profile}
    with lib_log_rich.runtime.bind(job_id="cli-config", extra=extra):
        logger.info("Displaying configuration", extra={"format": fmt.value, "section": section})
        click.echo()
        try:
            cli_ctx.services.display_config(
                cli_ctx.config, output_format=fmt, section=section, profile=cli_ctx.profile
            )
        except ValueError as exc:
            click.echo(f"\nError: {exc}", err=True)
            raise SystemExit(ExitCode.INVALID_ARGUMENT) from exc

        if show_smtp and section is None:
            try:
                settings = cli_ctx.services.load_smtp_settings()
            except ConfigurationError as exc:
                click.echo(f"\nError: Configuration error - {exc}", err=True)
                raise SystemExit(ExitCode.CONFIG_ERROR) from exc
            click.echo()
            cli_ctx.services.display_smtp_settings(settings, output_format=fmt)


__all__ = ["cli_config"]
