"""Shared helpers for the order commands.

Contains order file loading, configuration resolution and the unified
mapping of failures to exit codes.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

import aiosmtplib
import rich_click as click
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from pesach_orders import __init__conf__
from pesach_orders.adapters.email.settings import SmtpSettings
from pesach_orders.domain.errors import ConfigurationError
from pesach_orders.domain.order import NormalizedOrder, StoreConfig

from ..context import CLIContext
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)

#: Failures raised by DNS, connect, TLS, AUTH or delivery.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError)


def fail(
    exc: BaseException,
    log_message: str,
    user_message: str,
    *,
    exit_code: ExitCode = ExitCode.GENERAL_ERROR,
    log_traceback: bool = False,
) -> NoReturn:
    """Log, tell the operator, and exit with ``exit_code``."""
    logger.error(
        log_message,
        extra={"error": str(exc), "error_type": type(exc).__name__},
        exc_info=log_traceback,
    )
    click.echo(f"\nError: {user_message} - {exc}", err=True)
    raise SystemExit(exit_code)


def load_order_file(path: Path) -> NormalizedOrder:
    """Read and validate an order JSON document.

    Raises:
        SystemExit: FILE_NOT_FOUND when the file is missing, INVALID_ARGUMENT
            when it is not UTF-8 or not a valid order, GENERAL_ERROR when it
            cannot be read.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        fail(exc, "Order file not found", "Order file not found", exit_code=ExitCode.FILE_NOT_FOUND)
    except UnicodeDecodeError as exc:
        fail(exc, "Order file is not UTF-8", "Invalid order document", exit_code=ExitCode.INVALID_ARGUMENT)
    except OSError as exc:
        fail(exc, "Order file unreadable", "Cannot read order file")
    try:
        return NormalizedOrder.model_validate_json(raw)
    except ValidationError as exc:
        fail(exc, "Invalid order document", "Invalid order document", exit_code=ExitCode.INVALID_ARGUMENT)


def load_store_config(cli_ctx: CLIContext) -> StoreConfig:
    """Resolve the ``[store]`` section, exiting with CONFIG_ERROR when incomplete."""
    try:
        return cli_ctx.services.load_store_config_from_dict(cli_ctx.config.as_dict())
    except ConfigurationError as exc:
        click.echo(f"See: {__init__conf__.shell_command} config --section store", err=True)
        fail(exc, "Store configuration error", "Configuration error", exit_code=ExitCode.CONFIG_ERROR)


def load_smtp_settings(cli_ctx: CLIContext) -> SmtpSettings:
    """Load a .env from the working directory, then snapshot the SMTP environment.

    Variables already present in the process environment win over the file.
    """
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path, override=False)
    try:
        return cli_ctx.services.load_smtp_settings()
    except ConfigurationError as exc:
        fail(exc, "SMTP configuration error", "Configuration error", exit_code=ExitCode.CONFIG_ERROR)


def execute_with_send_error_handling(operation: Callable[[], None]) -> None:
    """Run a send operation and map its failures to exit codes.

    Exception priority order:
        1. ConfigurationError -> CONFIG_ERROR (78)
        2. SMTP / network / timeout errors -> SMTP_FAILURE (69)
        3. Anything else -> GENERAL_ERROR (1), re-raised when the
           DEVELOPMENT_MODE environment variable is set.

    Raises:
        SystemExit: On any error.
    """
    try:
        operation()
    except ConfigurationError as exc:
        fail(exc, "Order email configuration error", "Configuration error", exit_code=ExitCode.CONFIG_ERROR)
    except TRANSPORT_ERRORS as exc:
        fail(exc, "SMTP delivery failed", "Failed to send email", exit_code=ExitCode.SMTP_FAILURE)
    except Exception as exc:
        if os.environ.get("DEVELOPMENT_MODE"):
            raise
        fail(exc, "Unexpected error sending order emails", "Unexpected error", log_traceback=True)


__all__ = [
    "TRANSPORT_ERRORS",
    "execute_with_send_error_handling",
    "fail",
    "load_order_file",
    "load_smtp_settings",
    "load_store_config",
]
