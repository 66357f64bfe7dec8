"""Order email commands.

Contents:
    * :func:`cli_preview_order` - Print both emails of an order without sending.
    * :func:`cli_send_order` - Send the store notification and the customer confirmation.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import lib_log_rich.runtime
import rich_click as click

from pesach_orders.adapters.email.settings import SmtpSettings
from pesach_orders.domain.enums import SendOutcome
from pesach_orders.domain.formatting import (
    build_customer_confirmation_body,
    build_store_order_body,
    customer_confirmation_subject,
    store_order_subject,
)
from pesach_orders.domain.order import NormalizedOrder, StoreConfig

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ._common import (
    execute_with_send_error_handling,
    load_order_file,
    load_smtp_settings,
    load_store_config,
)

if TYPE_CHECKING:
    from pesach_orders.composition import AppServices

logger = logging.getLogger(__name__)

_ORDER_FILE = click.Path(dir_okay=False, path_type=Path)


def _echo_email(title: str, subject: str, body: str) -> None:
    click.echo(f"=== {title} ===")
    click.echo(f"Subject: {subject}")
    click.echo()
    click.echo(body)
    click.echo()


@click.command("preview-order", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("order_file", type=_ORDER_FILE)
@click.pass_context
def cli_preview_order(ctx: click.Context, order_file: Path) -> None:
    """Print both emails for ORDER_FILE (JSON) without sending anything."""
    cli_ctx = get_cli_context(ctx)
    with lib_log_rich.runtime.bind(job_id="cli-preview-order", extra={"command": "preview-order"}):
        order = load_order_file(order_file)
        store = load_store_config(cli_ctx)
        logger.info("Previewing order emails", extra={"order_ref": order.order_ref})

        _echo_email("Store notification", store_order_subject(order, store), build_store_order_body(order))
        if order.email:
            _echo_email(
                f"Customer confirmation to {order.email}",
                customer_confirmation_subject(order, store),
                build_customer_confirmation_body(order, store),
            )
        else:
            click.echo("=== Customer confirmation ===")
            click.echo("Skipped: the order has no customer email.")


def _report(label: str, outcome: SendOutcome) -> None:
    suffix = " (no customer email)" if outcome is SendOutcome.SKIPPED else ""
    click.echo(f"{label}: {outcome.value}{suffix}")


def _confirmation_outcome(sent: bool) -> SendOutcome:
    return SendOutcome.SENT if sent else SendOutcome.SKIPPED


async def _dispatch(
    services: AppServices,
    order: NormalizedOrder,
    store: StoreConfig,
    settings: SmtpSettings,
    *,
    confirm: bool,
    parallel: bool,
) -> None:
    """Send the order emails, reporting each outcome as it completes.

    In sequence the store notification goes first and a failing
    notification prevents the confirmation. In parallel both are in flight
    together, each on its own transport; both run to completion and both
    outcomes are reported before the first failure is re-raised.
    """
    if parallel and confirm:
        stored, sent = await asyncio.gather(
            services.send_store_order_email(order, store, settings=settings),
            services.send_customer_confirmation_email(order, store, settings=settings),
            return_exceptions=True,
        )
        _report("Store notification", SendOutcome.FAILED if isinstance(stored, BaseException) else SendOutcome.SENT)
        _report(
            "Customer confirmation",
            SendOutcome.FAILED if isinstance(sent, BaseException) else _confirmation_outcome(sent),
        )
        for result in (stored, sent):
            if isinstance(result, BaseException):
                raise result
        return

    await services.send_store_order_email(order, store, settings=settings)
    _report("Store notification", SendOutcome.SENT)
    if confirm:
        sent = await services.send_customer_confirmation_email(order, store, settings=settings)
        _report("Customer confirmation", _confirmation_outcome(sent))


@click.command("send-order", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("order_file", type=_ORDER_FILE)
@click.option(
    "--confirmation/--no-confirmation",
    "confirm",
    default=True,
    help="Also send the customer confirmation (skipped when the order has no email)",
)
@click.option(
    "--parallel",
    is_flag=True,
    default=False,
    help="Send both emails concurrently instead of store notification first",
)
@click.pass_context
def cli_send_order(ctx: click.Context, order_file: Path, confirm: bool, parallel: bool) -> None:
    """Send the store notification and customer confirmation for ORDER_FILE (JSON).

    SMTP settings come from the environment (SMTP_HOST, SMTP_PORT, SMTP_USER,
    SMTP_PASS, SMTP_FROM, ORDERS_EMAIL, ...); a .env in the working
    directory is loaded first. Store details come from the [store] section.
    """
    cli_ctx = get_cli_context(ctx)
    extra = {"command": "send-order", "order_file": str(order_file), "confirm": confirm, "parallel": parallel}
    with lib_log_rich.runtime.bind(job_id="cli-send-order", extra=extra):
        order = load_order_file(order_file)
        store = load_store_config(cli_ctx)
        settings = load_smtp_settings(cli_ctx)
        logger.info("Sending order emails", extra={"order_ref": order.order_ref})

        def _run() -> None:
            asyncio.run(_dispatch(cli_ctx.services, order, store, settings, confirm=confirm, parallel=parallel))

        execute_with_send_error_handling(_run)


__all__ = ["cli_preview_order", "cli_send_order"]
