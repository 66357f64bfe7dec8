"""CLI order stories: preview-order, send-order, exit codes for every failure path."""

from __future__ import annotations

import asyncio
import dataclasses
import json
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiosmtplib
import pytest
from click.testing import CliRunner, Result
from lib_layered_config import Config

from pesach_orders.adapters import cli as cli_mod
from pesach_orders.adapters.email.settings import SmtpSettings
from pesach_orders.domain.order import NormalizedOrder, StoreConfig

if TYPE_CHECKING:
    from conftest import OrderCliContext

# ======================== preview-order ========================


@pytest.mark.os_agnostic
def test_preview_prints_both_emails(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
) -> None:
    ctx = order_cli_context()

    result: Result = cli_runner.invoke(cli_mod.cli, ["preview-order", str(order_file)], obj=ctx.factory)

    assert result.exit_code == 0
    assert "=== Store notification ===" in result.output
    assert "Subject: Kosher Corner Pesach Order PES-2025-0042" in result.output
    assert "=== Customer confirmation to miriam@example.com ===" in result.output
    assert "Thank you for your order with Kosher Corner." in result.output
    assert ctx.spy.sent_messages == []


@pytest.mark.os_agnostic
def test_preview_needs_no_smtp_environment(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
) -> None:
    ctx = order_cli_context(environ={})

    result: Result = cli_runner.invoke(cli_mod.cli, ["preview-order", str(order_file)], obj=ctx.factory)

    assert result.exit_code == 0


@pytest.mark.os_agnostic
def test_preview_without_customer_email_reports_skip(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_payload: dict[str, Any],
    tmp_path: Path,
) -> None:
    order_payload["email"] = ""
    path = tmp_path / "no-email.json"
    path.write_text(json.dumps(order_payload), encoding="utf-8")

    result: Result = cli_runner.invoke(cli_mod.cli, ["preview-order", str(path)], obj=order_cli_context().factory)

    assert result.exit_code == 0
    assert "Email: (not provided)" in result.output
    assert "Skipped: the order has no customer email." in result.output


@pytest.mark.os_agnostic
def test_preview_of_missing_file_exits_with_code_2(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    tmp_path: Path,
) -> None:
    missing = tmp_path / "nope.json"

    result: Result = cli_runner.invoke(cli_mod.cli, ["preview-order", str(missing)], obj=order_cli_context().factory)

    assert result.exit_code == 2
    assert "Order file not found" in result.output


@pytest.mark.os_agnostic
@pytest.mark.parametrize("content", ["{not json", json.dumps({"orderRef": "PES-1"})])
def test_preview_of_invalid_order_exits_with_code_22(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    tmp_path: Path,
    content: str,
) -> None:
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")

    result: Result = cli_runner.invoke(cli_mod.cli, ["preview-order", str(path)], obj=order_cli_context().factory)

    assert result.exit_code == 22
    assert "Invalid order document" in result.output


@pytest.mark.os_agnostic
def test_preview_without_store_section_exits_with_code_78(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
) -> None:
    ctx = order_cli_context(config=Config({}, {}))

    result: Result = cli_runner.invoke(cli_mod.cli, ["preview-order", str(order_file)], obj=ctx.factory)

    assert result.exit_code == 78
    assert "config --section store" in result.output


# ======================== send-order ========================


@pytest.mark.os_agnostic
def test_send_order_sends_store_notification_then_confirmation(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
) -> None:
    ctx = order_cli_context(environ=smtp_environ)

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(order_file)], obj=ctx.factory)

    assert result.exit_code == 0
    assert [message["To"] for message in ctx.spy.sent_messages] == ["orders@example.com", "miriam@example.com"]
    assert "Store notification: sent" in result.output
    assert "Customer confirmation: sent" in result.output


@pytest.mark.os_agnostic
def test_send_order_without_customer_email_sends_only_the_notification(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_payload: dict[str, Any],
    smtp_environ: dict[str, str],
    tmp_path: Path,
    isolated_cwd: Path,
) -> None:
    order_payload["email"] = None
    path = tmp_path / "no-email.json"
    path.write_text(json.dumps(order_payload), encoding="utf-8")
    ctx = order_cli_context(environ=smtp_environ)

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(path)], obj=ctx.factory)

    assert result.exit_code == 0
    assert len(ctx.spy.sent_messages) == 1
    assert "Customer confirmation: skipped (no customer email)" in result.output


@pytest.mark.os_agnostic
def test_send_order_with_no_confirmation_sends_only_the_notification(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
) -> None:
    ctx = order_cli_context(environ=smtp_environ)

    result: Result = cli_runner.invoke(
        cli_mod.cli, ["send-order", str(order_file), "--no-confirmation"], obj=ctx.factory
    )

    assert result.exit_code == 0
    assert [message["To"] for message in ctx.spy.sent_messages] == ["orders@example.com"]
    assert "Customer confirmation" not in result.output


@pytest.mark.os_agnostic
def test_send_order_in_parallel_sends_both_emails(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
) -> None:
    ctx = order_cli_context(environ=smtp_environ)

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(order_file), "--parallel"], obj=ctx.factory)

    assert result.exit_code == 0
    assert sorted(message["To"] for message in ctx.spy.sent_messages) == ["miriam@example.com", "orders@example.com"]
    assert len(ctx.spy.built_with) == 2


@pytest.mark.os_agnostic
@pytest.mark.parametrize("variable", ["SMTP_FROM", "ORDERS_EMAIL", "SMTP_HOST", "SMTP_PASS"])
def test_send_order_with_missing_variable_exits_with_code_78(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
    variable: str,
) -> None:
    del smtp_environ[variable]
    ctx = order_cli_context(environ=smtp_environ)

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(order_file)], obj=ctx.factory)

    assert result.exit_code == 78
    assert variable in result.output
    assert ctx.spy.sent_messages == []


@pytest.mark.os_agnostic
def test_send_order_with_non_numeric_port_exits_with_code_78(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
) -> None:
    smtp_environ["SMTP_PORT"] = "submission"
    ctx = order_cli_context(environ=smtp_environ)

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(order_file)], obj=ctx.factory)

    assert result.exit_code == 78
    assert "SMTP_PORT" in result.output


@pytest.mark.os_agnostic
def test_send_order_smtp_failure_exits_with_code_69_and_skips_confirmation(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
) -> None:
    ctx = order_cli_context(environ=smtp_environ)
    ctx.spy.raise_exception = aiosmtplib.SMTPResponseException(554, "Transaction failed")

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(order_file)], obj=ctx.factory)

    assert result.exit_code == 69
    assert "Failed to send email" in result.output
    assert len(ctx.spy.sent_messages) == 1


@pytest.mark.os_agnostic
def test_send_order_network_failure_exits_with_code_69(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
) -> None:
    ctx = order_cli_context(environ=smtp_environ)
    ctx.spy.raise_exception = ConnectionRefusedError("Connection refused")

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(order_file), "--parallel"], obj=ctx.factory)

    assert result.exit_code == 69


@pytest.mark.os_agnostic
def test_send_order_unexpected_error_exits_with_code_1(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("DEVELOPMENT_MODE", raising=False)
    ctx = order_cli_context(environ=smtp_environ)
    ctx.spy.raise_exception = RuntimeError("boom")

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(order_file)], obj=ctx.factory)

    assert result.exit_code == 1
    assert "Unexpected error" in result.output


@pytest.mark.os_agnostic
def test_send_order_unexpected_error_is_raised_in_development_mode(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("DEVELOPMENT_MODE", "1")
    ctx = order_cli_context(environ=smtp_environ)
    ctx.spy.raise_exception = RuntimeError("boom")

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(order_file)], obj=ctx.factory)

    assert isinstance(result.exception, RuntimeError)


@pytest.mark.os_agnostic
def test_send_order_of_missing_file_exits_with_code_2(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    smtp_environ: dict[str, str],
    tmp_path: Path,
) -> None:
    ctx = order_cli_context(environ=smtp_environ)

    result: Result = cli_runner.invoke(cli_mod.cli, ["send-order", str(tmp_path / "nope.json")], obj=ctx.factory)

    assert result.exit_code == 2
    assert ctx.spy.sent_messages == []


@pytest.mark.os_agnostic
def test_send_order_in_parallel_reports_both_outcomes_when_the_notification_fails(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
) -> None:
    """A refused store notification neither cancels nor hides the confirmation."""
    ctx = order_cli_context(environ=smtp_environ)
    services = ctx.factory()

    async def _refuse(order: NormalizedOrder, store: StoreConfig, *, settings: SmtpSettings | None = None) -> None:
        raise aiosmtplib.SMTPRecipientsRefused([])

    async def _slow_confirmation(
        order: NormalizedOrder, store: StoreConfig, *, settings: SmtpSettings | None = None
    ) -> bool:
        await asyncio.sleep(0.05)
        return await services.send_customer_confirmation_email(order, store, settings=settings)

    patched = dataclasses.replace(
        services, send_store_order_email=_refuse, send_customer_confirmation_email=_slow_confirmation
    )

    result: Result = cli_runner.invoke(
        cli_mod.cli, ["send-order", str(order_file), "--parallel"], obj=lambda: patched
    )

    assert result.exit_code == 69
    assert "Store notification: failed" in result.output
    assert "Customer confirmation: sent" in result.output
    assert [message["To"] for message in ctx.spy.sent_messages] == ["miriam@example.com"]


@pytest.mark.os_agnostic
def test_send_order_in_parallel_reports_a_failed_confirmation(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    order_file: Path,
    smtp_environ: dict[str, str],
    isolated_cwd: Path,
) -> None:
    ctx = order_cli_context(environ=smtp_environ)
    services = ctx.factory()

    async def _refuse(order: NormalizedOrder, store: StoreConfig, *, settings: SmtpSettings | None = None) -> bool:
        raise ConnectionResetError("connection reset")

    patched = dataclasses.replace(services, send_customer_confirmation_email=_refuse)

    result: Result = cli_runner.invoke(
        cli_mod.cli, ["send-order", str(order_file), "--parallel"], obj=lambda: patched
    )

    assert result.exit_code == 69
    assert "Store notification: sent" in result.output
    assert "Customer confirmation: failed" in result.output


@pytest.mark.os_agnostic
def test_order_file_that_is_not_utf8_exits_with_code_22(
    cli_runner: CliRunner,
    order_cli_context: Callable[..., OrderCliContext],
    tmp_path: Path,
) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b"\xff\xfe{}")

    result: Result = cli_runner.invoke(cli_mod.cli, ["preview-order", str(path)], obj=order_cli_context().factory)

    assert result.exit_code == 22
    assert "Invalid order document" in result.output
