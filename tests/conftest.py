"""Shared pytest fixtures for order, sender and CLI tests.

Centralizes test infrastructure:
- All shared fixtures live here
- Tests import fixtures implicitly via pytest's conftest discovery
- Fixtures use descriptive names that read as plain English
"""

from __future__ import annotations

import dataclasses
import json
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from pesach_orders.adapters.email.settings import SmtpSettings
from pesach_orders.adapters.memory.email import TransportSpy
from pesach_orders.domain.order import NormalizedOrder, StoreConfig

if TYPE_CHECKING:
    from pesach_orders.composition import AppServices

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))

#: Order document as posted by the storefront (camelCase keys).
ORDER_PAYLOAD: dict[str, Any] = {
    "orderRef": "PES-2025-0042",
    "createdAtIso": "2025-03-30T09:15:00Z",
    "deliveryDate": "2025-04-10",
    "deliverySlot": "10:00-12:00",
    "customerName": "Miriam Levy",
    "phone": "07700 900123",
    "email": "miriam@example.com",
    "addressLine1": "12 Golders Way",
    "addressLine2": "Flat 3",
    "postcode": "NW11 8AB",
    "items": [
        {"name": "Shmurah Matzo", "size": "1lb", "qty": 2},
        {"name": "Kiddush Wine", "size": "750ml", "qty": 1},
        {"name": "Horseradish", "qty": 1},
    ],
    "notes": "Please ring the bell twice",
}

#: A complete SMTP environment as the process would see it.
SMTP_ENVIRON: dict[str, str] = {
    "SMTP_HOST": "mail.example.com",
    "SMTP_PORT": "587",
    "SMTP_USER": "orders-bot",
    "SMTP_PASS": "s3cret",
    "SMTP_FROM": "orders-bot@example.com",
    "ORDERS_EMAIL": "orders@example.com",
}


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Use result.stdout for clean output; log lines go to stderr.
    """
    return CliRunner()


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config cache before each test."""
    from pesach_orders.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def order_payload() -> dict[str, Any]:
    """A fresh, mutable copy of the sample order document."""
    return json.loads(json.dumps(ORDER_PAYLOAD))


@pytest.fixture
def order(order_payload: dict[str, Any]) -> NormalizedOrder:
    """The sample order with a customer email."""
    return NormalizedOrder.model_validate(order_payload)


@pytest.fixture
def order_without_email(order_payload: dict[str, Any]) -> NormalizedOrder:
    """The sample order submitted without a customer email."""
    order_payload["email"] = ""
    return NormalizedOrder.model_validate(order_payload)


@pytest.fixture
def store() -> StoreConfig:
    """Store metadata used across tests."""
    return StoreConfig(store_name="Kosher Corner", contact_phone="020 7946 0000", contact_email="shop@example.com")


@pytest.fixture
def smtp_environ() -> dict[str, str]:
    """A fresh copy of the complete SMTP environment."""
    return dict(SMTP_ENVIRON)


@pytest.fixture
def smtp_settings(smtp_environ: dict[str, str]) -> SmtpSettings:
    """Settings snapshot taken from the complete SMTP environment."""
    from pesach_orders.adapters.email.settings import load_smtp_settings_from_env

    return load_smtp_settings_from_env(smtp_environ)


@pytest.fixture
def transport_spy() -> TransportSpy:
    """A fresh spy transport per test."""
    return TransportSpy()


@pytest.fixture
def store_config() -> Config:
    """Layered Config carrying a complete ``[store]`` section."""
    return Config(
        {
            "store": {
                "store_name": "Kosher Corner",
                "contact_phone": "020 7946 0000",
                "contact_email": "shop@example.com",
            }
        },
        {},
    )


@dataclass
class OrderCliContext:
    """Bundle of a services factory and the spy it sends through."""

    factory: Callable[[], AppServices]
    spy: TransportSpy


@pytest.fixture
def order_cli_context(
    clear_config_cache: None,
    store_config: Config,
) -> Callable[..., OrderCliContext]:
    """Return a builder for in-memory services with injected config and environment.

    Example:
        def test_send(order_cli_context) -> None:
            ctx = order_cli_context(environ={"SMTP_HOST": "mail.example.com", ...})
            result = cli_runner.invoke(cli, ["send-order", path], obj=ctx.factory)
            assert len(ctx.spy.sent_messages) == 2
    """
    from pesach_orders.composition import build_testing, init_logging

    def _build(*, environ: dict[str, str] | None = None, config: Config | None = None) -> OrderCliContext:
        spy = TransportSpy()
        chosen = config if config is not None else store_config

        def _fake_get_config(**_kwargs: Any) -> Config:
            return chosen

        services = dataclasses.replace(
            build_testing(spy=spy, environ=environ), get_config=_fake_get_config, init_logging=init_logging
        )
        return OrderCliContext(factory=lambda: services, spy=spy)

    return _build


@pytest.fixture
def order_file(tmp_path: Path, order_payload: dict[str, Any]) -> Path:
    """The sample order written to a JSON file."""
    path = tmp_path / "order.json"
    path.write_text(json.dumps(order_payload), encoding="utf-8")
    return path


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory so no stray .env is picked up."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir
