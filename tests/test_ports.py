"""Port contracts: composition roots and in-memory adapters."""

from __future__ import annotations

from dataclasses import fields

import pytest
from lib_layered_config import Config

from pesach_orders.adapters.memory import (
    TransportSpy,
    get_config_in_memory,
    init_logging_in_memory,
    load_smtp_settings_in_memory,
)
from pesach_orders.composition import AppServices, build_production, build_testing


@pytest.mark.os_agnostic
def test_in_memory_config_is_empty() -> None:
    config = get_config_in_memory()

    assert isinstance(config, Config)
    assert config.as_dict() == {}


@pytest.mark.os_agnostic
def test_in_memory_logging_does_not_raise() -> None:
    init_logging_in_memory(Config({}, {}))


@pytest.mark.os_agnostic
def test_in_memory_settings_never_read_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SMTP_HOST", "leaked.example.com")

    assert load_smtp_settings_in_memory().host is None
    assert load_smtp_settings_in_memory({"SMTP_HOST": "mail.example.com"}).host == "mail.example.com"


@pytest.mark.os_agnostic
def test_transport_spy_clear_resets_state() -> None:
    spy = TransportSpy(raise_exception=RuntimeError("x"))
    spy.sent_messages.append(object())  # type: ignore[arg-type]

    spy.clear()

    assert spy.sent_messages == []
    assert spy.built_with == []
    assert spy.raise_exception is None


@pytest.mark.os_agnostic
@pytest.mark.parametrize("factory", [build_production, build_testing])
def test_composition_roots_populate_every_port(factory: object) -> None:
    services = factory()  # type: ignore[operator]

    assert isinstance(services, AppServices)
    for field in fields(AppServices):
        assert callable(getattr(services, field.name)), field.name


@pytest.mark.os_agnostic
def test_build_testing_reads_the_given_environment_only(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ORDERS_EMAIL", "leaked@example.com")
    services = build_testing(environ={"ORDERS_EMAIL": "orders@example.com"})

    assert services.load_smtp_settings().orders_email == "orders@example.com"


@pytest.mark.os_agnostic
def test_build_testing_sends_through_the_given_spy() -> None:
    spy = TransportSpy()
    services = build_testing(spy=spy)

    assert services.send_store_order_email == spy.send_store_order_email
