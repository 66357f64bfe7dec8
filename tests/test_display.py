"""Display adapters: layered config wrapper and the redacted SMTP snapshot."""

from __future__ import annotations

import json

import pytest
from lib_layered_config import Config
from rich.console import Console

from pesach_orders.adapters.config.display import display_config, display_smtp_settings, smtp_settings_rows
from pesach_orders.adapters.email.settings import ENV_VARIABLES, SmtpSettings
from pesach_orders.domain.enums import OutputFormat


@pytest.mark.os_agnostic
def test_display_config_raises_for_nonexistent_section() -> None:
    config = Config({"store": {"store_name": "Kosher Corner"}}, {})

    with pytest.raises(ValueError, match="not found"):
        display_config(config, output_format=OutputFormat.HUMAN, section="nonexistent")


@pytest.mark.os_agnostic
def test_display_config_renders_store_section(capsys: pytest.CaptureFixture[str]) -> None:
    config = Config({"store": {"store_name": "Kosher Corner"}}, {})

    display_config(config, output_format=OutputFormat.HUMAN)

    output = capsys.readouterr().out
    assert "[store]" in output
    assert "Kosher Corner" in output


@pytest.mark.os_agnostic
def test_rows_cover_every_variable_in_order(smtp_settings: SmtpSettings) -> None:
    rows = smtp_settings_rows(smtp_settings)

    assert [name for name, _ in rows] == list(ENV_VARIABLES.values())


@pytest.mark.os_agnostic
def test_rows_redact_the_password_and_mark_unset_values(smtp_settings: SmtpSettings) -> None:
    rows = dict(smtp_settings_rows(smtp_settings))

    assert rows["SMTP_PASS"] == "[REDACTED]"
    assert rows["SMTP_HOST_IP"] == "(not set)"
    assert rows["SMTP_PORT"] == "587"
    assert rows["SMTP_SOCKET_TIMEOUT_MS"] == "15000.0"


@pytest.mark.os_agnostic
def test_unset_password_is_shown_as_unset() -> None:
    assert dict(smtp_settings_rows(SmtpSettings()))["SMTP_PASS"] == "(not set)"


@pytest.mark.os_agnostic
def test_smtp_table_renders_without_the_password(smtp_settings: SmtpSettings) -> None:
    console = Console(record=True, width=120)

    display_smtp_settings(smtp_settings, console=console)

    text = console.export_text()
    assert "SMTP environment" in text
    assert "mail.example.com" in text
    assert "s3cret" not in text


@pytest.mark.os_agnostic
def test_smtp_json_is_a_flat_object(smtp_settings: SmtpSettings) -> None:
    console = Console(record=True, width=200)

    display_smtp_settings(smtp_settings, output_format=OutputFormat.JSON, console=console)

    parsed = json.loads(console.export_text())
    assert parsed["SMTP_HOST"] == "mail.example.com"
    assert parsed["SMTP_PASS"] == "[REDACTED]"
