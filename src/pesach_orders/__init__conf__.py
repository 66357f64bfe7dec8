"""Static package metadata surfaced to CLI commands and documentation.

Kept in sync with ``pyproject.toml`` by hand; the values are read by the
``info`` command, the ``--version`` option and the layered configuration
loader (vendor/app/slug decide the platform-specific config paths).
"""

from __future__ import annotations

name = "pesach_orders"
title = "Order mailer for a seasonal Pesach grocery store"
version = "1.0.0"
homepage = "https://github.com/pesach-orders/pesach_orders"
author = "Pesach Orders Maintainers"
author_email = "maintainers@pesach-orders.invalid"
shell_command = "pesach-orders"

#: Vendor, application and slug identifiers handed to lib_layered_config.
LAYEREDCONF_VENDOR: str = "pesach-orders"
LAYEREDCONF_APP: str = "Pesach Orders"
LAYEREDCONF_SLUG: str = "pesach-orders"


def print_info() -> None:
    """Print the summarised metadata block used by the ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for pesach_orders:
        ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))
