"""CLI command implementations.

Collects all subcommand functions and re-exports them for registration
with the root CLI group.

Contents:
    * Info command from :mod:`.info`
    * Config command from :mod:`.config`
    * Order email commands from :mod:`.orders`
"""

from __future__ import annotations

from .config import cli_config
from .info import cli_info
from .orders import cli_preview_order, cli_send_order

__all__ = [
    "cli_config",
    "cli_info",
    "cli_preview_order",
    "cli_send_order",
]
