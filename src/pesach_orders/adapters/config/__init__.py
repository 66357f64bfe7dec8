"""Configuration adapter - layered loading, store section, display.

Contents:
    * :mod:`.loader` - Configuration loading with caching
    * :mod:`.store` - ``[store]`` section to StoreConfig
    * :mod:`.display` - Configuration display in human/JSON formats
"""

from __future__ import annotations

from .display import display_config, display_smtp_settings
from .loader import get_config, get_default_config_path
from .store import load_store_config_from_dict

__all__ = [
    "display_config",
    "display_smtp_settings",
    "get_config",
    "get_default_config_path",
    "load_store_config_from_dict",
]
