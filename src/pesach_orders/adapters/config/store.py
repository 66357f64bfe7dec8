"""Load the store's display and contact metadata from layered configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from pydantic import ValidationError

from pesach_orders.domain.errors import ConfigurationError
from pesach_orders.domain.order import StoreConfig


def load_store_config_from_dict(config_dict: Mapping[str, Any]) -> StoreConfig:
    """Build a StoreConfig from the ``[store]`` section.

    Args:
        config_dict: Configuration dictionary, typically ``Config.as_dict()``.

    Returns:
        Validated store metadata.

    Raises:
        ConfigurationError: When the section is missing, not a table, or
            lacks one of ``store_name``, ``contact_phone``, ``contact_email``.

    Example:
        >>> store = load_store_config_from_dict(
        ...     {"store": {"store_name": "Kosher Corner", "contact_phone": "020 7946 0000",
        ...                "contact_email": "shop@example.com"}}
        ... )
        >>> store.store_name
        'Kosher Corner'
    """
    section: Any = config_dict.get("store")
    if not isinstance(section, Mapping) or not section:
        raise ConfigurationError("No [store] section configured (store_name, contact_phone, contact_email)")
    store_raw = {key: value for key, value in cast(Mapping[str, Any], section).items() if value not in ("", None)}
    try:
        return StoreConfig.model_validate(store_raw)
    except ValidationError as exc:
        names = {field.alias or name: name for name, field in StoreConfig.model_fields.items()}
        missing = sorted(
            names.get(str(err["loc"][0]), str(err["loc"][0])) for err in exc.errors() if err["type"] == "missing"
        )
        if missing:
            raise ConfigurationError(f"Incomplete [store] section, missing: {', '.join(missing)}") from exc
        raise ConfigurationError(f"Invalid [store] section: {exc}") from exc


__all__ = ["load_store_config_from_dict"]
