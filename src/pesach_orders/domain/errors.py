"""Domain-specific exceptions for typed error handling at boundaries."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Missing, invalid, or incomplete configuration.

    Raised before any network attempt when a mandatory value (an SMTP
    setting, a sender or inbox address, the ``[store]`` section) is absent
    or malformed. Caught at the CLI boundary and mapped to exit code 78.

    Example:
        >>> from pesach_orders.domain.errors import ConfigurationError
        >>> err = ConfigurationError("Missing required environment variable: ORDERS_EMAIL")
        >>> str(err)
        'Missing required environment variable: ORDERS_EMAIL'
    """


__all__ = ["ConfigurationError"]
