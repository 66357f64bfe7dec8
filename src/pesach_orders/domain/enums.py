"""Type-safe domain enums."""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Inherits from str to allow direct string comparison and Click integration.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


class SendOutcome(str, Enum):
    """Result of a single order email as reported to the operator.

    Example:
        >>> SendOutcome.SKIPPED.value
        'skipped'
    """

    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


__all__ = [
    "OutputFormat",
    "SendOutcome",
]
