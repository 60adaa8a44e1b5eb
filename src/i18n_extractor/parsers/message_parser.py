"""
Message classification and validation.

Inspects a single extracted message for ICU MessageFormat features:

    >>> classify("Hello {name}, you have {count} messages")
    MessageMetadata(variables=['name', 'count'], has_plural=False, has_date=False)

    >>> classify("{count, plural, one {# item} other {# items}}").has_plural
    True
"""

from __future__ import annotations

import re
from typing import NamedTuple

from ..utils.core.exceptions import (
    InvalidVariableNameError,
    MessageTooLongError,
    MessageTypeError,
    UnbalancedBracesError,
)
from ..utils.security import is_valid_variable_name

MAX_MESSAGE_LENGTH = 5000

VARIABLE_PATTERN = re.compile(r"\{([a-zA-Z_$][a-zA-Z0-9_$]*)\}")
PLURAL_PATTERN = re.compile(r"\{\s*\w+\s*,\s*plural\s*,")
DATE_PATTERN = re.compile(r"\{\s*\w+\s*,\s*(?:date|time)\s*,")


class MessageMetadata(NamedTuple):
    """Structural features of a message."""

    variables: list[str]
    has_plural: bool
    has_date: bool


def extract_variables(text: str) -> list[str]:
    """
    Extract distinct interpolation variable names in first-seen order.

    Args:
        text: Message text

    Returns:
        List of variable names, e.g. ``["name", "count"]``
    """
    variables: list[str] = []
    for match in VARIABLE_PATTERN.finditer(text):
        name = match.group(1)
        if is_valid_variable_name(name) and name not in variables:
            variables.append(name)
    return variables


def has_pluralization(text: str) -> bool:
    """Check for an ICU ``{arg, plural, ...}`` argument."""
    return PLURAL_PATTERN.search(text) is not None


def has_date_formatting(text: str) -> bool:
    """Check for an ICU ``{arg, date, ...}`` or ``{arg, time, ...}`` argument."""
    return DATE_PATTERN.search(text) is not None


def classify(message: str) -> MessageMetadata:
    """
    Collect the metadata for a message.

    Args:
        message: Message text

    Returns:
        MessageMetadata describing variables, pluralization and date usage
    """
    return MessageMetadata(
        variables=extract_variables(message),
        has_plural=has_pluralization(message),
        has_date=has_date_formatting(message),
    )


def validate_message_format(message: object) -> None:
    """
    Validate that a message is safe to put into a catalog.

    Args:
        message: Candidate message

    Raises:
        MessageTypeError: If the message is not a string
        MessageTooLongError: If the message is longer than MAX_MESSAGE_LENGTH
        UnbalancedBracesError: If curly braces do not balance
        InvalidVariableNameError: If a variable name is not a safe identifier
    """
    if not isinstance(message, str):
        raise MessageTypeError("Message must be a string", context=message)

    if len(message) > MAX_MESSAGE_LENGTH:
        raise MessageTooLongError(
            f"Message too long (max {MAX_MESSAGE_LENGTH} characters)",
            context=len(message),
        )

    depth = 0
    for char in message:
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                raise UnbalancedBracesError("Unbalanced braces in message")

    if depth != 0:
        raise UnbalancedBracesError("Unbalanced braces in message")

    for name in extract_variables(message):
        if not is_valid_variable_name(name):
            raise InvalidVariableNameError(f"Invalid variable name: {name}", context=name)
