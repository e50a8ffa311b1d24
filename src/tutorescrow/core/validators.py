# File: src/tutorescrow/core/validators.py
"""Reusable validation utilities for input sanitization."""

import re

RATING_MIN = 1
RATING_MAX = 5

# Matches BIGINT storage
MAX_AMOUNT = 9_223_372_036_854_775_807


def validate_amount(value: int, field_name: str = "Amount", max_value: int = MAX_AMOUNT) -> int:
    """
    Validate a monetary amount in the smallest currency unit.

    Args:
        value: Amount to validate
        field_name: Name for error messages
        max_value: Maximum allowed value (default: BIGINT upper bound)

    Returns:
        Validated amount

    Raises:
        ValueError: If amount is not a positive integer or exceeds max
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")

    if value <= 0:
        raise ValueError(f"{field_name} must be positive")

    if value > max_value:
        raise ValueError(f"{field_name} exceeds maximum allowed: {max_value}")

    return value


def validate_text(value: str | None, field_name: str = "Field", max_length: int = 5000) -> str:
    """
    Validate required free text.

    Args:
        value: Text to validate
        field_name: Name for error messages
        max_length: Maximum length after stripping

    Returns:
        Stripped text

    Raises:
        ValueError: If text is empty or too long
    """
    if value is None or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    cleaned = value.strip()

    if len(cleaned) > max_length:
        raise ValueError(f"{field_name} cannot exceed {max_length} characters")

    return cleaned


def validate_materials(items: list[str] | None) -> list[str]:
    """
    Validate the materials list. Items are opaque; only emptiness is checked.

    Raises:
        ValueError: If the list or any item is empty
    """
    if not items:
        raise ValueError("Materials cannot be empty")

    cleaned = []
    for item in items:
        if not isinstance(item, str) or not item.strip():
            raise ValueError("Materials cannot contain empty items")
        cleaned.append(item.strip())

    return cleaned


def validate_rating(value: int) -> int:
    """Ensure rating is an integer within RATING_MIN..RATING_MAX inclusive."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("Rating must be an integer")
    if not RATING_MIN <= value <= RATING_MAX:
        raise ValueError(f"Rating must be between {RATING_MIN} and {RATING_MAX}")
    return value


def validate_caller_id(value: str | None) -> str:
    """
    Validate an opaque caller identity.

    Raises:
        ValueError: If empty, too long or containing whitespace/control characters
    """
    if value is None or not value.strip():
        raise ValueError("Caller identity cannot be empty")

    cleaned = value.strip()

    if len(cleaned) > 100:
        raise ValueError("Caller identity cannot exceed 100 characters")

    if re.search(r"[\s\x00-\x1f]", cleaned):
        raise ValueError("Caller identity cannot contain whitespace")

    return cleaned

