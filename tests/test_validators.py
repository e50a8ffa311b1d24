# File: tests/test_validators.py
"""Tests for core validation utilities."""

import pytest

from tutorescrow.core.validators import (
    MAX_AMOUNT,
    validate_amount,
    validate_caller_id,
    validate_materials,
    validate_rating,
    validate_text,
)


class TestValidateAmount:
    """Test amount validation."""

    def test_positive_amount_passes(self):
        assert validate_amount(1) == 1
        assert validate_amount(MAX_AMOUNT) == MAX_AMOUNT

    def test_zero_and_negative_fail(self):
        """Test non-positive values are rejected."""
        with pytest.raises(ValueError, match="must be positive"):
            validate_amount(0)

        with pytest.raises(ValueError, match="must be positive"):
            validate_amount(-10, "Price")

    def test_exceeds_max_fails(self):
        with pytest.raises(ValueError, match="exceeds maximum"):
            validate_amount(MAX_AMOUNT + 1)

        with pytest.raises(ValueError, match="exceeds maximum"):
            validate_amount(11, max_value=10)

    def test_non_integer_fails(self):
        """Test floats, strings and booleans are rejected."""
        for value in (1.5, "10", True, None):
            with pytest.raises(ValueError, match="must be an integer"):
                validate_amount(value)

    def test_field_name_in_message(self):
        with pytest.raises(ValueError, match="Deposit amount"):
            validate_amount(0, "Deposit amount")


class TestValidateText:
    """Test required free text validation."""

    def test_strips_whitespace(self):
        assert validate_text("  Fractions  ") == "Fractions"

    def test_empty_fails(self):
        """Test empty and whitespace-only strings fail."""
        for value in ("", "   ", None):
            with pytest.raises(ValueError, match="cannot be empty"):
                validate_text(value, "Description")

    def test_max_length_enforced(self):
        assert validate_text("a" * 10, max_length=10) == "a" * 10

        with pytest.raises(ValueError, match="cannot exceed 10 characters"):
            validate_text("a" * 11, max_length=10)


class TestValidateMaterials:
    """Test materials list validation."""

    def test_items_are_opaque(self):
        """Test items are kept as given, only stripped."""
        items = ["https://example.com/a.pdf", "chapter 3 ", "ref:1234"]
        assert validate_materials(items) == ["https://example.com/a.pdf", "chapter 3", "ref:1234"]

    def test_empty_list_fails(self):
        with pytest.raises(ValueError, match="Materials cannot be empty"):
            validate_materials([])

        with pytest.raises(ValueError, match="Materials cannot be empty"):
            validate_materials(None)

    def test_empty_item_fails(self):
        with pytest.raises(ValueError, match="empty items"):
            validate_materials(["notes.pdf", ""])


class TestValidateRating:
    """Test rating bounds."""

    @pytest.mark.parametrize("value", [1, 2, 3, 4, 5])
    def test_in_range(self, value):
        assert validate_rating(value) == value

    @pytest.mark.parametrize("value", [0, 6, -1, 100])
    def test_out_of_range(self, value):
        with pytest.raises(ValueError, match="between 1 and 5"):
            validate_rating(value)

    def test_non_integer_fails(self):
        with pytest.raises(ValueError, match="must be an integer"):
            validate_rating(4.5)


class TestValidateCallerId:
    """Test opaque caller identity validation."""

    def test_valid_identity(self):
        assert validate_caller_id("student-maria") == "student-maria"
        assert validate_caller_id("  0xABCDEF  ") == "0xABCDEF"

    def test_empty_fails(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_caller_id("")

    def test_too_long_fails(self):
        with pytest.raises(ValueError, match="cannot exceed 100"):
            validate_caller_id("x" * 101)

    def test_inner_whitespace_fails(self):
        with pytest.raises(ValueError, match="whitespace"):
            validate_caller_id("student maria")

