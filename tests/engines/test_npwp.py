"""Tests for NPWP formatting and validation."""

import pytest

from artha_engines.npwp import (
    NPWP_LENGTH,
    format_npwp,
    normalize_npwp,
    strip_non_digits,
    validate_npwp,
)
from artha_kernel.exceptions import InvalidInputError, InvalidNPWPError


class TestFormatNpwp:

    def test_full_number(self):
        assert format_npwp("012345678901234") == "01.234.567.8-901.234"

    @pytest.mark.parametrize("raw, expected", [
        ("", ""),
        ("0", "0"),
        ("01", "01"),
        ("0123", "01.23"),
        ("012345", "01.234.5"),
        ("012345678", "01.234.567.8"),
        ("0123456789", "01.234.567.8-9"),
        ("0123456789012", "01.234.567.8-901.2"),
    ])
    def test_partial_input(self, raw, expected):
        assert format_npwp(raw) == expected

    def test_separators_ignored(self):
        assert format_npwp("01.234.567.8-901.234") == "01.234.567.8-901.234"
        assert format_npwp("01 234 567 8 901 234") == "01.234.567.8-901.234"

    def test_extra_digits_dropped(self):
        assert format_npwp("0123456789012345678") == "01.234.567.8-901.234"

    def test_none_is_empty(self):
        assert format_npwp(None) == ""

    def test_idempotent(self):
        once = format_npwp("9988776655")
        assert format_npwp(once) == once


class TestValidateNpwp:

    def test_valid_with_and_without_mask(self):
        assert validate_npwp("012345678901234")
        assert validate_npwp("01.234.567.8-901.234")

    @pytest.mark.parametrize("value", ["", "0123", "0123456789012345", "abc"])
    def test_invalid(self, value):
        assert not validate_npwp(value)

    def test_no_checksum(self):
        assert validate_npwp("000000000000000")


class TestNormalizeNpwp:

    def test_returns_digits(self):
        assert normalize_npwp("01.234.567.8-901.234") == "012345678901234"
        assert len(normalize_npwp("012345678901234")) == NPWP_LENGTH

    def test_rejects_short(self):
        with pytest.raises(InvalidNPWPError) as exc_info:
            normalize_npwp("01.234")
        assert exc_info.value.code == "INVALID_NPWP"
        assert isinstance(exc_info.value, InvalidInputError)


def test_strip_non_digits():
    assert strip_non_digits("a1-b2.c3") == "123"


def test_only_ascii_digits_count():
    assert strip_non_digits("٠١٢3") == "3"
