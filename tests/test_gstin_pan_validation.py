"""Tests for GSTIN / PAN shape validation."""

import pytest

from invoicing.domain.services.gstin_pan_validation import (
    is_valid_gstin,
    is_valid_pan,
    pan_from_gstin,
    sanitize_gst_number,
    sanitize_pan_number,
)


class TestGSTIN:
    def test_valid_gstin(self):
        assert is_valid_gstin("27AABCT1234C1Z5") is True

    def test_lowercase_and_padding_accepted(self):
        assert is_valid_gstin("  27aabct1234c1z5 ") is True

    @pytest.mark.parametrize(
        "gstin",
        [
            "27AABCT1234C1Z",  # 14 characters
            "AABCT1234C1Z5XX",  # no state digits
            "27AABCT1234C1X5",  # 14th character must be Z
            "27AABCT1234C0Z5",  # entity code cannot be 0
            "27AABC11234C1Z5",  # PAN part malformed
            "",
            None,
        ],
    )
    def test_invalid_gstin(self, gstin):
        assert is_valid_gstin(gstin) is False

    def test_pan_from_gstin(self):
        assert pan_from_gstin("27AABCT1234C1Z5") == "AABCT1234C"
        assert pan_from_gstin("bad") is None


class TestPAN:
    def test_valid_pan(self):
        assert is_valid_pan("ABCPI1234K") is True
        assert is_valid_pan("abcpi1234k") is True

    @pytest.mark.parametrize("pan", ["ABCPI1234", "1BCPI1234K", "ABCPI12345", "", None])
    def test_invalid_pan(self, pan):
        assert is_valid_pan(pan) is False


class TestSanitizers:
    def test_gst_number(self):
        assert sanitize_gst_number(" 27-aabct 1234c1z5 ") == "27AABCT1234C1Z5"
        assert sanitize_gst_number("") is None
        assert sanitize_gst_number("--") is None

    def test_pan_number(self):
        assert sanitize_pan_number("abcpi 1234 k") == "ABCPI1234K"
        assert sanitize_pan_number(None) is None
