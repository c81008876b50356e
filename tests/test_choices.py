"""Tests for operator answer decoding."""

from __future__ import annotations

import pytest

from decksweep.core.choices import Choice, decode_choice


class TestDecodeChoice:
    def test_zero_is_skip(self):
        assert decode_choice("0", 3) is Choice.SKIP

    def test_numbers_are_one_based(self):
        assert decode_choice("1", 3) == 0
        assert decode_choice("3", 3) == 2

    def test_whitespace_is_ignored(self):
        assert decode_choice(" 2\n", 2) == 1

    def test_leading_zeros(self):
        assert decode_choice("02", 2) == 1

    @pytest.mark.parametrize("raw", ["", "y", "-1", "+1", "1.5", "4", "1 2", "²"])
    def test_invalid(self, raw):
        assert decode_choice(raw, 3) is Choice.INVALID

    def test_binary_prompt(self):
        assert decode_choice("1", 1) == 0
        assert decode_choice("2", 1) is Choice.INVALID
