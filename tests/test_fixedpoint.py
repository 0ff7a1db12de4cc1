"""Tests for fixed-point decoding and timestamp parsing."""

from __future__ import annotations

import pytest

from market_data_api.normalize.fixedpoint import (
    decode,
    parse_failure_count,
    parse_float,
    rfc3339_to_millis,
)


class TestDecode:
    @pytest.mark.parametrize(
        "raw,dp,expected",
        [
            ("0", 0, 0.0),
            ("12345", 0, 12345.0),
            ("12345", 2, 123.45),
            ("1", 18, 1e-18),
            ("4250000", 2, 42500.0),
            ("999999999999999999999", 3, 999999999999999999.999),
        ],
    )
    def test_integer_strings(self, raw, dp, expected):
        assert decode(raw, dp) == expected

    def test_matches_true_division(self):
        for v in (1, 7, 123456789, 10**20 + 3, 2**63 - 1):
            for d in (0, 1, 5, 18):
                assert decode(str(v), d) == v / 10**d

    def test_large_value_is_correctly_rounded(self):
        # 18-decimal asset amount beyond float64's integer range
        raw = "123456789012345678901234567890"
        assert decode(raw, 18) == 123456789012.34567890123456789

    def test_accepts_int(self):
        assert decode(1500, 3) == 1.5

    def test_decimal_string(self):
        assert decode("1.5", 1) == 0.15

    def test_empty_is_zero_without_failure(self):
        assert decode("", 4) == 0.0
        assert decode(None, 4) == 0.0
        assert parse_failure_count() == 0

    def test_too_large_for_float_is_zero_and_counted(self):
        assert decode("1" + "0" * 400, 0) == 0.0
        assert parse_failure_count() == 1

    def test_scaling_brings_large_value_into_range(self):
        assert decode("1" + "0" * 400, 390) == 1e10
        assert parse_failure_count() == 0

    def test_negative_decimal_places_scale_up_exactly(self):
        assert decode("15", -2) == 1500.0
        assert decode("123456789", -3) == 123456789000.0
        assert decode("3", -400) == 0.0
        assert parse_failure_count() == 1

    @pytest.mark.parametrize("raw", ["abc", "12x", "NaN", "Infinity", " "])
    def test_malformed_is_zero_and_counted(self, raw):
        assert decode(raw, 2) == 0.0
        assert parse_failure_count() == 1


class TestParseFloat:
    def test_funding_rate(self):
        assert parse_float("0.0001") == 0.0001
        assert parse_float("-0.00025") == -0.00025

    def test_bad_value(self):
        assert parse_float("n/a") == 0.0
        assert parse_failure_count() == 1

    @pytest.mark.parametrize("raw", ["NaN", "nan", "Infinity", "-Infinity", "1e400"])
    def test_non_finite_is_zero_and_counted(self, raw):
        assert parse_float(raw) == 0.0
        assert parse_failure_count() == 1

    def test_empty(self):
        assert parse_float("") == 0.0
        assert parse_failure_count() == 0


class TestRfc3339:
    def test_utc(self):
        assert rfc3339_to_millis("2024-01-01T00:00:00Z") == 1704067200000

    def test_offset(self):
        assert rfc3339_to_millis("2024-01-01T02:00:00+02:00") == 1704067200000

    def test_fractional_seconds_truncate_to_millis(self):
        assert rfc3339_to_millis("2024-01-01T00:00:00.123456Z") == 1704067200123

    def test_missing_is_zero(self):
        assert rfc3339_to_millis("") == 0
        assert parse_failure_count() == 0

    def test_garbage_is_zero(self):
        assert rfc3339_to_millis("next tuesday") == 0
        assert parse_failure_count() == 1

    def test_naive_is_rejected(self):
        assert rfc3339_to_millis("2024-01-01T00:00:00") == 0
        assert parse_failure_count() == 1

    def test_nanosecond_fraction_truncated(self):
        assert rfc3339_to_millis("2024-01-01T00:00:00.123456789Z") == 1704067200123

    @pytest.mark.parametrize(
        "raw",
        [
            "2024-01-01 00:00:00Z",
            "20240101T000000Z",
            "2024-01-01T00:00Z",
            "2024-01-01",
            "2024-01-01T00:00:00+0200",
            "2024-01-01T00:00:00Z\n",
        ],
    )
    def test_non_rfc3339_shapes_rejected(self, raw):
        assert rfc3339_to_millis(raw) == 0
        assert parse_failure_count() == 1

    def test_lowercase_separators_accepted(self):
        assert rfc3339_to_millis("2024-01-01t00:00:00z") == 1704067200000
