"""Tests for numextract.numeric."""

from __future__ import annotations

import unittest

from numextract.numeric import is_finite_number, parse_leading_number, to_finite_number


class TestToFiniteNumber(unittest.TestCase):
    def test_plain_literals(self) -> None:
        self.assertEqual(to_finite_number("42"), 42.0)
        self.assertEqual(to_finite_number("-2"), -2.0)
        self.assertEqual(to_finite_number("+1"), 1.0)
        self.assertEqual(to_finite_number("3.25"), 3.25)

    def test_whitespace_is_trimmed(self) -> None:
        self.assertEqual(to_finite_number("  3.5\t"), 3.5)

    def test_bare_decimal_point_forms(self) -> None:
        self.assertEqual(to_finite_number(".5"), 0.5)
        self.assertEqual(to_finite_number("-.5"), -0.5)
        self.assertEqual(to_finite_number("5."), 5.0)

    def test_scientific_notation(self) -> None:
        self.assertEqual(to_finite_number("1e3"), 1000.0)
        self.assertEqual(to_finite_number("2.5E-2"), 0.025)

    def test_non_finite_tokens_rejected(self) -> None:
        for token in ("Infinity", "-Infinity", "NaN", "nan", "inf", "-inf"):
            with self.subTest(token=token):
                self.assertIsNone(to_finite_number(token))

    def test_overflowing_literal_rejected(self) -> None:
        self.assertIsNone(to_finite_number("1e400"))
        self.assertIsNone(to_finite_number("9" * 10_000))

    def test_malformed_strings_rejected(self) -> None:
        for token in ("", "   ", "abc", "12abc", "0x10", "1_000", "1,000", "--1", "e5"):
            with self.subTest(token=token):
                self.assertIsNone(to_finite_number(token))

    def test_typed_values(self) -> None:
        self.assertEqual(to_finite_number(7), 7.0)
        self.assertEqual(to_finite_number(-1.5), -1.5)
        self.assertIsNone(to_finite_number(float("nan")))
        self.assertIsNone(to_finite_number(float("inf")))
        self.assertIsNone(to_finite_number(10 ** 400))

    def test_bools_and_containers_rejected(self) -> None:
        self.assertIsNone(to_finite_number(True))
        self.assertIsNone(to_finite_number(False))
        self.assertIsNone(to_finite_number(None))
        self.assertIsNone(to_finite_number([1]))
        self.assertIsNone(to_finite_number({"a": 1}))


class TestParseLeadingNumber(unittest.TestCase):
    def test_prefix_is_taken(self) -> None:
        self.assertEqual(parse_leading_number("42abc"), 42.0)
        self.assertEqual(parse_leading_number("  -3.5kg"), -3.5)
        self.assertEqual(parse_leading_number("1' OR '1'='1"), 1.0)

    def test_no_leading_number(self) -> None:
        self.assertIsNone(parse_leading_number("=1+1"))
        self.assertIsNone(parse_leading_number("abc1"))
        self.assertIsNone(parse_leading_number(""))

    def test_non_finite_prefix_rejected(self) -> None:
        self.assertIsNone(parse_leading_number("Infinity"))
        self.assertIsNone(parse_leading_number("1e999 huge"))


class TestIsFiniteNumber(unittest.TestCase):
    def test_matches_to_finite_number(self) -> None:
        self.assertTrue(is_finite_number("0"))
        self.assertTrue(is_finite_number(0))
        self.assertFalse(is_finite_number("NaN"))
        self.assertFalse(is_finite_number(True))


if __name__ == "__main__":
    unittest.main()
