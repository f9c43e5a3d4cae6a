# tests/test_text_utils.py
import unittest
from moneytracker.utils.text_utils import (
    format_currency,
    format_month_label,
    parse_amount,
    progress_bar,
    short_id,
)


class TestParseAmount(unittest.TestCase):
    def test_integer_string(self):
        self.assertEqual(parse_amount("50"), 50.0)

    def test_comma_decimal(self):
        self.assertEqual(parse_amount("50,5"), 50.5)

    def test_brazilian_format_with_symbol(self):
        self.assertEqual(parse_amount("R$ 1.234,56"), 1234.56)

    def test_dot_thousands(self):
        self.assertEqual(parse_amount("1.500"), 1500.0)
        self.assertEqual(parse_amount("1.000.000"), 1000000.0)

    def test_dot_decimal(self):
        self.assertEqual(parse_amount("12.5"), 12.5)
        self.assertEqual(parse_amount("1.50"), 1.5)

    def test_numbers_pass_through(self):
        self.assertEqual(parse_amount(30), 30.0)
        self.assertEqual(parse_amount(12.75), 12.75)

    def test_no_digits(self):
        self.assertIsNone(parse_amount("abc"))
        self.assertIsNone(parse_amount(""))
        self.assertIsNone(parse_amount(None))


class TestFormatting(unittest.TestCase):
    def test_format_currency(self):
        self.assertEqual(format_currency(1234.5), "R$1.234,50")
        self.assertEqual(format_currency(0), "R$0,00")
        self.assertEqual(format_currency(None), "R$0,00")
        self.assertEqual(format_currency(1000000), "R$1.000.000,00")

    def test_format_currency_negative(self):
        self.assertEqual(format_currency(-80), "-R$80,00")

    def test_format_month_label(self):
        self.assertEqual(format_month_label("2024-03"), "03/2024")
        self.assertEqual(format_month_label("sem-mes"), "mes/sem")

    def test_progress_bar(self):
        self.assertEqual(progress_bar(0, width=10), "░" * 10)
        self.assertEqual(progress_bar(50, width=10), "▓" * 5 + "░" * 5)
        self.assertEqual(progress_bar(100, width=10), "▓" * 10)

    def test_progress_bar_is_clamped(self):
        self.assertEqual(progress_bar(250, width=10), "▓" * 10)
        self.assertEqual(progress_bar(-20, width=10), "░" * 10)
        self.assertEqual(progress_bar(None, width=4), "░" * 4)

    def test_short_id(self):
        self.assertEqual(short_id("0a1b2c3d-4e5f-6789"), "0a1b2c3d")
        self.assertEqual(short_id(None), "")


if __name__ == '__main__':
    unittest.main()
