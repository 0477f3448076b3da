"""Unit tests for field parsers."""

import unittest
from simpleio.errors import FieldParseError, SimpleIOException
from simpleio.parsers import BAD_INPUT, identity, restrict


def parse_int(text: str) -> int:
    try:
        return int(text, 0)
    except ValueError:
        raise FieldParseError(BAD_INPUT)


def non_negative(value: int) -> None:
    if value < 0:
        raise FieldParseError("cannot be negative")


class TestParsers(unittest.TestCase):
    """Test field parser helpers."""

    def test_identity(self):
        self.assertEqual("", identity(""))
        self.assertEqual(" -5 ", identity(" -5 "))

    def test_restrict_accepts(self):
        """Test that values passing the predicate are returned."""
        parser = restrict(parse_int, non_negative)
        self.assertEqual(0, parser("0"))
        self.assertEqual(16, parser("0x10"))

    def test_restrict_rejects(self):
        """Test that the predicate can reject well-formed values."""
        parser = restrict(parse_int, non_negative)
        with self.assertRaises(FieldParseError) as cm:
            parser("-5")
        self.assertEqual("cannot be negative", str(cm.exception))

    def test_restrict_keeps_parser_errors(self):
        """Test that parse errors are raised before the predicate runs."""
        seen = []
        parser = restrict(parse_int, seen.append)
        with self.assertRaises(FieldParseError):
            parser("abc")
        self.assertEqual([], seen)

    def test_field_parse_error_is_value_error(self):
        """Test that field parse errors can be caught as ValueError."""
        error = FieldParseError(BAD_INPUT)
        self.assertIsInstance(error, ValueError)
        self.assertIsInstance(error, SimpleIOException)


if __name__ == "__main__":
    unittest.main()
