"""Unit tests for the command-line interface."""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from simpleio.commands import VERSION, run
from simpleio.dispatch import error_console


class TestCommands(unittest.TestCase):
    """Test the lines and split commands."""

    def setUp(self):
        self.stderr = io.StringIO()
        self.console = error_console(self.stderr)
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write_input(self, data: bytes) -> str:
        path = os.path.join(self.tmp.name, "input.txt")
        with open(path, "wb") as f:
            f.write(data)
        return path

    def run_cli(self, argv: list[str]) -> tuple[int, str]:
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            status = run(argv, self.console)
        return status, stdout.getvalue()

    def test_lines(self):
        """Test printing logical lines with their line numbers."""
        path = self.write_input(b"a\\\nb\r\n'c\nd'\n\n")
        status, out = self.run_cli(["lines", path])
        self.assertEqual(0, status)
        rows = [json.loads(line) for line in out.splitlines()]
        self.assertEqual(
            [
                {"line_num": 1, "text": "ab"},
                {"line_num": 3, "text": "'c\nd'"},
                {"line_num": 5, "text": ""},
            ],
            rows,
        )

    def test_split(self):
        """Test printing the fields of each line."""
        path = self.write_input(b"1 2 3\nhe'llo\nhello'1\nabc\\'\n \n")
        status, out = self.run_cli(["split", path])
        self.assertEqual(0, status)
        rows = [json.loads(line) for line in out.splitlines()]
        self.assertEqual(
            [["1", "2", "3"], ["hello\nhello1"], ["abc'"], []], rows
        )
        self.assertEqual("", self.stderr.getvalue())

    def test_split_strict(self):
        """Test that strict mode reports unterminated quotes."""
        path = self.write_input(b"ok\n\"open [quote]\nmore\n")
        status, out = self.run_cli(["split", "--strict", path])
        self.assertEqual(1, status)
        rows = [json.loads(line) for line in out.splitlines()]
        self.assertEqual([["ok"], ["open [quote]\nmore\n"]], rows)
        self.assertEqual(
            f"{path}:2: error.UnterminatedQuote\n", self.stderr.getvalue()
        )

    def test_split_strict_reports_path_literally(self):
        """Test that strict errors print the file path as given."""
        path = os.path.join(self.tmp.name, "in\tput [x].txt")
        with open(path, "wb") as f:
            f.write(b"'open\n")
        status, _ = self.run_cli(["split", "--strict", path])
        self.assertEqual(1, status)
        self.assertEqual(
            f"{path}:1: error.UnterminatedQuote\n", self.stderr.getvalue()
        )

    def test_split_without_strict_ignores_open_quote(self):
        path = self.write_input(b"'abc")
        status, out = self.run_cli(["split", path])
        self.assertEqual(0, status)
        self.assertEqual('["abc"]\n', out)

    def test_split_stdin(self):
        """Test reading standard input."""
        stdin = io.TextIOWrapper(io.BytesIO(b"x 'y z'\n"), encoding="utf-8")
        with mock.patch("sys.stdin", stdin):
            status, out = self.run_cli(["split", "-"])
        self.assertEqual(0, status)
        self.assertEqual('["x","y z"]\n', out)

    def test_missing_file(self):
        """Test that an unreadable file is reported."""
        missing = os.path.join(self.tmp.name, "missing.txt")
        status, out = self.run_cli(["lines", missing])
        self.assertEqual(1, status)
        self.assertEqual("", out)
        self.assertTrue(self.stderr.getvalue().startswith("Error: "))

    def test_undecodable_file(self):
        """Test that a decoding failure is reported after earlier lines."""
        path = self.write_input(b"fine\n\xff\n")
        status, out = self.run_cli(["split", path])
        self.assertEqual(1, status)
        self.assertEqual('["fine"]\n', out)
        self.assertIn("Cannot decode input", self.stderr.getvalue())

    def test_help_and_version(self):
        """Test help and version output."""
        for argv in ([], ["help"], ["-h"], ["split", "--help"]):
            status, out = self.run_cli(argv)
            self.assertEqual(0, status)
            self.assertTrue(out.startswith("Usage: simpleio"))

        status, out = self.run_cli(["version"])
        self.assertEqual(0, status)
        self.assertEqual(f"{VERSION}\n", out)


if __name__ == "__main__":
    unittest.main()
