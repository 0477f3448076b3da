"""Command-line interface for inspecting how input is lexed."""

import argparse
import json
import sys
from dataclasses import dataclass
from typing import Optional

from rich.console import Console

from . import shlex_parser
from .dispatch import error_console, write_line
from .errors import SimpleIOException, UnterminatedQuote
from .line_scanner import LineScanner

VERSION = "1.0"


@dataclass
class LineError:
    """Represents an error found in a logical line."""

    message: str
    line_num: int
    path: str


def print_usage() -> None:
    """Print usage information."""
    print("""Usage: simpleio [-h | --help] <command> [<args>]

Commands:
  lines [<file>]           Print each logical line as a JSON object
                           (backslash-newline joined, quoted newlines kept)

  split [<file>]           Print the fields of each logical line as a JSON array
      --strict             Fail on lines that end inside an open quote

  help                     Show this help message
  version                  Show program version

With no <file>, or when <file> is -, standard input is read.
""")


def print_version() -> None:
    """Print version information."""
    print(VERSION)


def open_input(path: Optional[str]):
    """Open the input as bytes so carriage returns reach the scanner."""
    if path is None or path == "-":
        return sys.stdin.buffer
    return open(path, "rb")


def input_name(path: Optional[str]) -> str:
    return "<stdin>" if path is None or path == "-" else path


def cmd_lines(args: argparse.Namespace) -> int:
    """Execute the lines command."""
    stream = open_input(args.input)
    try:
        scanner = LineScanner(stream)
        for line in scanner:
            row = {"line_num": scanner.line_num, "text": line}
            print(json.dumps(row, separators=(",", ":")))
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()
    return 0


def cmd_split(args: argparse.Namespace, console: Console) -> int:
    """Execute the split command."""
    path = input_name(args.input)
    errors: list[LineError] = []

    stream = open_input(args.input)
    try:
        scanner = LineScanner(stream)
        for line in scanner:
            result = shlex_parser.scan(line)
            if args.strict and result.unterminated:
                errors.append(
                    LineError(
                        message=UnterminatedQuote.__name__,
                        line_num=scanner.line_num,
                        path=path,
                    )
                )
            print(json.dumps(result.tokens, separators=(",", ":")))
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()

    # Report all errors at the end
    for error in errors:
        write_line(console, f"{error.path}:{error.line_num}: error.{error.message}")
    return 1 if errors else 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Shell-like input lexer", add_help=False
    )

    # Add global help
    parser.add_argument("-h", "--help", action="store_true", help="Show help message")

    # Add subparsers for commands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Lines command
    lines_parser = subparsers.add_parser("lines", add_help=False)
    lines_parser.add_argument(
        "-h", "--help", action="store_true", help="Show help for lines"
    )
    lines_parser.add_argument("input", nargs="?", help="Input file path")

    # Split command
    split_parser = subparsers.add_parser("split", add_help=False)
    split_parser.add_argument(
        "-h", "--help", action="store_true", help="Show help for split"
    )
    split_parser.add_argument(
        "--strict", action="store_true", help="Fail on unterminated quotes"
    )
    split_parser.add_argument("input", nargs="?", help="Input file path")

    # Help command
    subparsers.add_parser("help", add_help=False)

    # Version command
    subparsers.add_parser("version", add_help=False)

    return parser


def run(argv: list[str], console: Optional[Console] = None) -> int:
    """
    Run the CLI with argv (without the program name).

    Returns:
        The exit status
    """
    if console is None:
        console = error_console()

    if not argv:
        print_usage()
        return 0

    args = build_parser().parse_args(argv)

    # Handle global and command-specific help
    if args.help or args.command == "help":
        print_usage()
        return 0

    # Handle version
    if args.command == "version":
        print_version()
        return 0

    try:
        if args.command == "lines":
            return cmd_lines(args)
        if args.command == "split":
            return cmd_split(args, console)
    except OSError as e:
        write_line(console, f"Error: {e}")
        return 1
    except SimpleIOException as e:
        write_line(console, f"Error: {e}")
        return 1

    print_usage()
    return 1


def main() -> None:
    """Main entry point for the CLI."""
    try:
        status = run(sys.argv[1:])
    except KeyboardInterrupt:
        sys.exit(130)
    sys.exit(status)
