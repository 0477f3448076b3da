"""Argument dispatcher: take fields from the command line or standard input."""

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TextIO

from rich.console import Console

from . import line_scanner
from . import shlex_parser
from .errors import StreamError
from .parsers import FieldParser, identity


def default_program_name() -> str:
    """Get the basename of the invocation path, or the whole path if it has none."""
    if not sys.argv or not sys.argv[0]:
        return ""
    return os.path.basename(sys.argv[0]) or sys.argv[0]


def error_console(file: Optional[TextIO] = None) -> Console:
    """Create a console for diagnostics that prints user text literally."""
    return Console(
        file=file,
        stderr=file is None,
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


def write_line(console: Console, text: str) -> None:
    """Write text to the console file as is, without rendering it."""
    console.file.write(f"{text}\n")
    console.file.flush()


@dataclass
class Config:
    """What a program accepts and how it presents itself."""

    program_name: str = field(default_factory=default_program_name)
    # The part of the usage message listing the arguments, e.g. "seconds"
    usage_args: str = ""
    parsers: list[FieldParser] = field(default_factory=lambda: [identity])
    # With repeat, parsers[0] parses any nonzero number of arguments
    repeat: bool = True

    @classmethod
    def every(
        cls,
        parser: FieldParser = identity,
        usage_args: str = "",
        program_name: Optional[str] = None,
    ) -> "Config":
        """Accept any nonzero number of arguments, all parsed by parser."""
        config = cls(usage_args=usage_args, parsers=[parser], repeat=True)
        if program_name is not None:
            config.program_name = program_name
        return config

    @classmethod
    def fixed(
        cls,
        *parsers: FieldParser,
        usage_args: str = "",
        program_name: Optional[str] = None,
    ) -> "Config":
        """Accept exactly len(parsers) arguments, one parser each."""
        config = cls(usage_args=usage_args, parsers=list(parsers), repeat=False)
        if program_name is not None:
            config.program_name = program_name
        return config

    @property
    def usage(self) -> str:
        """The usage message, e.g. "usage: sleep seconds"."""
        return " ".join(["usage:", self.program_name, self.usage_args]).rstrip()

    def accepts(self, count: int) -> bool:
        """Check whether count arguments is a valid invocation."""
        if self.repeat:
            return count > 0
        return count == len(self.parsers)

    def parser_for(self, index: int) -> FieldParser:
        return self.parsers[0] if self.repeat else self.parsers[index]


class Dispatcher:
    """
    Run a program function on arguments from the command line or stdin.

    When invoked with "-h" or "--help", the usage message goes to stdout.
    When the only argument is "-", or there are none and stdin is not
    interactive, every logical line of stdin is split into fields and handled
    like a separate invocation. When invoked with a valid number of
    arguments, they are parsed verbatim and passed on. Otherwise the usage
    message goes to stderr.

    Errors are prefixed with "error" while reading stdin and with the
    program name otherwise.
    """

    def __init__(
        self,
        config: Config,
        stdout: Optional[TextIO] = None,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.stdout = stdout
        self.console = console if console is not None else error_console()
        self.reading_stdin = False

    @property
    def prefix(self) -> str:
        return "error" if self.reading_stdin else self.config.program_name

    def error(self, message: str, context: Optional[str] = None) -> int:
        """
        Print an error message to stderr with the current prefix.

        Returns 1 so a program function can return self.error(...) as its
        failure status.
        """
        if context is not None:
            message = f"{context}: {message}"
        write_line(self.console, f"{self.prefix}: {message}")
        return 1

    def print_usage(self, to_stderr: bool = False) -> None:
        if to_stderr:
            write_line(self.console, self.config.usage)
        else:
            print(self.config.usage, file=self.stdout)

    def run(
        self,
        fn: Callable[[list[Any]], Any],
        argv: Optional[list[str]] = None,
        stdin=None,
    ) -> int:
        """
        Dispatch on the invocation and return the exit status.

        Args:
            fn: Called with the list of parsed arguments
            argv: Arguments without the program name (default sys.argv[1:])
            stdin: Stream to read lines from (default sys.stdin)

        Returns:
            0 on success, 1 if usage was wrong or any argument failed
        """
        args = sys.argv[1:] if argv is None else list(argv)
        if stdin is None:
            stdin = sys.stdin

        if len(args) == 1 and args[0] in ("-h", "--help"):
            self.print_usage()
            return 0

        if (len(args) == 1 and args[0] == "-") or (
            not args and not is_interactive(stdin)
        ):
            return self.map_lines(fn, stdin)

        if self.config.accepts(len(args)):
            self.reading_stdin = False
            return 0 if self.apply(fn, args) else 1

        # Wrong number of arguments
        self.print_usage(to_stderr=True)
        return 1

    def map_lines(self, fn: Callable[[list[Any]], Any], stream) -> int:
        """
        Split each logical line of stream into fields and apply fn to them.

        Lines without fields are skipped. Every line is processed even when
        earlier ones fail.

        Returns:
            0 if every line succeeded, 1 otherwise
        """
        self.reading_stdin = True
        success = True
        expected = len(self.config.parsers)

        # Read bytes when available so carriage returns reach the scanner
        scanner = line_scanner.LineScanner(getattr(stream, "buffer", stream))
        try:
            for line in scanner:
                args = shlex_parser.split(line)
                if not args:
                    continue

                if not self.config.repeat and len(args) < expected:
                    success = False
                    self.error("too few arguments")
                elif not self.config.repeat and len(args) > expected:
                    success = False
                    self.error("too many arguments")
                elif not self.apply(fn, args):
                    success = False
        except StreamError as e:
            success = False
            self.error(str(e))

        return 0 if success else 1

    def apply(self, fn: Callable[[list[Any]], Any], args: list[str]) -> bool:
        """
        Parse args and, if all of them parse, call fn with the values.

        Each failure is reported as "<arg>: <message>".
        """
        success = True
        parsed = []
        for i, arg in enumerate(args):
            try:
                parsed.append(self.config.parser_for(i)(arg))
            except ValueError as e:
                success = False
                self.error(str(e), context=arg)

        if success:
            fn(parsed)
        return success


def is_interactive(stream) -> bool:
    """Check whether stream is attached to a terminal."""
    isatty = getattr(stream, "isatty", None)
    return bool(isatty is not None and isatty())


def main(
    fn: Callable[[list[Any]], Any],
    config: Optional[Config] = None,
    argv: Optional[list[str]] = None,
    stdin=None,
) -> None:
    """Run fn through a Dispatcher and exit with its status."""
    dispatcher = Dispatcher(config if config is not None else Config())
    sys.exit(dispatcher.run(fn, argv, stdin))
