"""Logical-line scanner that joins continued and quote-spanning lines."""

import codecs
from typing import Iterator, Optional

from .errors import StreamError
from .shlex_parser import QuoteState


class LineScanner:
    """
    Iterate over the logical lines of a stream.

    A newline ends a logical line unless it is inside a pair of single or
    double quotes, in which case it is kept. An unquoted backslash-newline
    pair is a continuation and both characters are dropped. A carriage
    return right before the terminating newline is dropped.

    Quote characters and other backslashes are left in the lines; removing
    them is the job of shlex_parser.

    The stream only needs a readline() method returning str or bytes (bytes
    are decoded with the given encoding). It is read once, front to back.
    """

    def __init__(self, stream, encoding: str = "utf-8"):
        self.stream = stream
        self.encoding = encoding
        # Physical line on which the last emitted logical line started
        self.line_num: int = 0
        # Quote state when the last line was emitted
        self.open_quote: QuoteState = QuoteState.UNQUOTED

    def __iter__(self) -> Iterator[str]:
        decoder: Optional[codecs.IncrementalDecoder] = None
        line_chars: list[str] = []
        quote = QuoteState.UNQUOTED
        escaped = False
        physical_line = 1
        start_line = 1

        at_eof = False
        while not at_eof:
            chunk = self._read()
            at_eof = not chunk
            if isinstance(chunk, bytes):
                if decoder is None:
                    decoder = codecs.getincrementaldecoder(self.encoding)()
                chunk = self._decode(decoder, chunk, final=at_eof)

            for c in chunk:
                if c == "\n":
                    physical_line += 1

                if escaped:
                    escaped = False
                    if c == "\n" and quote is QuoteState.UNQUOTED:
                        # Continuation: drop the backslash and the newline
                        line_chars.pop()
                        continue
                    line_chars.append(c)
                    continue

                if c == "\\":
                    escaped = True
                elif quote is QuoteState.UNQUOTED:
                    if c == "\n":
                        if line_chars and line_chars[-1] == "\r":
                            line_chars.pop()
                        yield self._emit(line_chars, quote, start_line)
                        line_chars = []
                        start_line = physical_line
                        continue
                    opened = QuoteState.opened_by(c)
                    if opened is not None:
                        quote = opened
                elif c == quote.char:
                    quote = QuoteState.UNQUOTED

                line_chars.append(c)

        # Final line with no newline after it
        if line_chars:
            yield self._emit(line_chars, quote, start_line)

    def _read(self):
        """Read one physical line from the stream."""
        try:
            return self.stream.readline()
        except OSError as e:
            raise StreamError(f"Cannot read input: {e}") from e

    def _decode(
        self, decoder: codecs.IncrementalDecoder, data: bytes, final: bool
    ) -> str:
        try:
            return decoder.decode(data, final=final)
        except UnicodeDecodeError as e:
            raise StreamError(f"Cannot decode input as {self.encoding}: {e}") from e

    def _emit(self, line_chars: list[str], quote: QuoteState, start_line: int) -> str:
        self.line_num = start_line
        self.open_quote = quote
        return "".join(line_chars)


def scan_lines(stream, encoding: str = "utf-8") -> Iterator[str]:
    """Return a lazy iterator over the logical lines of stream."""
    return iter(LineScanner(stream, encoding))
