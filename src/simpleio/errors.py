"""Exceptions raised by the lexer and the argument dispatcher."""


class SimpleIOException(Exception):
    """Base exception for simpleio errors."""

    pass


class StreamError(SimpleIOException):
    """Raised when the input stream fails for a reason other than end of stream."""

    pass


class FieldParseError(SimpleIOException, ValueError):
    """Raised by a field parser when a field cannot be converted."""

    pass


class UnterminatedQuote(SimpleIOException):
    """Names a line that ended inside an open quote."""

    pass
