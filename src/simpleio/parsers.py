"""Field parsers: functions that turn one field of text into a value."""

from typing import Any, Callable

# A field parser returns the parsed value or raises ValueError (usually
# FieldParseError) with a short description of what is wrong.
FieldParser = Callable[[str], Any]

# Common message for fields containing characters the parser cannot accept.
BAD_INPUT = "bad input"


def identity(text: str) -> str:
    """Return the field unchanged."""
    return text


def restrict(parser: FieldParser, predicate: Callable[[Any], None]) -> FieldParser:
    """
    Restrict parser with predicate.

    The returned parser runs parser on the field and then passes the value
    to predicate, which raises ValueError for well-formed values the program
    still rejects (for example a negative count).

    Args:
        parser: The parser to restrict
        predicate: Called with each parsed value; raises to reject it

    Returns:
        A new field parser
    """

    def restricted(text: str) -> Any:
        value = parser(text)
        predicate(value)
        return value

    return restricted
