"""Shell-like lexer for splitting a line of input into fields."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class QuoteState(Enum):
    """Quoting context of the character being scanned."""

    UNQUOTED = ""
    SINGLE_QUOTED = "'"
    DOUBLE_QUOTED = '"'

    @property
    def char(self) -> str:
        """The quote character that closes this state."""
        return self.value

    @classmethod
    def opened_by(cls, c: str) -> Optional["QuoteState"]:
        """Return the state opened by quote character c, or None."""
        if c == "'":
            return cls.SINGLE_QUOTED
        if c == '"':
            return cls.DOUBLE_QUOTED
        return None


@dataclass
class SplitResult:
    """Tokens of a line and the quote left open at its end, if any."""

    tokens: list[str]
    open_quote: QuoteState = QuoteState.UNQUOTED

    @property
    def unterminated(self) -> bool:
        return self.open_quote is not QuoteState.UNQUOTED


def scan(line: str) -> SplitResult:
    """
    Split a line into tokens, handling quotes and escapes.

    Rules:
    - Unquoted, unescaped whitespace separates tokens
    - Single quotes (') and double quotes (") group characters; a quote of
      the other kind inside a quoted region is literal
    - Backslash (\\) copies the next character verbatim, quoted or not
    - Unescaped quotes and backslashes are removed from tokens
    - Quoted, unquoted and escaped fragments with no whitespace between
      them join into one token

    An unterminated quote is not an error: the rest of the line belongs to
    it, and the result records which quote was left open.

    Args:
        line: The line to split

    Returns:
        SplitResult with the tokens in order
    """
    tokens = []
    token_chars = None  # None between tokens
    quote = QuoteState.UNQUOTED
    escaped = False

    for c in line:
        if escaped:
            escaped = False
            token_chars.append(c)
            continue

        if c == "\\":
            escaped = True
            if token_chars is None:
                token_chars = []
            continue

        if quote is QuoteState.UNQUOTED:
            if c.isspace():
                # End of a token
                if token_chars is not None:
                    tokens.append("".join(token_chars))
                    token_chars = None
                continue

            # Start of a token
            if token_chars is None:
                token_chars = []

            opened = QuoteState.opened_by(c)
            if opened is not None:
                quote = opened
            else:
                token_chars.append(c)
        elif c == quote.char:
            quote = QuoteState.UNQUOTED
        else:
            token_chars.append(c)

    # Final token with no whitespace after it
    if token_chars is not None:
        tokens.append("".join(token_chars))

    return SplitResult(tokens=tokens, open_quote=quote)


def split(line: str) -> list[str]:
    """Split a line into tokens. See scan() for the rules."""
    return scan(line).tokens


def count_max_tokens(line: str) -> int:
    """
    Count the runs of non-whitespace characters in line.

    Quotes and backslashes are ignored, so this is an upper bound on the
    number of tokens split() returns.
    """
    n = 0
    was_space = True
    for c in line:
        space = c.isspace()
        if was_space and not space:
            n += 1
        was_space = space
    return n
