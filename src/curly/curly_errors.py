"""
Failure types raised by the Curly front end.

All errors derive from the built-in `SyntaxError` through `CurlyError`, so a
caller that only cares about "the source was bad" can catch `SyntaxError`.
The first error aborts the whole tokenize/parse call; nothing is collected
or recovered.

Classes:
    CurlyError: Base class. Carries `kind`, `message`, and an optional line/col.
    LexError: Unterminated string or invalid character.
    ParseError: Grammar violation (unexpected or missing token).
    ContextError: `return` outside a function or `break` outside a loop.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from curly.curly_lexer import Token


class CurlyError(SyntaxError):
    kind = "error"

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.col = col

    @classmethod
    def at(cls, message: str, token: Token) -> CurlyError:
        """Builds an error positioned at `token`, appending what was found."""
        return cls(
            f"{message}, got {token} at line {token.line}, col {token.col}",
            token.line,
            token.col,
        )

    def __str__(self) -> str:
        return self.message


class LexError(CurlyError):
    kind = "lexical"


class ParseError(CurlyError):
    kind = "syntax"


class ContextError(ParseError):
    kind = "context"


__all__ = ["ContextError", "CurlyError", "LexError", "ParseError"]
