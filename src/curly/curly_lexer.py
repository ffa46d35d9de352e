"""
Lexical analyzer for the Curly scripting language.

This module converts raw source text into a flat token list:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: A single token with kind, text, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Functions:
    tokenize(source): Scan a whole source string into a list ending in one EOF token.

Features:
    - Drops spaces, tabs, newlines and carriage returns
    - Greedy recognition of multi-character operators (`>>> ++ -- ** // << >> == != >= <=`)
    - Lexical unary-minus guess: `-` directly before a digit or a name is a unary operator
    - Comment delimiters `/*` and `*/` are emitted as tokens; the parser skips what lies between
    - Strings are taken verbatim between double quotes (no escapes)

Raises:
    LexError: On an unterminated string literal or an unrecognized character.

Example:
    >>> [t.text for t in tokenize("let x = 5;")]
    ['let', 'x', '=', '5', ';', 'EndOfFile']
"""

from typing import Any

from curly.curly_constants import (
    TokenKind,
    arith_chars,
    arith_composites,
    comparison_composites,
    punctuation_tokens,
    token_hashmap,
    whitespace_chars,
)
from curly.curly_errors import LexError


def is_digit(ch: str) -> bool:
    return ch != "" and ch.isascii() and ch.isdigit()


def is_ident_start(ch: str) -> bool:
    return ch != "" and (ch.isalpha() or ch == "_")


def is_ident_part(ch: str) -> bool:
    return ch != "" and (ch.isalnum() or ch == "_")


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token.

    Attributes:
        kind (TokenKind): The token class.
        text (str): The literal text of the token (string tokens hold the unquoted body).
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, kind: TokenKind, text: str, line: int = 0, col: int = 0):
        self.kind = kind
        self.text = text
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.text})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.text == other.text
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.text, self.line, self.col))


class Lexer:
    """Lexical analyzer for Curly.

    Takes a CharacterStream and hands out Token objects one at a time via
    `next_token()`. Once the stream is exhausted every call returns an EOF token.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in whitespace_chars:
            self.advance()

    def take(self, kind: TokenKind, length: int, line: int, col: int) -> Token:
        """Consumes `length` characters and wraps them in a token of `kind`."""
        text = "".join(self.advance() for _ in range(length))
        return Token(kind, text, line, col)

    def is_unary_minus(self) -> bool:
        """Guesses negation from the characters after `-`, not from grammar position."""
        nxt = self.peek(1)
        if is_digit(nxt) or is_ident_start(nxt):
            return True
        return nxt == "." and is_digit(self.peek(2))

    def match_arith(self, line: int, col: int) -> Token:
        ch = self.peek()
        if ch == "-" and self.is_unary_minus():
            return self.take(TokenKind.UNARY_OPERATOR, 1, line, col)
        pair = ch + self.peek(1)
        for text, kind in arith_composites:
            if pair == text:
                return self.take(kind, 2, line, col)
        return self.take(TokenKind.BINARY_OPERATOR, 1, line, col)

    def match_comparison(self, line: int, col: int) -> Token:
        ch = self.peek()
        pair = ch + self.peek(1)
        if pair + self.peek(2) == ">>>":
            return self.take(TokenKind.BINARY_OPERATOR, 3, line, col)
        if pair in comparison_composites:
            return self.take(comparison_composites[pair], 2, line, col)
        if ch == "=":
            return self.take(TokenKind.EQUALS, 1, line, col)
        if ch in "<>":
            return self.take(TokenKind.COMPARISON_OPERATOR, 1, line, col)
        raise LexError(f"Invalid character '{ch}' at line {line}, col {col}", line, col)

    def read_string(self, line: int, col: int) -> Token:
        self.advance()  # opening quote
        val = ""
        while not self.stream.end_of_file() and self.peek() != '"':
            val += self.advance()
        if self.stream.end_of_file():
            raise LexError(f"Unterminated string at line {line}, col {col}", line, col)
        self.advance()
        return Token(TokenKind.STRING, val, line, col)

    def read_number(self, line: int, col: int) -> Token:
        num = ""
        while is_digit(self.peek()):
            num += self.advance()
        if self.peek() == "." and is_digit(self.peek(1)):
            num += self.advance()
            while is_digit(self.peek()):
                num += self.advance()
        return Token(TokenKind.NUMBER, num, line, col)

    def read_identifier(self, line: int, col: int) -> Token:
        ident = ""
        while is_ident_part(self.peek()):
            ident += self.advance()
        return Token(token_hashmap.get(ident, TokenKind.IDENTIFIER), ident, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: On an unterminated string or an invalid character.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(TokenKind.EOF, TokenKind.EOF.value, line, col)

        ch = self.peek()

        if ch in punctuation_tokens:
            return self.take(punctuation_tokens[ch], 1, line, col)

        if ch == ":":
            if self.peek(1) == ":":
                return self.take(TokenKind.COLON_COLON, 2, line, col)
            return self.take(TokenKind.COLON, 1, line, col)

        if ch in arith_chars:
            return self.match_arith(line, col)

        if ch in "=<>!":
            return self.match_comparison(line, col)

        if ch == '"':
            return self.read_string(line, col)

        if is_digit(ch):
            return self.read_number(line, col)

        if is_ident_start(ch):
            return self.read_identifier(line, col)

        raise LexError(f"Invalid character '{ch}' at line {line}, col {col}", line, col)


def tokenize(source: str) -> list[Token]:
    """Scans `source` into a token list terminated by exactly one EOF token."""
    lexer = Lexer(CharacterStream(source))
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.kind == TokenKind.EOF:
            break
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "TokenKind", "token_hashmap", "tokenize"]
