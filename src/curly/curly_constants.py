"""
Token tables shared by the Curly lexer and parser.

Exports:
    - TokenKind: closed enumeration of every token class the lexer can emit
    - token_hashmap: keyword text -> TokenKind
    - punctuation_tokens: single-character punctuation -> TokenKind
    - arith_chars: characters that open an arithmetic/bitwise operator
    - whitespace_chars: characters dropped by the lexer
"""

from enum import Enum


class TokenKind(Enum):
    # Literals
    NUMBER = "Number"
    STRING = "String"
    IDENTIFIER = "Identifier"

    # Punctuation
    OPEN_PAREN = "OpenParen"
    CLOSE_PAREN = "CloseParen"
    OPEN_BRACKET = "OpenBracket"
    CLOSE_BRACKET = "CloseBracket"
    OPEN_BRACE = "OpenBrace"
    CLOSE_BRACE = "CloseBrace"
    COMMA = "Comma"
    COLON = "Colon"
    COLON_COLON = "ColonColon"
    DOT = "Dot"
    SEMICOLON = "Semicolon"

    # Operator classes
    EQUALS = "Equals"
    BINARY_OPERATOR = "BinaryOperator"
    UNARY_OPERATOR = "UnaryOperator"
    COMPARISON_OPERATOR = "ComparisonOperator"
    LOGICAL_OPERATOR = "LogicalOperator"

    # Comment delimiters
    OPEN_COMMENT = "OpenComment"
    CLOSE_COMMENT = "CloseComment"

    # Keywords
    LET = "Let"
    CONST = "Const"
    FUNC = "Func"
    RETURN = "Return"
    IF = "If"
    ELSE = "Else"
    WHILE = "While"
    LOOP = "Loop"
    FOREACH = "ForEach"
    FOR = "For"
    IN = "In"
    BREAK = "Break"
    IMPORT = "Import"
    CLASS = "Class"

    WHITESPACE = "Whitespace"
    EOF = "EndOfFile"

    def __repr__(self) -> str:
        return f"TokenKind.{self.name}"


token_hashmap: dict[str, TokenKind] = {
    "let": TokenKind.LET,
    "const": TokenKind.CONST,
    "func": TokenKind.FUNC,
    "return": TokenKind.RETURN,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "while": TokenKind.WHILE,
    "loop": TokenKind.LOOP,
    "foreach": TokenKind.FOREACH,
    "for": TokenKind.FOR,
    "in": TokenKind.IN,
    "break": TokenKind.BREAK,
    "not": TokenKind.LOGICAL_OPERATOR,
    "and": TokenKind.LOGICAL_OPERATOR,
    "or": TokenKind.LOGICAL_OPERATOR,
    "xor": TokenKind.LOGICAL_OPERATOR,
    "import": TokenKind.IMPORT,
    "class": TokenKind.CLASS,
}

punctuation_tokens: dict[str, TokenKind] = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
    "[": TokenKind.OPEN_BRACKET,
    "]": TokenKind.CLOSE_BRACKET,
    ";": TokenKind.SEMICOLON,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
}

arith_chars = "+-*/%&|^"

# Two-character forms of the arithmetic class, in the order they are tried
# after the unary-minus check.
arith_composites: tuple[tuple[str, TokenKind], ...] = (
    ("++", TokenKind.UNARY_OPERATOR),
    ("--", TokenKind.UNARY_OPERATOR),
    ("**", TokenKind.BINARY_OPERATOR),
    ("/*", TokenKind.OPEN_COMMENT),
    ("*/", TokenKind.CLOSE_COMMENT),
    ("//", TokenKind.BINARY_OPERATOR),
)

comparison_composites: dict[str, TokenKind] = {
    "<<": TokenKind.BINARY_OPERATOR,
    ">>": TokenKind.BINARY_OPERATOR,
    "==": TokenKind.COMPARISON_OPERATOR,
    "!=": TokenKind.COMPARISON_OPERATOR,
    ">=": TokenKind.COMPARISON_OPERATOR,
    "<=": TokenKind.COMPARISON_OPERATOR,
}

whitespace_chars = " \t\n\r"

__all__ = [
    "TokenKind",
    "arith_chars",
    "arith_composites",
    "comparison_composites",
    "punctuation_tokens",
    "token_hashmap",
    "whitespace_chars",
]
