import pytest
from hypothesis import given
from hypothesis import strategies as st

from curly.curly_errors import LexError
from curly.curly_lexer import CharacterStream, Lexer, Token, TokenKind, token_hashmap, tokenize

K = TokenKind


def kinds(source: str) -> list[TokenKind]:
    return [tok.kind for tok in tokenize(source)]


def pairs(source: str) -> list[tuple[TokenKind, str]]:
    return [(tok.kind, tok.text) for tok in tokenize(source)[:-1]]


def test_empty_source_is_just_eof() -> None:
    tokens = tokenize("")
    assert len(tokens) == 1
    assert tokens[0].kind == K.EOF
    assert tokens[0].text == "EndOfFile"


def test_whitespace_only_source_is_just_eof() -> None:
    assert kinds(" \t\r\n  \n") == [K.EOF]


def test_single_char_punctuation() -> None:
    assert kinds("( ) { } [ ] ; , . :") == [
        K.OPEN_PAREN,
        K.CLOSE_PAREN,
        K.OPEN_BRACE,
        K.CLOSE_BRACE,
        K.OPEN_BRACKET,
        K.CLOSE_BRACKET,
        K.SEMICOLON,
        K.COMMA,
        K.DOT,
        K.COLON,
        K.EOF,
    ]


def test_double_colon() -> None:
    assert pairs("a::b") == [
        (K.IDENTIFIER, "a"),
        (K.COLON_COLON, "::"),
        (K.IDENTIFIER, "b"),
    ]


def test_string_token() -> None:
    assert pairs('"hello world"') == [(K.STRING, "hello world")]


def test_string_has_no_escapes() -> None:
    assert pairs('"line\\nbreak"') == [(K.STRING, "line\\nbreak")]


def test_number_tokens() -> None:
    assert pairs("123 3.14") == [(K.NUMBER, "123"), (K.NUMBER, "3.14")]


def test_number_takes_one_fraction_only() -> None:
    assert pairs("1.2.3") == [(K.NUMBER, "1.2"), (K.DOT, "."), (K.NUMBER, "3")]


def test_trailing_dot_is_not_part_of_number() -> None:
    assert pairs("5.x") == [(K.NUMBER, "5"), (K.DOT, "."), (K.IDENTIFIER, "x")]


def test_identifier_token() -> None:
    assert pairs("my_Var2 _hidden") == [
        (K.IDENTIFIER, "my_Var2"),
        (K.IDENTIFIER, "_hidden"),
    ]


@pytest.mark.parametrize("word", sorted(token_hashmap))  # type: ignore[misc]
def test_keywords(word: str) -> None:
    assert pairs(word) == [(token_hashmap[word], word)]


@pytest.mark.parametrize("word", ["not", "and", "or", "xor"])  # type: ignore[misc]
def test_logical_words_share_one_kind(word: str) -> None:
    assert pairs(word) == [(K.LOGICAL_OPERATOR, word)]


def test_keyword_prefix_is_identifier() -> None:
    assert pairs("letter format iffy") == [
        (K.IDENTIFIER, "letter"),
        (K.IDENTIFIER, "format"),
        (K.IDENTIFIER, "iffy"),
    ]


def test_keywords_are_case_sensitive() -> None:
    assert pairs("Let") == [(K.IDENTIFIER, "Let")]


@pytest.mark.parametrize(  # type: ignore[misc]
    "source,expected",
    [
        ("a ** b", (K.BINARY_OPERATOR, "**")),
        ("a // b", (K.BINARY_OPERATOR, "//")),
        ("a << b", (K.BINARY_OPERATOR, "<<")),
        ("a >> b", (K.BINARY_OPERATOR, ">>")),
        ("a >>> b", (K.BINARY_OPERATOR, ">>>")),
        ("a == b", (K.COMPARISON_OPERATOR, "==")),
        ("a != b", (K.COMPARISON_OPERATOR, "!=")),
        ("a >= b", (K.COMPARISON_OPERATOR, ">=")),
        ("a <= b", (K.COMPARISON_OPERATOR, "<=")),
        ("a > b", (K.COMPARISON_OPERATOR, ">")),
        ("a < b", (K.COMPARISON_OPERATOR, "<")),
        ("a = b", (K.EQUALS, "=")),
        ("a % b", (K.BINARY_OPERATOR, "%")),
        ("a & b", (K.BINARY_OPERATOR, "&")),
        ("a | b", (K.BINARY_OPERATOR, "|")),
        ("a ^ b", (K.BINARY_OPERATOR, "^")),
        ("a + b", (K.BINARY_OPERATOR, "+")),
        ("a - b", (K.BINARY_OPERATOR, "-")),
        ("a * b", (K.BINARY_OPERATOR, "*")),
        ("a / b", (K.BINARY_OPERATOR, "/")),
    ],
)
def test_operators_between_operands(source: str, expected: tuple[TokenKind, str]) -> None:
    tokens = pairs(source)
    assert len(tokens) == 3
    assert tokens[1] == expected


def test_increment_and_decrement() -> None:
    assert pairs("x++ --y") == [
        (K.IDENTIFIER, "x"),
        (K.UNARY_OPERATOR, "++"),
        (K.UNARY_OPERATOR, "--"),
        (K.IDENTIFIER, "y"),
    ]


def test_comment_delimiters() -> None:
    assert pairs("/* note */") == [
        (K.OPEN_COMMENT, "/*"),
        (K.IDENTIFIER, "note"),
        (K.CLOSE_COMMENT, "*/"),
    ]


def test_minus_before_digit_is_unary() -> None:
    assert pairs("-5") == [(K.UNARY_OPERATOR, "-"), (K.NUMBER, "5")]


def test_minus_before_name_is_unary() -> None:
    assert pairs("-x") == [(K.UNARY_OPERATOR, "-"), (K.IDENTIFIER, "x")]


def test_minus_before_decimal_point_is_unary() -> None:
    assert pairs("-.5") == [(K.UNARY_OPERATOR, "-"), (K.DOT, "."), (K.NUMBER, "5")]


def test_minus_guess_ignores_grammar_position() -> None:
    # `a-1` is subtraction to a reader, but the lexer only looks ahead.
    assert pairs("a-1") == [
        (K.IDENTIFIER, "a"),
        (K.UNARY_OPERATOR, "-"),
        (K.NUMBER, "1"),
    ]
    assert pairs("a - -1") == [
        (K.IDENTIFIER, "a"),
        (K.BINARY_OPERATOR, "-"),
        (K.UNARY_OPERATOR, "-"),
        (K.NUMBER, "1"),
    ]


def test_line_and_column_tracking() -> None:
    tokens = tokenize("let x\n  = 5")
    assert (tokens[2].kind, tokens[2].line, tokens[2].col) == (K.EQUALS, 2, 3)
    assert (tokens[3].line, tokens[3].col) == (2, 5)


def test_unterminated_string_raises() -> None:
    with pytest.raises(LexError, match="Unterminated string at line 1, col 9"):
        tokenize('let x = "abc')


@pytest.mark.parametrize("source", ["`", "let x = 1 ~ 2", "a ! b", "#comment", "@"])  # type: ignore[misc]
def test_invalid_character_raises(source: str) -> None:
    with pytest.raises(LexError, match="Invalid character"):
        tokenize(source)


def test_lex_error_is_a_syntax_error() -> None:
    with pytest.raises(SyntaxError) as excinfo:
        tokenize("`")
    assert excinfo.value.kind == "lexical"  # type: ignore[attr-defined]
    assert (excinfo.value.line, excinfo.value.col) == (1, 1)  # type: ignore[attr-defined]


def test_lexer_keeps_returning_eof() -> None:
    lexer = Lexer(CharacterStream("x"))
    assert lexer.next_token().kind == K.IDENTIFIER
    assert lexer.next_token().kind == K.EOF
    assert lexer.next_token().kind == K.EOF


def test_character_stream_methods() -> None:
    stream = CharacterStream("ab")
    assert stream.peek() == "a"
    assert stream.peek(1) == "b"
    assert stream.peek(5) == ""
    assert stream.next() == "a"
    assert not stream.end_of_file()
    stream.next()
    assert stream.end_of_file()
    with pytest.raises(Exception, match="CharacterStreamError"):
        stream.next()


def test_token_repr_and_eq() -> None:
    t1 = Token(K.NUMBER, "42", 1, 2)
    t2 = Token(K.NUMBER, "42", 1, 2)
    t3 = Token(K.IDENTIFIER, "x")

    assert repr(t1) == "Token(Number, 42)"
    assert t1 == t2
    assert t1 != t3
    assert len({t1, t2, t3}) == 2


@given(st.text(max_size=100))  # type: ignore[misc]
def test_random_input_ends_with_single_eof_or_lex_error(text: str) -> None:
    try:
        tokens = tokenize(text)
    except LexError as e:
        assert "Unterminated string" in str(e) or "Invalid character" in str(e)
        return
    assert tokens[-1].kind == K.EOF
    assert sum(1 for tok in tokens if tok.kind == K.EOF) == 1
    assert all(tok.kind != K.WHITESPACE for tok in tokens)


@given(  # type: ignore[misc]
    st.lists(
        st.sampled_from(["let", "x", "1", "2.5", "+", "==", "(", ")", "{", "}", '"s"', ";"]),
        max_size=30,
    )
)
def test_space_separated_pieces_lex_one_to_one(pieces: list[str]) -> None:
    tokens = tokenize(" ".join(pieces))
    texts = [tok.text for tok in tokens[:-1]]
    assert texts == [p.strip('"') for p in pieces]


def test_shift_operators_are_greedy() -> None:
    assert pairs("a>>>=b") == [
        (K.IDENTIFIER, "a"),
        (K.BINARY_OPERATOR, ">>>"),
        (K.EQUALS, "="),
        (K.IDENTIFIER, "b"),
    ]
    assert pairs("a>>=b") == [
        (K.IDENTIFIER, "a"),
        (K.BINARY_OPERATOR, ">>"),
        (K.EQUALS, "="),
        (K.IDENTIFIER, "b"),
    ]
