"""
Curly Language Parser

Turns a Curly token list into a `Program` tree by recursive descent with
operator-precedence climbing.

Supported Constructs
--------------------
- Statements:
    * Declarations: `let x = 1;`, `const y = 2;`, `func f(a, b) { ... }`, `class C { ... }`
    * Control flow: `if`/`else`, `while`, `loop`, `foreach x in xs`, `for init; cond; update`
    * Jumps: `return` (functions only), `break` (loops only)
    * Modules: `import "path"`
    * Block comments `/* ... */` and empty statements `;` (both become NullLiteral)

- Expressions, loosest to tightest binding:
    * assignment (right-associative)
    * `or`, `and`, `xor`, prefix `not`
    * comparison `> < == != >= <=`
    * object literals `{a: 1, b}` and array literals `[1, 2]`
    * bitwise `& | ^`, shift `<< >> >>>`, additive `+ -`, multiplicative `* / % ** //`
    * calls `f(x)(y)` and member access `a.b`, `a[0]`
    * identifiers, numbers, strings, parenthesized expressions, prefix unary operators

Parser Behavior
---------------
- Fail-fast: the first error raises and no partial tree is returned.
- One token of lookahead (`peek`), no backtracking.
- Operator levels match on operator text, so a `-` the lexer guessed to be
  unary still works as subtraction between two operands.
- `return`/`break` legality is checked against a stack of enclosing constructs.

Entry Points
------------
- `produce_ast(source)`: tokenize and parse a whole program.
- `Parser(tokens).parse()`: parse an existing token list.

Raises
------
ParseError
    On any grammar violation.
ContextError
    On `return` outside a function or `break` outside a loop.
LexError
    From `produce_ast`, when the source cannot be tokenized.
"""

from __future__ import annotations

from curly.curly_ast import (
    ArrayLiteral,
    AssignmentExpression,
    BinaryExpression,
    BreakStatement,
    CallExpression,
    ClassDeclaration,
    ConditionalStatement,
    Expression,
    ExpressionStatement,
    ForEachStatement,
    ForStatement,
    FunctionDeclaration,
    Identifier,
    ImportStatement,
    LogicalExpression,
    LoopStatement,
    MemberExpression,
    NullLiteral,
    NumericLiteral,
    ObjectLiteral,
    Program,
    Property,
    ReturnStatement,
    Statement,
    StringLiteral,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)
from curly.curly_constants import TokenKind
from curly.curly_errors import ContextError, ParseError
from curly.curly_lexer import Token, tokenize

FUNCTION = "function"
LOOP = "loop"


class Parser:
    """
    Curly Parser Class

    Attributes
    ----------
    tokens : list[Token]
        The token list to parse. Must end with an EOF token.
    position : int
        Index of the current token.
    context : list[str]
        Enclosing constructs, innermost last (`"function"` or `"loop"`).
    comparison_ops, bitwise_ops, shift_ops, additive_ops, multiplicative_ops : set[str]
        Operator texts accepted at each binary precedence level.

    Methods
    -------
    parse() -> Program
        Parse the whole token list.
    parse_statement() -> Statement
        Parse one statement, dispatching on the current token kind.
    parse_expression() -> Expression
        Parse one expression starting at the assignment level.
    """

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            tokens = list(tokens) + [Token(TokenKind.EOF, TokenKind.EOF.value)]
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.context: list[str] = []

        self.comparison_ops: set[str] = {">", "<", "==", "!=", ">=", "<="}
        self.bitwise_ops: set[str] = {"&", "|", "^"}
        self.shift_ops: set[str] = {"<<", ">>", ">>>"}
        self.additive_ops: set[str] = {"+", "-"}
        self.multiplicative_ops: set[str] = {"*", "/", "%", "**", "//"}

    # ------------------------------------------------------------------
    # Token cursor
    # ------------------------------------------------------------------

    def current(self) -> Token:
        return self.tokens[self.position]

    def peek(self, offset: int = 1) -> Token:
        index = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        """Consumes the current token. The cursor never moves past EOF."""
        tok = self.current()
        if tok.kind != TokenKind.EOF:
            self.position += 1
        return tok

    def at_end(self) -> bool:
        return self.current().kind == TokenKind.EOF

    def match(self, kind: TokenKind, message: str) -> Token:
        tok = self.current()
        if tok.kind != kind:
            raise ParseError.at(message, tok)
        return self.advance()

    def skip_semicolon(self) -> None:
        if self.current().kind == TokenKind.SEMICOLON:
            self.advance()

    def at_operator(self, ops: set[str], *kinds: TokenKind) -> bool:
        tok = self.current()
        return tok.kind in kinds and tok.text in ops

    def at_logical(self, text: str) -> bool:
        tok = self.current()
        return tok.kind == TokenKind.LOGICAL_OPERATOR and tok.text == text

    # ------------------------------------------------------------------
    # Context gating
    # ------------------------------------------------------------------

    def in_function(self) -> bool:
        return FUNCTION in self.context

    def in_loop(self) -> bool:
        return LOOP in self.context

    # ------------------------------------------------------------------
    # Program and statements
    # ------------------------------------------------------------------

    def parse(self) -> Program:
        """Parse the full token list into a Program.

        Raises
        ------
        ParseError
            Also when the input nests deeper than the interpreter stack allows.
        """
        program = Program()
        try:
            while not self.at_end():
                if self.current().kind == TokenKind.WHITESPACE:
                    self.advance()
                    continue
                program.body.append(self.parse_statement())
        except RecursionError:
            tok = self.current()
            raise ParseError(
                f"Expression nested too deeply at line {tok.line}, col {tok.col}",
                tok.line,
                tok.col,
            ) from None
        return program

    def parse_statement(self) -> Statement:
        """Parse a single top-level or block-level statement."""
        kind = self.current().kind

        if kind == TokenKind.OPEN_COMMENT:
            return self.parse_comment()
        if kind in (TokenKind.LET, TokenKind.CONST):
            return self.parse_variable_declaration()
        if kind == TokenKind.FUNC:
            return self.parse_function_declaration()
        if kind == TokenKind.RETURN:
            if not self.in_function():
                raise ContextError.at("Return statement must be inside a function", self.current())
            return self.parse_return_statement()
        if kind == TokenKind.CLASS:
            return self.parse_class_declaration()
        if kind == TokenKind.BREAK:
            if not self.in_loop():
                raise ContextError.at("Break statement must be inside a loop", self.current())
            return self.parse_break_statement()
        if kind in (TokenKind.IF, TokenKind.ELSE):
            # A stray `else` is handled like `if`; well-formed input only reaches
            # `else` from inside parse_if_statement.
            return self.parse_if_statement()
        if kind == TokenKind.WHILE:
            return self.parse_while_statement()
        if kind == TokenKind.LOOP:
            return self.parse_loop_statement()
        if kind == TokenKind.FOREACH:
            return self.parse_for_each_statement()
        if kind == TokenKind.FOR:
            return self.parse_for_statement()
        if kind == TokenKind.IMPORT:
            return self.parse_import_statement()
        if kind == TokenKind.SEMICOLON:
            self.advance()
            return NullLiteral()

        expression = self.parse_expression()
        self.skip_semicolon()
        return ExpressionStatement(expression)

    def parse_block(self, what: str, context: str | None = None) -> list[Statement]:
        """Parse a `{ ... }` body, with `context` pushed while it is open."""
        self.match(TokenKind.OPEN_BRACE, f"Expected '{{' to open {what}")
        if context is not None:
            self.context.append(context)
        try:
            body: list[Statement] = []
            while self.current().kind != TokenKind.CLOSE_BRACE:
                if self.at_end():
                    raise ParseError.at(f"Expected '}}' to close {what}", self.current())
                body.append(self.parse_statement())
        finally:
            if context is not None:
                self.context.pop()
        self.match(TokenKind.CLOSE_BRACE, f"Expected '}}' to close {what}")
        return body

    def parse_comment(self) -> NullLiteral:
        """Skip a block comment. Comments are not kept in the tree."""
        start = self.advance()
        while self.current().kind != TokenKind.CLOSE_COMMENT:
            if self.at_end():
                raise ParseError(
                    f"Unterminated comment starting at line {start.line}, col {start.col}",
                    start.line,
                    start.col,
                )
            self.advance()
        self.advance()
        return NullLiteral()

    def parse_variable_declaration(self, consume_semicolon: bool = True) -> VariableDeclaration:
        constant = self.advance().kind == TokenKind.CONST
        name = self.match(TokenKind.IDENTIFIER, "Expected identifier after let/const").text

        if self.current().kind != TokenKind.EQUALS:
            if constant:
                raise ParseError.at(f"Constant variable '{name}' must be initialized", self.current())
            if consume_semicolon:
                self.skip_semicolon()
            return VariableDeclaration(False, name, NullLiteral())

        self.match(TokenKind.EQUALS, "Expected '=' in variable declaration")
        value = self.parse_expression()
        if consume_semicolon:
            self.skip_semicolon()
        return VariableDeclaration(constant, name, value)

    def parse_function_declaration(self) -> FunctionDeclaration:
        self.advance()
        name: str | None = None
        if self.current().kind != TokenKind.OPEN_PAREN:
            name = self.match(TokenKind.IDENTIFIER, "Expected function name after func").text

        params = self.parse_parameters()
        body = self.parse_block("function body", FUNCTION)
        return FunctionDeclaration(params, name, body, anonymous=name is None)

    def parse_parameters(self) -> list[str]:
        """Parse `( name, name, ... )` of a function header."""
        self.match(TokenKind.OPEN_PAREN, "Expected '(' after function name")
        params: list[str] = []
        while self.current().kind != TokenKind.CLOSE_PAREN:
            tok = self.current()
            if tok.kind != TokenKind.IDENTIFIER:
                raise ParseError.at("Function parameters must be identifiers", tok)
            params.append(self.advance().text)
            if self.current().kind != TokenKind.COMMA:
                break
            self.advance()
        self.match(TokenKind.CLOSE_PAREN, "Expected ')' after parameters")
        return params

    def parse_return_statement(self) -> ReturnStatement:
        self.advance()
        if self.current().kind in (TokenKind.SEMICOLON, TokenKind.CLOSE_BRACE):
            self.skip_semicolon()
            return ReturnStatement(NullLiteral())
        value = self.parse_expression()
        self.skip_semicolon()
        return ReturnStatement(value)

    def parse_break_statement(self) -> BreakStatement:
        self.advance()
        self.skip_semicolon()
        return BreakStatement()

    def parse_class_declaration(self) -> ClassDeclaration:
        self.advance()
        name = self.match(TokenKind.IDENTIFIER, "Expected class name after class").text
        body = self.parse_block("class body")
        return ClassDeclaration(name, body)

    def parse_import_statement(self) -> ImportStatement:
        self.advance()
        path = self.match(TokenKind.STRING, "Expected string after import").text
        self.skip_semicolon()
        return ImportStatement(path)

    def parse_if_statement(self) -> ConditionalStatement:
        self.advance()
        condition = self.parse_expression()
        body = self.parse_block("if body")

        alternate: list[Statement] = []
        if self.current().kind == TokenKind.ELSE:
            self.advance()
            alternate = self.parse_block("else body")
        return ConditionalStatement(condition, body, alternate)

    def parse_while_statement(self) -> WhileStatement:
        self.advance()
        condition = self.parse_expression()
        body = self.parse_block("while body", LOOP)
        return WhileStatement(condition, body)

    def parse_loop_statement(self) -> LoopStatement:
        self.advance()
        return LoopStatement(self.parse_block("loop body", LOOP))

    def parse_for_each_statement(self) -> ForEachStatement:
        self.advance()
        variable = self.match(TokenKind.IDENTIFIER, "Expected identifier after foreach").text
        self.match(TokenKind.IN, "Expected 'in' after foreach variable")
        collection = self.parse_expression()
        body = self.parse_block("foreach body", LOOP)
        return ForEachStatement(variable, collection, body)

    def parse_for_statement(self) -> ForStatement:
        self.advance()
        init = self.parse_for_init()
        self.match(TokenKind.SEMICOLON, "Expected ';' after for init")
        condition = self.parse_expression()
        self.match(TokenKind.SEMICOLON, "Expected ';' after for condition")
        update = self.parse_expression()
        body = self.parse_block("for body", LOOP)
        return ForStatement(init, condition, update, body)

    def parse_for_init(self) -> Statement:
        """Parse the first clause of a `for` header, leaving its `;` in place."""
        kind = self.current().kind
        if kind in (TokenKind.LET, TokenKind.CONST):
            return self.parse_variable_declaration(consume_semicolon=False)
        if kind == TokenKind.SEMICOLON:
            return NullLiteral()
        return ExpressionStatement(self.parse_expression())

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        return self.parse_assignment_expression()

    def parse_args(self) -> list[Expression]:
        """Parse the `( expr, expr, ... )` argument list of a call."""
        self.match(TokenKind.OPEN_PAREN, "Expected '('")
        args: list[Expression] = []
        if self.current().kind != TokenKind.CLOSE_PAREN:
            args.append(self.parse_assignment_expression())
            while self.current().kind == TokenKind.COMMA:
                self.advance()
                args.append(self.parse_assignment_expression())
        self.match(TokenKind.CLOSE_PAREN, "Expected ')' after arguments")
        return args

    def parse_assignment_expression(self) -> Expression:
        left = self.parse_or_expression()
        if self.current().kind == TokenKind.EQUALS:
            self.advance()
            value = self.parse_assignment_expression()
            return AssignmentExpression(left, value)
        return left

    def parse_or_expression(self) -> Expression:
        left = self.parse_and_expression()
        while self.at_logical("or"):
            self.advance()
            left = LogicalExpression(left, self.parse_and_expression(), "or")
        return left

    def parse_and_expression(self) -> Expression:
        left = self.parse_xor_expression()
        while self.at_logical("and"):
            self.advance()
            left = LogicalExpression(left, self.parse_xor_expression(), "and")
        return left

    def parse_xor_expression(self) -> Expression:
        left = self.parse_not_expression()
        while self.at_logical("xor"):
            self.advance()
            left = LogicalExpression(left, self.parse_not_expression(), "xor")
        return left

    def parse_not_expression(self) -> Expression:
        if self.at_logical("not"):
            self.advance()
            return LogicalExpression(NullLiteral(), self.parse_not_expression(), "not")
        return self.parse_comparison_expression()

    def at_comparison(self) -> bool:
        tok = self.current()
        if tok.kind == TokenKind.EQUALS:
            # `= =` written as two tokens still reads as `==`.
            return self.peek().kind == TokenKind.EQUALS
        return tok.kind == TokenKind.COMPARISON_OPERATOR and tok.text in self.comparison_ops

    def parse_comparison_expression(self) -> Expression:
        left = self.parse_object_expression()
        while self.at_comparison():
            operator = self.advance().text
            if operator == "=":
                operator += self.advance().text
            right = self.parse_object_expression()
            left = BinaryExpression(left, right, operator)
        return left

    def parse_object_expression(self) -> Expression:
        if self.current().kind != TokenKind.OPEN_BRACE:
            return self.parse_array_expression()

        self.advance()
        properties: list[Property] = []
        while not self.at_end() and self.current().kind != TokenKind.CLOSE_BRACE:
            key = self.match(TokenKind.IDENTIFIER, "Expected identifier as object key").text

            if self.current().kind == TokenKind.COMMA:
                self.advance()
                properties.append(Property(key, NullLiteral()))
                continue
            if self.current().kind == TokenKind.CLOSE_BRACE:
                properties.append(Property(key, NullLiteral()))
                continue

            self.match(TokenKind.COLON, "Expected ':' after object key")
            properties.append(Property(key, self.parse_expression()))

            if self.current().kind != TokenKind.CLOSE_BRACE:
                self.match(TokenKind.COMMA, "Expected ',' after object property")

        self.match(TokenKind.CLOSE_BRACE, "Object literal must end with '}'")
        return ObjectLiteral(properties)

    def parse_array_expression(self) -> Expression:
        if self.current().kind != TokenKind.OPEN_BRACKET:
            return self.parse_bitwise_expression()

        self.advance()
        elements: list[Expression] = []
        while self.current().kind != TokenKind.CLOSE_BRACKET:
            elements.append(self.parse_expression())
            if self.current().kind == TokenKind.COMMA:
                self.advance()
        self.match(TokenKind.CLOSE_BRACKET, "Expected ']' after array elements")
        return ArrayLiteral(elements)

    def parse_bitwise_expression(self) -> Expression:
        left = self.parse_shift_expression()
        while self.at_operator(self.bitwise_ops, TokenKind.BINARY_OPERATOR):
            operator = self.advance().text
            left = BinaryExpression(left, self.parse_shift_expression(), operator)
        return left

    def parse_shift_expression(self) -> Expression:
        left = self.parse_additive_expression()
        while self.at_operator(self.shift_ops, TokenKind.BINARY_OPERATOR):
            operator = self.advance().text
            left = BinaryExpression(left, self.parse_additive_expression(), operator)
        return left

    def parse_additive_expression(self) -> Expression:
        left = self.parse_multiplicative_expression()
        while self.at_operator(
            self.additive_ops, TokenKind.BINARY_OPERATOR, TokenKind.UNARY_OPERATOR
        ):
            operator = self.advance().text
            left = BinaryExpression(left, self.parse_multiplicative_expression(), operator)
        return left

    def parse_multiplicative_expression(self) -> Expression:
        left = self.parse_call_member_expression()
        while self.at_operator(self.multiplicative_ops, TokenKind.BINARY_OPERATOR):
            operator = self.advance().text
            left = BinaryExpression(left, self.parse_call_member_expression(), operator)
        return left

    def parse_call_member_expression(self) -> Expression:
        expression = self.parse_member_expression()
        while self.current().kind == TokenKind.OPEN_PAREN:
            expression = self.parse_member_tail(self.parse_call_expression(expression))
        return expression

    def parse_call_expression(self, callee: Expression) -> Expression:
        call: Expression = CallExpression(callee, self.parse_args())
        if self.current().kind == TokenKind.OPEN_PAREN:
            call = self.parse_call_expression(call)
        return call

    def parse_member_expression(self) -> Expression:
        return self.parse_member_tail(self.parse_primary_expression())

    def parse_member_tail(self, obj: Expression) -> Expression:
        """Fold any `.name` / `[expr]` suffixes onto `obj`, left to right."""
        while self.current().kind in (TokenKind.DOT, TokenKind.OPEN_BRACKET):
            operator = self.advance()
            if operator.kind == TokenKind.DOT:
                prop = self.parse_primary_expression()
                if not isinstance(prop, Identifier):
                    raise ParseError.at("Expected identifier after '.'", operator)
                obj = MemberExpression(obj, prop, computed=False)
            else:
                prop = self.parse_expression()
                self.match(TokenKind.CLOSE_BRACKET, "Expected ']' after computed property")
                obj = MemberExpression(obj, prop, computed=True)
        return obj

    def parse_primary_expression(self) -> Expression:
        tok = self.current()

        if tok.kind == TokenKind.IDENTIFIER:
            return Identifier(self.advance().text)
        if tok.kind == TokenKind.NUMBER:
            return NumericLiteral(float(self.advance().text))
        if tok.kind == TokenKind.STRING:
            return StringLiteral(self.advance().text)
        if tok.kind == TokenKind.WHITESPACE:
            self.advance()
            return self.parse_primary_expression()
        if tok.kind == TokenKind.OPEN_PAREN:
            self.advance()
            expression = self.parse_expression()
            self.match(TokenKind.CLOSE_PAREN, "Expected ')' after expression")
            return expression
        if tok.kind == TokenKind.UNARY_OPERATOR:
            operator = self.advance().text
            return UnaryExpression(self.parse_primary_expression(), operator)

        raise ParseError.at("Unexpected token", tok)


def produce_ast(source: str) -> Program:
    """Tokenize and parse `source`. Raises on the first lexical or grammar error."""
    return Parser(tokenize(source)).parse()


__all__ = ["Parser", "produce_ast"]
