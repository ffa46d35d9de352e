"""
Renders Curly AST nodes back into Curly source text.

This module defines the `SourceEmitter` class used by the `Renderer` to turn a
parsed tree into text that parses back to an equal tree.

Supported Features:
    - Statements: declarations, control flow, jumps, imports, classes, comments
    - Expressions: every operator level, literals, calls, member access
    - Nested operator expressions are parenthesized, so precedence and
      associativity survive a render/re-parse round trip
    - NullLiteral placeholders are rendered as the omission they stand for
      (`let x;`, `{a}`, `return;`, `;`)

Behavior:
    - Statement emitters (`emit_<kind>`) append indented lines to `lines`.
    - Expression emitters (`emit_expr_<kind>`) return strings.
    - `get_output()` joins the accumulated lines.

Raises:
    - `NotImplementedError`: If a node kind has no emitter.
"""

import math
from decimal import Decimal

from curly.curly_ast import (
    ArrayLiteral,
    AssignmentExpression,
    BinaryExpression,
    CallExpression,
    ClassDeclaration,
    Comment,
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
    NodeType,
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

# Expressions that bind at least as tightly as a member/call chain and never
# need parentheses as an operand.
ATOMIC_KINDS = {
    NodeType.IDENTIFIER,
    NodeType.NUMERIC_LITERAL,
    NodeType.STRING_LITERAL,
    NodeType.NULL_LITERAL,
    NodeType.CALL_EXPRESSION,
    NodeType.MEMBER_EXPRESSION,
    NodeType.UNARY_EXPRESSION,
}

# A prefix operator is followed by a primary expression only, so member and
# call chains need parentheses there.
UNARY_OPERAND_KINDS = {
    NodeType.IDENTIFIER,
    NodeType.NUMERIC_LITERAL,
    NodeType.STRING_LITERAL,
    NodeType.NULL_LITERAL,
    NodeType.UNARY_EXPRESSION,
}


# 1e309 overflows, so float() reads this back as inf.
INF_LITERAL = "1" + "0" * 309


def format_number(value: float) -> str:
    """Formats a float as a Curly number literal (no exponent, no trailing `.0`)."""
    if value == math.inf:
        return INF_LITERAL
    if not math.isfinite(value):
        return repr(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


class SourceEmitter:
    """Emits Curly source from Curly AST nodes.

    Attributes:
        lines (list[str]): Accumulated lines of emitted source.
        indent (int): Current indentation level for emitted blocks.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.indent = 0

    def indent_str(self) -> str:
        return "    " * self.indent

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def line(self, text: str) -> None:
        self.lines.append(f"{self.indent_str()}{text}")

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _visit(self, node: Statement) -> None:
        """
        Emits one statement in place.

        Expressions found directly in a body are emitted as `expr;`, except
        the NullLiteral placeholder which has its own statement form.

        Raises
        ------
        NotImplementedError
            If no emitter is defined for the node kind.
        """
        meth = getattr(self, f"emit_{node.kind.value}", None)
        if callable(meth):
            meth(node)
            return
        if isinstance(node, Expression):
            self.line(f"{self.emit_expr(node)};")
            return
        raise NotImplementedError(f"SourceEmitter: no emitter for {node.kind.value}")

    def emit_expr(self, node: Expression) -> str:
        method = getattr(self, f"emit_expr_{node.kind.value}", None)
        if callable(method):
            return str(method(node))
        raise NotImplementedError(f"No expression emitter for kind '{node.kind.value}'")

    def operand(self, node: Expression, atomic: set[NodeType] = ATOMIC_KINDS) -> str:
        """Emits `node` as an operand, parenthesized unless its kind is in `atomic`."""
        text = self.emit_expr(node)
        if node.kind in atomic:
            return text
        return f"({text})"

    def block(self, header: str, body: list[Statement]) -> None:
        self.line(f"{header} {{")
        self.indent += 1
        for stmt in body:
            self._visit(stmt)
        self.indent -= 1
        self.line("}")

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def emit_program(self, node: Program) -> None:
        for stmt in node.body:
            self._visit(stmt)

    def declaration(self, node: VariableDeclaration) -> str:
        keyword = "const" if node.constant else "let"
        if isinstance(node.value, NullLiteral) and not node.constant:
            return f"{keyword} {node.identifier}"
        return f"{keyword} {node.identifier} = {self.emit_expr(node.value)}"

    def emit_variable_declaration(self, node: VariableDeclaration) -> None:
        self.line(f"{self.declaration(node)};")

    def emit_function_declaration(self, node: FunctionDeclaration) -> None:
        params = ", ".join(node.parameters)
        name = "" if node.anonymous or node.name is None else node.name
        self.block(f"func {name}({params})", node.body)

    def emit_return_statement(self, node: ReturnStatement) -> None:
        if isinstance(node.value, NullLiteral):
            self.line("return;")
        else:
            self.line(f"return {self.emit_expr(node.value)};")

    def emit_break_statement(self, node: Statement) -> None:
        self.line("break;")

    def emit_import_statement(self, node: ImportStatement) -> None:
        self.line(f'import "{node.path}";')

    def emit_class_declaration(self, node: ClassDeclaration) -> None:
        self.block(f"class {node.name}", node.body)

    def emit_comment(self, node: Comment) -> None:
        self.line(f"/* {node.text} */")

    def emit_conditional_statement(self, node: ConditionalStatement) -> None:
        self.block(f"if {self.emit_expr(node.condition)}", node.body)
        if node.alternate:
            self.lines[-1] += " else {"
            self.indent += 1
            for stmt in node.alternate:
                self._visit(stmt)
            self.indent -= 1
            self.line("}")

    def emit_while_statement(self, node: WhileStatement) -> None:
        self.block(f"while {self.emit_expr(node.condition)}", node.body)

    def emit_loop_statement(self, node: LoopStatement) -> None:
        self.block("loop", node.body)

    def emit_for_each_statement(self, node: ForEachStatement) -> None:
        self.block(
            f"foreach {node.variable} in {self.emit_expr(node.collection)}", node.body
        )

    def for_init(self, node: Statement) -> str:
        if isinstance(node, VariableDeclaration):
            return self.declaration(node)
        if isinstance(node, ExpressionStatement):
            return self.emit_expr(node.expression)
        if isinstance(node, NullLiteral):
            return ""
        if isinstance(node, Expression):
            return self.emit_expr(node)
        raise NotImplementedError(f"Unsupported for-loop init: {node.kind.value}")

    def emit_for_statement(self, node: ForStatement) -> None:
        header = (
            f"for {self.for_init(node.init)}; {self.emit_expr(node.condition)}; "
            f"{self.emit_expr(node.update)}"
        )
        self.block(header, node.body)

    def emit_expression_statement(self, node: ExpressionStatement) -> None:
        self.line(f"{self.emit_expr(node.expression)};")

    def emit_null_literal(self, node: NullLiteral) -> None:
        self.line(";")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def emit_expr_identifier(self, node: Identifier) -> str:
        return node.symbol

    def emit_expr_numeric_literal(self, node: NumericLiteral) -> str:
        return format_number(node.value)

    def emit_expr_string_literal(self, node: StringLiteral) -> str:
        return f'"{node.value}"'

    def emit_expr_null_literal(self, node: NullLiteral) -> str:
        return "null"

    def emit_expr_assignment_expression(self, node: AssignmentExpression) -> str:
        return f"{self.operand(node.assignee)} = {self.emit_expr(node.value)}"

    def emit_expr_binary_expression(self, node: BinaryExpression) -> str:
        return f"{self.operand(node.left)} {node.operator} {self.operand(node.right)}"

    def emit_expr_unary_expression(self, node: UnaryExpression) -> str:
        return f"{node.operator}{self.operand(node.operand, UNARY_OPERAND_KINDS)}"

    def emit_expr_logical_expression(self, node: LogicalExpression) -> str:
        if node.operator == "not":
            right = node.right
            if isinstance(right, LogicalExpression) and right.operator == "not":
                return f"not {self.emit_expr(right)}"
            return f"not {self.operand(right)}"
        return f"{self.operand(node.left)} {node.operator} {self.operand(node.right)}"

    def emit_expr_property(self, node: Property) -> str:
        if isinstance(node.value, NullLiteral):
            return node.key
        return f"{node.key}: {self.emit_expr(node.value)}"

    def emit_expr_object_literal(self, node: ObjectLiteral) -> str:
        return "{" + ", ".join(self.emit_expr_property(p) for p in node.properties) + "}"

    def emit_expr_array_literal(self, node: ArrayLiteral) -> str:
        return "[" + ", ".join(self.emit_expr(e) for e in node.elements) + "]"

    def emit_expr_call_expression(self, node: CallExpression) -> str:
        args = ", ".join(self.emit_expr(a) for a in node.arguments)
        return f"{self.operand(node.callee)}({args})"

    def emit_expr_member_expression(self, node: MemberExpression) -> str:
        obj = self.operand(node.object)
        if node.computed:
            return f"{obj}[{self.emit_expr(node.property)}]"
        return f"{obj}.{self.emit_expr(node.property)}"
