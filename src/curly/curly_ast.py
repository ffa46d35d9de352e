"""
Defines the abstract syntax tree (AST) node classes for the Curly language.

Classes:
    NodeType:
        Closed enumeration of node kinds. Each node class carries exactly one.

    Statement:
        Base of every node. Provides `kind`, `to_dict()` and `render()`.

    Expression:
        Marker base for nodes usable in expression position. Every expression
        is also a statement.

Nodes are dataclasses, so two trees compare equal exactly when they have the
same shape and payloads. Each composite node owns its children; the parser
builds trees bottom-up and nothing mutates them afterwards.

Usage:
    This module is the data model shared by the parser, the renderer, and the
    test suites.

Example:
    node = BinaryExpression(Identifier("a"), NumericLiteral(1.0), "+")
    node.render()  # 'a + 1'
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar

ASTDict = dict[str, Any]
"""JSON-ready mapping produced by `Statement.to_dict()`."""


class NodeType(Enum):
    PROGRAM = "program"
    VARIABLE_DECLARATION = "variable_declaration"
    FUNCTION_DECLARATION = "function_declaration"
    RETURN_STATEMENT = "return_statement"
    BREAK_STATEMENT = "break_statement"
    IMPORT_STATEMENT = "import_statement"
    CLASS_DECLARATION = "class_declaration"
    COMMENT = "comment"
    CONDITIONAL_STATEMENT = "conditional_statement"
    WHILE_STATEMENT = "while_statement"
    LOOP_STATEMENT = "loop_statement"
    FOR_EACH_STATEMENT = "for_each_statement"
    FOR_STATEMENT = "for_statement"
    EXPRESSION_STATEMENT = "expression_statement"

    ASSIGNMENT_EXPRESSION = "assignment_expression"
    BINARY_EXPRESSION = "binary_expression"
    UNARY_EXPRESSION = "unary_expression"
    LOGICAL_EXPRESSION = "logical_expression"
    IDENTIFIER = "identifier"
    NUMERIC_LITERAL = "numeric_literal"
    STRING_LITERAL = "string_literal"
    NULL_LITERAL = "null_literal"
    PROPERTY = "property"
    OBJECT_LITERAL = "object_literal"
    ARRAY_LITERAL = "array_literal"
    CALL_EXPRESSION = "call_expression"
    MEMBER_EXPRESSION = "member_expression"


def _to_plain(value: Any) -> Any:
    if isinstance(value, Statement):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    return value


@dataclass
class Statement:
    """
    Base class of every Curly AST node.

    Attributes:
        kind (NodeType): Class-level tag identifying the node variant.

    Methods:
        to_dict(): Converts the node (and all descendants) into nested dictionaries.
        render(): Renders the node back to Curly source text.
    """

    kind: ClassVar[NodeType]

    def to_dict(self) -> ASTDict:
        out: ASTDict = {"kind": self.kind.value}
        for f in fields(self):
            out[f.name] = _to_plain(getattr(self, f.name))
        return out

    def render(self) -> str:
        # Imported late: the renderer depends on this module.
        from curly.curly_render import render

        return render(self)


@dataclass
class Expression(Statement):
    """Any node that may appear where a value is expected."""


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass
class NullLiteral(Expression):
    """The `null` value, also used as a placeholder for omitted parts."""

    kind: ClassVar[NodeType] = NodeType.NULL_LITERAL


@dataclass
class Identifier(Expression):
    kind: ClassVar[NodeType] = NodeType.IDENTIFIER

    symbol: str


@dataclass
class NumericLiteral(Expression):
    kind: ClassVar[NodeType] = NodeType.NUMERIC_LITERAL

    value: float


@dataclass
class StringLiteral(Expression):
    kind: ClassVar[NodeType] = NodeType.STRING_LITERAL

    value: str


@dataclass
class AssignmentExpression(Expression):
    kind: ClassVar[NodeType] = NodeType.ASSIGNMENT_EXPRESSION

    assignee: Expression
    value: Expression


@dataclass
class BinaryExpression(Expression):
    kind: ClassVar[NodeType] = NodeType.BINARY_EXPRESSION

    left: Expression
    right: Expression
    operator: str


@dataclass
class UnaryExpression(Expression):
    kind: ClassVar[NodeType] = NodeType.UNARY_EXPRESSION

    operand: Expression
    operator: str


@dataclass
class LogicalExpression(Expression):
    """`and` / `or` / `xor`, or prefix `not` with a NullLiteral on the left."""

    kind: ClassVar[NodeType] = NodeType.LOGICAL_EXPRESSION

    left: Expression
    right: Expression
    operator: str


@dataclass
class Property(Expression):
    """A `key: value` entry of an object literal. Shorthand `{key}` holds a NullLiteral."""

    kind: ClassVar[NodeType] = NodeType.PROPERTY

    key: str
    value: Expression = field(default_factory=NullLiteral)


@dataclass
class ObjectLiteral(Expression):
    kind: ClassVar[NodeType] = NodeType.OBJECT_LITERAL

    properties: list[Property] = field(default_factory=list)


@dataclass
class ArrayLiteral(Expression):
    kind: ClassVar[NodeType] = NodeType.ARRAY_LITERAL

    elements: list[Expression] = field(default_factory=list)


@dataclass
class CallExpression(Expression):
    kind: ClassVar[NodeType] = NodeType.CALL_EXPRESSION

    callee: Expression
    arguments: list[Expression] = field(default_factory=list)


@dataclass
class MemberExpression(Expression):
    """`object.property` (computed=False) or `object[property]` (computed=True)."""

    kind: ClassVar[NodeType] = NodeType.MEMBER_EXPRESSION

    object: Expression
    property: Expression
    computed: bool = False


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass
class Program(Statement):
    kind: ClassVar[NodeType] = NodeType.PROGRAM

    body: list[Statement] = field(default_factory=list)


@dataclass
class VariableDeclaration(Statement):
    kind: ClassVar[NodeType] = NodeType.VARIABLE_DECLARATION

    constant: bool
    identifier: str
    value: Expression = field(default_factory=NullLiteral)


@dataclass
class FunctionDeclaration(Statement):
    kind: ClassVar[NodeType] = NodeType.FUNCTION_DECLARATION

    parameters: list[str]
    name: str | None
    body: list[Statement] = field(default_factory=list)
    anonymous: bool = False


@dataclass
class ReturnStatement(Statement):
    kind: ClassVar[NodeType] = NodeType.RETURN_STATEMENT

    value: Expression = field(default_factory=NullLiteral)


@dataclass
class BreakStatement(Statement):
    kind: ClassVar[NodeType] = NodeType.BREAK_STATEMENT


@dataclass
class ImportStatement(Statement):
    kind: ClassVar[NodeType] = NodeType.IMPORT_STATEMENT

    path: str


@dataclass
class ClassDeclaration(Statement):
    kind: ClassVar[NodeType] = NodeType.CLASS_DECLARATION

    name: str
    body: list[Statement] = field(default_factory=list)


@dataclass
class Comment(Statement):
    """Block comment text. The parser skips comments; only hand-built trees hold these."""

    kind: ClassVar[NodeType] = NodeType.COMMENT

    text: str


@dataclass
class ConditionalStatement(Statement):
    kind: ClassVar[NodeType] = NodeType.CONDITIONAL_STATEMENT

    condition: Expression
    body: list[Statement] = field(default_factory=list)
    alternate: list[Statement] = field(default_factory=list)


@dataclass
class WhileStatement(Statement):
    kind: ClassVar[NodeType] = NodeType.WHILE_STATEMENT

    condition: Expression
    body: list[Statement] = field(default_factory=list)


@dataclass
class LoopStatement(Statement):
    kind: ClassVar[NodeType] = NodeType.LOOP_STATEMENT

    body: list[Statement] = field(default_factory=list)


@dataclass
class ForEachStatement(Statement):
    kind: ClassVar[NodeType] = NodeType.FOR_EACH_STATEMENT

    variable: str
    collection: Expression
    body: list[Statement] = field(default_factory=list)


@dataclass
class ForStatement(Statement):
    kind: ClassVar[NodeType] = NodeType.FOR_STATEMENT

    init: Statement
    condition: Expression
    update: Expression
    body: list[Statement] = field(default_factory=list)


@dataclass
class ExpressionStatement(Statement):
    kind: ClassVar[NodeType] = NodeType.EXPRESSION_STATEMENT

    expression: Expression


__all__ = [
    "ASTDict",
    "ArrayLiteral",
    "AssignmentExpression",
    "BinaryExpression",
    "BreakStatement",
    "CallExpression",
    "ClassDeclaration",
    "Comment",
    "ConditionalStatement",
    "Expression",
    "ExpressionStatement",
    "ForEachStatement",
    "ForStatement",
    "FunctionDeclaration",
    "Identifier",
    "ImportStatement",
    "LogicalExpression",
    "LoopStatement",
    "MemberExpression",
    "NodeType",
    "NullLiteral",
    "NumericLiteral",
    "ObjectLiteral",
    "Program",
    "Property",
    "ReturnStatement",
    "Statement",
    "StringLiteral",
    "UnaryExpression",
    "VariableDeclaration",
    "WhileStatement",
]
