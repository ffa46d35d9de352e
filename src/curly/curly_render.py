"""
Provides the `Renderer` class and the `render()` helper for turning Curly ASTs into text.

Classes and Features:
    - Emitter (Protocol): Interface for all render targets. Requires `__init__`,
      `_visit`, `emit_expr` and `get_output`.
    - SourceEmitter: Concrete emitter producing Curly source that re-parses to an equal tree.
    - Renderer: Picks the emitter for the selected target and feeds it nodes.

Usage:
    >>> render(produce_ast("let x = 1 + 2;"))
    'let x = 1 + 2;'

Raises:
    ValueError: If the target is not supported.
    TypeError: If something other than an AST node is passed in.
    NotImplementedError: If the emitter lacks an `emit_*` method for a node kind.
"""

from typing import Protocol

from curly.curly_ast import Expression, Statement
from curly.emitters.source_emitter import SourceEmitter


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all Curly render targets."""

    def __init__(self) -> None: ...  # pragma: no cover

    def _visit(self, node: Statement) -> None: ...  # pragma: no cover

    def emit_expr(self, node: Expression) -> str: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


EmitterType = type[Emitter]
"""Alias for a concrete Emitter class type."""


class Renderer:
    """Dispatches Curly AST nodes to the emitter of a render target.

    Attributes:
        emitter (Emitter): The selected emitter instance.
    """

    def __init__(self, target: str = "source") -> None:
        emitters: dict[str, EmitterType] = {
            "source": SourceEmitter,
            "curly": SourceEmitter,
        }
        target = target.lower()
        if target not in emitters:
            raise ValueError(f"Unknown render target: {target!r}")
        self.emitter: Emitter = emitters[target]()

    def render(self, node: Statement) -> str:
        """Renders one node.

        Expressions render inline (no trailing `;`); statements and programs
        render as indented lines.

        Raises:
            TypeError: If `node` is not a Curly AST node.
        """
        if not isinstance(node, Statement):
            raise TypeError(f"Expected a Curly AST node, got {type(node).__name__}")
        if isinstance(node, Expression):
            return self.emitter.emit_expr(node)
        self.emitter._visit(node)
        return self.emitter.get_output()


def render(node: Statement, target: str = "source") -> str:
    return Renderer(target).render(node)


__all__ = ["Emitter", "Renderer", "render"]
