"""Traversal protocol shared by every dialect's statement tree.

A dialect tree is a set of frozen :class:`Node` dataclasses. Each concrete node type carries a closed ``kind`` tag
(an enum member of its dialect) and names the fields that hold child nodes, in source order. Advisors inspect trees
through a :class:`Visitor`, so the traversal driver never needs to know any concrete node type.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import TYPE_CHECKING, ClassVar, Protocol

if TYPE_CHECKING:
    from collections.abc import Generator


class Visitor(Protocol):
    """Capability required by :meth:`Node.accept`.

    ``enter`` is called before a node's children are visited. Returning ``False`` vetoes descent into the children;
    ``leave`` is still called for the node itself.
    """

    def enter(self, node: Node) -> bool: ...

    def leave(self, node: Node) -> None: ...


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class Node:
    """Base class for all statement and clause nodes.

    Attributes:
        text: Source text of the construct. Always set for statements, optional for clauses.
        line: 1-based line where the construct starts, ``0`` when unknown.
    """

    kind: ClassVar[enum.Enum]
    child_fields: ClassVar[tuple[str, ...]] = ()

    text: str = ""
    line: int = 0

    def children(self) -> Generator[tuple[str, Node], None, None]:
        """Yield ``(field_name, child)`` for every child node, in source order."""
        for name in self.child_fields:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, Node):
                yield name, value
            else:
                for item in value:
                    yield name, item

    def accept(self, visitor: Visitor) -> None:
        """Run *visitor* over this node and its descendants, depth-first in source order."""
        if visitor.enter(self):
            for _field_name, child in self.children():
                child.accept(visitor)
        visitor.leave(self)


class NodeVisitor:
    """Convenience base for visitors: descends everywhere and ignores ``leave``.

    Subclass and override :meth:`enter` to inspect nodes::

        class ColumnCounter(NodeVisitor):
            def __init__(self):
                self.count = 0

            def enter(self, node):
                if node.kind is PgKind.COLUMN_DEF:
                    self.count += 1
                return True
    """

    def enter(self, node: Node) -> bool:  # noqa: ARG002
        return True

    def leave(self, node: Node) -> None:
        pass


def walk(node: Node) -> Generator[tuple[str, Node], None, None]:
    """Depth-first pre-order traversal of a statement tree.

    Yields ``(field_name, node)`` tuples. *field_name* is the attribute that led to the node (e.g. ``"columns"``), or an
    empty string for the root.

    Example:
        >>> from sqladvisor.ast.pg import ColumnDef, CreateTableStmt
        >>> stmt = CreateTableStmt(table="t", columns=(ColumnDef(name="id", type_name="int"),), text="CREATE TABLE t (id int)")
        >>> [(name, type(n).__name__) for name, n in walk(stmt)]
        [('', 'CreateTableStmt'), ('columns', 'ColumnDef')]
    """
    yield "", node
    stack: list[tuple[str, Node]] = list(reversed(list(node.children())))
    while stack:
        field_name, child = stack.pop()
        yield field_name, child
        stack.extend(reversed(list(child.children())))
