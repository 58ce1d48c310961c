"""Statement trees and the traversal protocol advisors are written against."""

from sqladvisor.ast.base import Node, NodeVisitor, Visitor, walk

__all__ = [
    "Node",
    "NodeVisitor",
    "Visitor",
    "walk",
]
