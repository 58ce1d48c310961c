"""Postgres advisor requiring a WHERE clause on UPDATE and DELETE."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqladvisor.advice import Code
from sqladvisor.advisors.base import BaseAdvisor, StatementChecker
from sqladvisor.ast.pg import PgKind
from sqladvisor.dialect import Family

if TYPE_CHECKING:
    from sqladvisor.ast.base import Node
    from sqladvisor.context import Context


class StatementRequireWhereAdvisor(BaseAdvisor):
    """Report UPDATE and DELETE statements without a WHERE clause; all other kinds are ignored."""

    family = Family.POSTGRES

    def new_checker(self, ctx: Context) -> StatementChecker:
        return _RequireWhereChecker(ctx)


class _RequireWhereChecker(StatementChecker):
    def enter(self, node: Node) -> bool:
        if node.kind in (PgKind.UPDATE, PgKind.DELETE) and node.where is None:  # type: ignore[attr-defined]
            self.add(Code.STATEMENT_NO_WHERE, f'"{self.text}" requires WHERE clause', self.line)
        return False
