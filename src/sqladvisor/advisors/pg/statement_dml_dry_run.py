"""Postgres advisor that dry-runs INSERT, UPDATE and DELETE statements with ``EXPLAIN``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqladvisor.advisors.base import BaseAdvisor, DMLDryRunChecker, StatementChecker
from sqladvisor.ast.pg import PgKind
from sqladvisor.dialect import Family

if TYPE_CHECKING:
    from sqladvisor.context import Context

_DML_KINDS = frozenset({PgKind.INSERT, PgKind.UPDATE, PgKind.DELETE})


class StatementDMLDryRunAdvisor(BaseAdvisor):
    """Report DML statements the target database rejects when explained.

    Without a live executor nothing is probed and the rule reports OK: dry runs are opt-in and need an environment
    that can validate against a real database. Every kind other than INSERT, UPDATE and DELETE is ignored.
    """

    family = Family.POSTGRES

    def should_walk(self, ctx: Context) -> bool:
        return ctx.executor is not None

    def new_checker(self, ctx: Context) -> StatementChecker:
        return DMLDryRunChecker(ctx, _DML_KINDS)
