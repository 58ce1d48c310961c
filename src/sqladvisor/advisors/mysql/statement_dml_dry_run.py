"""MySQL-family advisor that dry-runs INSERT, UPDATE and DELETE statements with ``EXPLAIN``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqladvisor.advisors.base import BaseAdvisor, DMLDryRunChecker, StatementChecker
from sqladvisor.ast.mysql import MySQLKind
from sqladvisor.dialect import Family

if TYPE_CHECKING:
    from sqladvisor.context import Context

_DML_KINDS = frozenset({MySQLKind.INSERT, MySQLKind.UPDATE, MySQLKind.DELETE})


class StatementDMLDryRunAdvisor(BaseAdvisor):
    """Report DML statements MySQL, TiDB, MariaDB or OceanBase rejects when explained.

    Without a live executor nothing is probed and the rule reports OK. Every kind other than INSERT, UPDATE and
    DELETE is ignored.
    """

    family = Family.MYSQL

    def should_walk(self, ctx: Context) -> bool:
        return ctx.executor is not None

    def new_checker(self, ctx: Context) -> StatementChecker:
        return DMLDryRunChecker(ctx, _DML_KINDS)
