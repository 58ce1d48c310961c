"""Built-in advisors and their registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqladvisor.advisors import mysql, pg
from sqladvisor.advisors.base import Advisor, BaseAdvisor, StatementChecker
from sqladvisor.advisors.mysql.collation_allowlist import CollationAllowlistAdvisor as MySQLCollationAllowlistAdvisor
from sqladvisor.advisors.mysql.statement_dml_dry_run import StatementDMLDryRunAdvisor as MySQLStatementDMLDryRunAdvisor
from sqladvisor.advisors.mysql.statement_where_require import (
    StatementRequireWhereAdvisor as MySQLStatementRequireWhereAdvisor,
)
from sqladvisor.advisors.pg.collation_allowlist import CollationAllowlistAdvisor as PgCollationAllowlistAdvisor
from sqladvisor.advisors.pg.statement_dml_dry_run import StatementDMLDryRunAdvisor as PgStatementDMLDryRunAdvisor
from sqladvisor.advisors.pg.statement_where_require import (
    StatementRequireWhereAdvisor as PgStatementRequireWhereAdvisor,
)
from sqladvisor.dialect import MYSQL_FAMILY, Dialect
from sqladvisor.rule import RuleType

if TYPE_CHECKING:
    from sqladvisor.registry import Registry

_MYSQL_ADVISORS: dict[RuleType, type[BaseAdvisor]] = {
    RuleType.COLLATION_ALLOWLIST: MySQLCollationAllowlistAdvisor,
    RuleType.STATEMENT_DML_DRY_RUN: MySQLStatementDMLDryRunAdvisor,
    RuleType.STATEMENT_REQUIRE_WHERE: MySQLStatementRequireWhereAdvisor,
}

_PG_ADVISORS: dict[RuleType, type[BaseAdvisor]] = {
    RuleType.COLLATION_ALLOWLIST: PgCollationAllowlistAdvisor,
    RuleType.STATEMENT_DML_DRY_RUN: PgStatementDMLDryRunAdvisor,
    RuleType.STATEMENT_REQUIRE_WHERE: PgStatementRequireWhereAdvisor,
}


def register_builtin(registry: Registry) -> None:
    """Register every built-in advisor on *registry*.

    MySQL-family advisors are registered for MySQL, TiDB, MariaDB and OceanBase; Postgres advisors for Postgres.
    """
    for dialect in MYSQL_FAMILY:
        for rule_type, advisor_type in _MYSQL_ADVISORS.items():
            registry.register(dialect, rule_type, advisor_type())
    for rule_type, advisor_type in _PG_ADVISORS.items():
        registry.register(Dialect.POSTGRES, rule_type, advisor_type())


__all__ = [
    "Advisor",
    "BaseAdvisor",
    "MySQLCollationAllowlistAdvisor",
    "MySQLStatementDMLDryRunAdvisor",
    "MySQLStatementRequireWhereAdvisor",
    "mysql",
    "pg",
    "PgCollationAllowlistAdvisor",
    "PgStatementDMLDryRunAdvisor",
    "PgStatementRequireWhereAdvisor",
    "register_builtin",
    "StatementChecker",
]
