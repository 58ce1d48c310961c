"""MySQL-family advisor that only allows collations from a configured list."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqladvisor.advice import Code
from sqladvisor.advisors.base import BaseAdvisor, StatementChecker
from sqladvisor.ast.mysql import MySQLKind
from sqladvisor.dialect import Family
from sqladvisor.rule import RuleType, StringArrayPayload

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqladvisor.ast.base import Node
    from sqladvisor.ast.mysql import ColumnDef, TableOption
    from sqladvisor.context import Context

_COLLATE_OPTION = "COLLATE"


class CollationAllowlistAdvisor(BaseAdvisor):
    """Report collations that are not in the allowlist.

    Inspects ``CREATE TABLE`` columns and ``COLLATE`` table options, and the add-columns, modify-column,
    change-column and table-options specs of ``ALTER TABLE``. At most one finding is reported per statement, for the
    first offending collation in source order. Drop-column specs and every other statement kind are ignored.
    """

    family = Family.MYSQL

    def parse_payload(self, raw: str | bytes | None) -> StringArrayPayload:
        return StringArrayPayload.from_payload(raw, rule_type=RuleType.COLLATION_ALLOWLIST)

    def new_checker(self, ctx: Context) -> StatementChecker:
        return _CollationAllowlistChecker(ctx)


class _CollationAllowlistChecker(StatementChecker):
    def __init__(self, ctx: Context) -> None:
        super().__init__(ctx)
        payload: StringArrayPayload = ctx.payload  # type: ignore[assignment]
        self.allowlist = frozenset(payload.list)

    def _check_columns(self, columns: Iterable[ColumnDef]) -> tuple[str, int] | None:
        for column in columns:
            if column.collation is not None and column.collation.name not in self.allowlist:
                return column.collation.name, column.line
        return None

    def _check_options(self, options: Iterable[TableOption]) -> tuple[str, int] | None:
        for option in options:
            if option.name == _COLLATE_OPTION and option.value not in self.allowlist:
                return option.value, option.line
        return None

    def enter(self, node: Node) -> bool:
        found: tuple[str, int] | None = None
        if node.kind is MySQLKind.CREATE_TABLE:
            found = self._check_columns(node.columns) or self._check_options(node.options)  # type: ignore[attr-defined]
        elif node.kind is MySQLKind.ALTER_TABLE:
            for spec in node.specs:  # type: ignore[attr-defined]
                if spec.kind is MySQLKind.ADD_COLUMNS:
                    found = self._check_columns(spec.columns)
                elif spec.kind in (MySQLKind.MODIFY_COLUMN, MySQLKind.CHANGE_COLUMN):
                    found = self._check_columns((spec.column,))
                elif spec.kind is MySQLKind.TABLE_OPTIONS:
                    found = self._check_options(spec.options)
                if found is not None:
                    break
        else:
            return True

        if found is not None:
            collation, line = found
            self.add(
                Code.DISABLED_COLLATION,
                f'Use disabled collation "{collation}", related statement "{self.text}"',
                line or self.line,
            )
        return False
