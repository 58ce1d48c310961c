"""Postgres advisor that only allows collations from a configured list."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqladvisor.advice import Code
from sqladvisor.advisors.base import BaseAdvisor, StatementChecker
from sqladvisor.ast.pg import PgKind
from sqladvisor.dialect import Family
from sqladvisor.rule import RuleType, StringArrayPayload

if TYPE_CHECKING:
    from sqladvisor.ast.base import Node
    from sqladvisor.ast.pg import Collation
    from sqladvisor.context import Context


class CollationAllowlistAdvisor(BaseAdvisor):
    """Report columns whose ``COLLATE`` is not in the allowlist.

    Inspects ``CREATE TABLE`` columns and ``ALTER TABLE`` add-column and alter-column-type items. At most one
    finding is reported per statement, for the first offending collation. Every other kind is ignored.
    """

    family = Family.POSTGRES

    def parse_payload(self, raw: str | bytes | None) -> StringArrayPayload:
        return StringArrayPayload.from_payload(raw, rule_type=RuleType.COLLATION_ALLOWLIST)

    def new_checker(self, ctx: Context) -> StatementChecker:
        return _CollationAllowlistChecker(ctx)


class _CollationAllowlistChecker(StatementChecker):
    def __init__(self, ctx: Context) -> None:
        super().__init__(ctx)
        payload: StringArrayPayload = ctx.payload  # type: ignore[assignment]
        self.allowlist = frozenset(payload.list)

    def _disabled(self, collation: Collation | None) -> bool:
        return collation is not None and collation.name not in self.allowlist

    def enter(self, node: Node) -> bool:
        found: Collation | None = None
        line = 0
        if node.kind is PgKind.CREATE_TABLE:
            for column in node.columns:  # type: ignore[attr-defined]
                if self._disabled(column.collation):
                    found, line = column.collation, column.line
                    break
        elif node.kind is PgKind.ALTER_TABLE:
            for item in node.items:  # type: ignore[attr-defined]
                if item.kind is PgKind.ADD_COLUMN_LIST:
                    for column in item.columns:
                        if self._disabled(column.collation):
                            found, line = column.collation, column.line
                            break
                elif item.kind is PgKind.ALTER_COLUMN_TYPE and self._disabled(item.collation):
                    found, line = item.collation, item.line
                if found is not None:
                    break
        else:
            return True

        if found is not None:
            self.add(
                Code.DISABLED_COLLATION,
                f'Use disabled collation "{found.name}", related statement "{self.text}"',
                line or self.line,
            )
        return False
