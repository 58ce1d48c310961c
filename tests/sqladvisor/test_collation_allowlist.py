from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from sqladvisor import (
    Advice,
    ASTTypeError,
    Code,
    Dialect,
    PayloadError,
    Rule,
    RuleLevel,
    RuleType,
    Status,
)
from sqladvisor.advice import MAX_STATEMENT_LENGTH
from sqladvisor.ast import mysql, pg

from .conftest import assert_single_ok, codes

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqladvisor import Reviewer
    from sqladvisor.ast import Node

TITLE = "system.collation.allowlist"


def _rule(payload: str | bytes | None = '{"list": ["C", "POSIX"]}', level: RuleLevel = RuleLevel.ERROR) -> Rule:
    return Rule(type=RuleType.COLLATION_ALLOWLIST, level=level, payload=payload)


def _pg_column(name: str, line: int, collation: str | None = None, collation_line: int | None = None) -> pg.ColumnDef:
    coll = pg.Collation(name=collation, line=collation_line or line) if collation is not None else None
    return pg.ColumnDef(name=name, type_name="text", collation=coll, line=line)


def _mysql_column(name: str, line: int, collation: str | None = None) -> mysql.ColumnDef:
    coll = mysql.Collation(name=collation, line=line) if collation is not None else None
    return mysql.ColumnDef(name=name, type_name="varchar(10)", collation=coll, line=line)


class TestPostgresCreateTable:
    @staticmethod
    def _review(reviewer: Reviewer, statements: Sequence[Node], rule: Rule | None = None) -> list[Advice]:
        return reviewer.review(Dialect.POSTGRES, statements, rule or _rule())

    def test_disabled_collation(self, reviewer: Reviewer):
        text = 'CREATE TABLE t (\n  id int,\n  name text COLLATE "en_US"\n)'
        stmt = pg.CreateTableStmt(
            table="t",
            columns=(_pg_column("id", 2), _pg_column("name", 3, "en_US")),
            text=text,
            line=1,
        )
        assert self._review(reviewer, [stmt]) == [
            Advice(
                status=Status.ERROR,
                code=Code.DISABLED_COLLATION,
                title=TITLE,
                content=f'Use disabled collation "en_US", related statement "{text}"',
                line=3,
            )
        ]

    def test_allowed_collations(self, reviewer: Reviewer):
        stmt = pg.CreateTableStmt(
            table="t",
            columns=(_pg_column("a", 1, "C"), _pg_column("b", 1, "POSIX"), _pg_column("c", 1)),
            text="CREATE TABLE t (...)",
            line=1,
        )
        assert_single_ok(self._review(reviewer, [stmt]))

    def test_first_offender_per_statement(self, reviewer: Reviewer):
        stmt = pg.CreateTableStmt(
            table="t",
            columns=(_pg_column("a", 2, "de_DE"), _pg_column("b", 3, "fr_FR")),
            text="CREATE TABLE t (...)",
            line=1,
        )
        (advice,) = self._review(reviewer, [stmt])
        assert '"de_DE"' in advice.content
        assert advice.line == 2

    def test_one_finding_per_offending_statement_in_order(self, reviewer: Reviewer):
        statements = [
            pg.CreateTableStmt(table="a", columns=(_pg_column("x", 1, "sv_SE"),), text="CREATE TABLE a", line=1),
            pg.CreateTableStmt(table="b", columns=(_pg_column("x", 2, "C"),), text="CREATE TABLE b", line=2),
            pg.CreateTableStmt(table="c", columns=(_pg_column("x", 3, "da_DK"),), text="CREATE TABLE c", line=3),
        ]
        advice = self._review(reviewer, statements)
        assert [item.line for item in advice] == [1, 3]
        assert codes(advice) == ["DisabledCollation", "DisabledCollation"]

    def test_empty_allowlist_rejects_every_collation(self, reviewer: Reviewer):
        stmt = pg.CreateTableStmt(table="t", columns=(_pg_column("a", 1, "C"),), text="CREATE TABLE t", line=1)
        assert codes(self._review(reviewer, [stmt], _rule("{}"))) == ["DisabledCollation"]

    def test_long_statement_truncated_in_content(self, reviewer: Reviewer):
        text = "CREATE TABLE t (" + "x" * MAX_STATEMENT_LENGTH + ")"
        stmt = pg.CreateTableStmt(table="t", columns=(_pg_column("a", 1, "en_US"),), text=text, line=1)
        (advice,) = self._review(reviewer, [stmt])
        assert advice.content.endswith('..."')
        assert text not in advice.content

    @pytest.mark.parametrize(
        ("level", "status"),
        [(RuleLevel.ERROR, Status.ERROR), (RuleLevel.WARNING, Status.WARNING), (RuleLevel.INFO, Status.SUCCESS)],
    )
    def test_status_follows_level(self, reviewer: Reviewer, level: RuleLevel, status: Status):
        stmt = pg.CreateTableStmt(table="t", columns=(_pg_column("a", 1, "en_US"),), text="CREATE TABLE t", line=1)
        (advice,) = self._review(reviewer, [stmt], _rule(level=level))
        assert advice.status is status
        assert advice.code is Code.DISABLED_COLLATION


class TestPostgresAlterTable:
    def test_add_column(self, reviewer: Reviewer):
        stmt = pg.AlterTableStmt(
            table="t",
            items=(pg.AddColumnListStmt(table="t", columns=(_pg_column("c", 2, "en_US"),), line=2),),
            text='ALTER TABLE t\n  ADD COLUMN c text COLLATE "en_US"',
            line=1,
        )
        (advice,) = reviewer.review(Dialect.POSTGRES, [stmt], _rule())
        assert advice.code is Code.DISABLED_COLLATION
        assert advice.line == 2

    def test_alter_column_type(self, reviewer: Reviewer):
        stmt = pg.AlterTableStmt(
            table="t",
            items=(
                pg.DropColumnStmt(table="t", column="old", line=1),
                pg.AlterColumnTypeStmt(
                    table="t",
                    column="c",
                    type_name="text",
                    collation=pg.Collation(name="und-x-icu", line=3),
                    line=3,
                ),
            ),
            text="ALTER TABLE t ...",
            line=1,
        )
        (advice,) = reviewer.review(Dialect.POSTGRES, [stmt], _rule())
        assert '"und-x-icu"' in advice.content
        assert advice.line == 3

    def test_drop_column_and_plain_type_change_ignored(self, reviewer: Reviewer):
        stmt = pg.AlterTableStmt(
            table="t",
            items=(
                pg.DropColumnStmt(table="t", column="old", line=1),
                pg.AlterColumnTypeStmt(table="t", column="c", type_name="bigint", line=1),
            ),
            text="ALTER TABLE t ...",
            line=1,
        )
        assert_single_ok(reviewer.review(Dialect.POSTGRES, [stmt], _rule()))

    def test_other_statements_ignored(self, reviewer: Reviewer):
        statements = [
            pg.UpdateStmt(table="t", text="UPDATE t SET a = 1", line=1),
            pg.OtherStmt(tag="CreateIndexStmt", text="CREATE INDEX i ON t (a)", line=2),
        ]
        assert_single_ok(reviewer.review(Dialect.POSTGRES, statements, _rule()))


class TestMySQL:
    def test_unicode_collation_not_allowed(self, reviewer: Reviewer):
        text = "CREATE TABLE t (c VARCHAR(10) COLLATE utf8mb4_unicode_ci)"
        stmt = mysql.CreateTableStmt(
            table="t", columns=(_mysql_column("c", 1, "utf8mb4_unicode_ci"),), text=text, line=1
        )
        rule = _rule('{"list": ["utf8mb4_general_ci"]}')
        (advice,) = reviewer.review(Dialect.MYSQL, [stmt], rule)
        assert advice.code is Code.DISABLED_COLLATION
        assert "utf8mb4_unicode_ci" in advice.content
        assert advice.content == f'Use disabled collation "utf8mb4_unicode_ci", related statement "{text}"'

    def test_table_option(self, reviewer: Reviewer):
        stmt = mysql.CreateTableStmt(
            table="t",
            columns=(_mysql_column("c", 2, "C"),),
            options=(mysql.TableOption(name="COLLATE", value="latin1_swedish_ci", line=3),),
            text="CREATE TABLE t (...) COLLATE latin1_swedish_ci",
            line=1,
        )
        (advice,) = reviewer.review(Dialect.MARIADB, [stmt], _rule())
        assert '"latin1_swedish_ci"' in advice.content
        assert advice.line == 3

    def test_column_reported_before_table_option(self, reviewer: Reviewer):
        stmt = mysql.CreateTableStmt(
            table="t",
            columns=(_mysql_column("c", 2, "utf8mb4_bin"),),
            options=(mysql.TableOption(name="COLLATE", value="latin1_swedish_ci", line=3),),
            text="CREATE TABLE t (...)",
            line=1,
        )
        (advice,) = reviewer.review(Dialect.MYSQL, [stmt], _rule())
        assert '"utf8mb4_bin"' in advice.content
        assert advice.line == 2

    def test_other_table_options_ignored(self, reviewer: Reviewer):
        stmt = mysql.CreateTableStmt(
            table="t",
            options=(mysql.TableOption(name="ENGINE", value="InnoDB", line=1),),
            text="CREATE TABLE t (a int) ENGINE = InnoDB",
            line=1,
        )
        assert_single_ok(reviewer.review(Dialect.MYSQL, [stmt], _rule()))

    @pytest.mark.parametrize(
        "spec",
        [
            mysql.AddColumnsSpec(columns=(_mysql_column("c", 4, "utf8_bin"),), line=4),
            mysql.ModifyColumnSpec(column=_mysql_column("c", 4, "utf8_bin"), line=4),
            mysql.ChangeColumnSpec(old_name="b", column=_mysql_column("c", 4, "utf8_bin"), line=4),
            mysql.TableOptionsSpec(options=(mysql.TableOption(name="COLLATE", value="utf8_bin", line=4),), line=4),
        ],
        ids=["add", "modify", "change", "options"],
    )
    def test_alter_specs(self, reviewer: Reviewer, spec: mysql.MySQLNode):
        stmt = mysql.AlterTableStmt(
            table="t",
            specs=(mysql.DropColumnSpec(name="x", line=2), spec),
            text="ALTER TABLE t ...",
            line=1,
        )
        (advice,) = reviewer.review(Dialect.TIDB, [stmt], _rule())
        assert '"utf8_bin"' in advice.content
        assert advice.line == 4

    def test_drop_column_ignored(self, reviewer: Reviewer):
        stmt = mysql.AlterTableStmt(
            table="t", specs=(mysql.DropColumnSpec(name="x", line=1),), text="ALTER TABLE t DROP x", line=1
        )
        assert_single_ok(reviewer.review(Dialect.OCEANBASE, [stmt], _rule()))


class TestValidation:
    @pytest.mark.parametrize("payload", [None, "", "not json", '["C"]', '{"list": "C"}', '{"list": [1]}'])
    def test_bad_payload(self, reviewer: Reviewer, payload: str | None):
        with pytest.raises(PayloadError) as exc_info:
            reviewer.review(Dialect.POSTGRES, [], _rule(payload))
        assert exc_info.value.rule_type is RuleType.COLLATION_ALLOWLIST

    def test_bytes_payload(self, reviewer: Reviewer):
        assert_single_ok(reviewer.review(Dialect.POSTGRES, [], _rule(b'{"list": ["C"]}')))

    def test_wrong_family(self, reviewer: Reviewer):
        stmt = mysql.CreateTableStmt(table="t", text="CREATE TABLE t (a int)", line=1)
        with pytest.raises(ASTTypeError) as exc_info:
            reviewer.review(Dialect.POSTGRES, [stmt], _rule())
        assert exc_info.value.expected == "PgNode"
        assert exc_info.value.actual == "CreateTableStmt"
