"""Statement tree for the MySQL family (MySQL, TiDB, MariaDB, OceanBase).

``ALTER TABLE`` carries a list of specs, one node type per action, mirroring how MySQL-compatible parsers split an
alter statement. Statements the tree does not model in detail are :class:`OtherStmt`.
"""

# ruff: noqa: D101

from __future__ import annotations

import dataclasses
import enum

from sqladvisor.ast.base import Node


class MySQLKind(enum.Enum):
    CREATE_TABLE = "create_table"
    ALTER_TABLE = "alter_table"
    ADD_COLUMNS = "add_columns"
    MODIFY_COLUMN = "modify_column"
    CHANGE_COLUMN = "change_column"
    DROP_COLUMN = "drop_column"
    TABLE_OPTIONS = "table_options"
    TABLE_OPTION = "table_option"
    COLUMN_DEF = "column_def"
    COLLATION = "collation"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    SELECT = "select"
    WHERE = "where"
    OTHER = "other"


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class MySQLNode(Node):
    """Base class for MySQL-family nodes; advisors use it to verify the tree family."""


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class Collation(MySQLNode):
    kind = MySQLKind.COLLATION

    name: str


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ColumnDef(MySQLNode):
    kind = MySQLKind.COLUMN_DEF
    child_fields = ("collation",)

    name: str
    type_name: str = ""
    collation: Collation | None = None


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class TableOption(MySQLNode):
    """``name = value`` table option such as ``COLLATE = utf8mb4_bin`` or ``ENGINE = InnoDB``.

    *name* is upper-case (``"COLLATE"``, ``"CHARSET"``, ``"ENGINE"``).
    """

    kind = MySQLKind.TABLE_OPTION

    name: str
    value: str


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class CreateTableStmt(MySQLNode):
    kind = MySQLKind.CREATE_TABLE
    child_fields = ("columns", "options")

    table: str
    columns: tuple[ColumnDef, ...] = ()
    options: tuple[TableOption, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class AddColumnsSpec(MySQLNode):
    kind = MySQLKind.ADD_COLUMNS
    child_fields = ("columns",)

    columns: tuple[ColumnDef, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ModifyColumnSpec(MySQLNode):
    kind = MySQLKind.MODIFY_COLUMN
    child_fields = ("column",)

    column: ColumnDef


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ChangeColumnSpec(MySQLNode):
    kind = MySQLKind.CHANGE_COLUMN
    child_fields = ("column",)

    old_name: str
    column: ColumnDef


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class DropColumnSpec(MySQLNode):
    kind = MySQLKind.DROP_COLUMN

    name: str


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class TableOptionsSpec(MySQLNode):
    kind = MySQLKind.TABLE_OPTIONS
    child_fields = ("options",)

    options: tuple[TableOption, ...] = ()


AlterTableSpec = AddColumnsSpec | ModifyColumnSpec | ChangeColumnSpec | DropColumnSpec | TableOptionsSpec


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class AlterTableStmt(MySQLNode):
    kind = MySQLKind.ALTER_TABLE
    child_fields = ("specs",)

    table: str
    specs: tuple[AlterTableSpec, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class WhereClause(MySQLNode):
    kind = MySQLKind.WHERE


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class InsertStmt(MySQLNode):
    kind = MySQLKind.INSERT

    table: str


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class UpdateStmt(MySQLNode):
    kind = MySQLKind.UPDATE
    child_fields = ("where",)

    table: str
    where: WhereClause | None = None


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class DeleteStmt(MySQLNode):
    kind = MySQLKind.DELETE
    child_fields = ("where",)

    table: str
    where: WhereClause | None = None


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SelectStmt(MySQLNode):
    kind = MySQLKind.SELECT


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class OtherStmt(MySQLNode):
    kind = MySQLKind.OTHER

    tag: str = ""
