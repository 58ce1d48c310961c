"""Statement tree for the Postgres family.

The node set is closed: :class:`PgKind` lists every kind an advisor can switch on. Statements the tree does not model
in detail are represented by :class:`OtherStmt` and carry only their text and line.
"""

# ruff: noqa: D101

from __future__ import annotations

import dataclasses
import enum

from sqladvisor.ast.base import Node


class PgKind(enum.Enum):
    CREATE_TABLE = "create_table"
    ALTER_TABLE = "alter_table"
    ADD_COLUMN_LIST = "add_column_list"
    ALTER_COLUMN_TYPE = "alter_column_type"
    DROP_COLUMN = "drop_column"
    COLUMN_DEF = "column_def"
    COLLATION = "collation"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    SELECT = "select"
    WHERE = "where"
    OTHER = "other"


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class PgNode(Node):
    """Base class for Postgres nodes; advisors use it to verify the tree family."""


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class Collation(PgNode):
    """``COLLATE name`` attached to a column or type."""

    kind = PgKind.COLLATION

    name: str


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ColumnDef(PgNode):
    kind = PgKind.COLUMN_DEF
    child_fields = ("collation",)

    name: str
    type_name: str = ""
    collation: Collation | None = None


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class CreateTableStmt(PgNode):
    kind = PgKind.CREATE_TABLE
    child_fields = ("columns",)

    table: str
    columns: tuple[ColumnDef, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class AddColumnListStmt(PgNode):
    """``ADD COLUMN`` item of an ``ALTER TABLE``."""

    kind = PgKind.ADD_COLUMN_LIST
    child_fields = ("columns",)

    table: str
    columns: tuple[ColumnDef, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class AlterColumnTypeStmt(PgNode):
    """``ALTER COLUMN ... TYPE ... [COLLATE ...]`` item of an ``ALTER TABLE``."""

    kind = PgKind.ALTER_COLUMN_TYPE
    child_fields = ("collation",)

    table: str
    column: str
    type_name: str = ""
    collation: Collation | None = None


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class DropColumnStmt(PgNode):
    kind = PgKind.DROP_COLUMN

    table: str
    column: str


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class AlterTableStmt(PgNode):
    kind = PgKind.ALTER_TABLE
    child_fields = ("items",)

    table: str
    items: tuple[AddColumnListStmt | AlterColumnTypeStmt | DropColumnStmt, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class WhereClause(PgNode):
    kind = PgKind.WHERE


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class InsertStmt(PgNode):
    kind = PgKind.INSERT

    table: str


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class UpdateStmt(PgNode):
    kind = PgKind.UPDATE
    child_fields = ("where",)

    table: str
    where: WhereClause | None = None


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class DeleteStmt(PgNode):
    kind = PgKind.DELETE
    child_fields = ("where",)

    table: str
    where: WhereClause | None = None


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SelectStmt(PgNode):
    kind = PgKind.SELECT


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class OtherStmt(PgNode):
    """Any statement the tree does not model; *tag* names the parser's statement type."""

    kind = PgKind.OTHER

    tag: str = ""
