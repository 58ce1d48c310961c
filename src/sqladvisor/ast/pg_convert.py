"""Build Postgres statement trees from libpg_query protobuf parse trees.

Any libpg_query binding that returns the ``pg_query.ParseResult`` protobuf message can feed the Postgres advisors.
Only protobuf reflection is used (``WhichOneof``, descriptors, field names), so the converter does not import a
specific generated ``pg_query_pb2`` module and works with whichever one the parser ships.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqladvisor.ast import pg

if TYPE_CHECKING:
    from google.protobuf.message import Message

logger = logging.getLogger(__name__)

_NODE_ONEOF = "node"
# libpg_query 13 names the ALTER TABLE target kind ``relkind``; later releases renamed it ``objtype``.
_ALTER_TARGET_FIELDS = ("objtype", "relkind")
_IMPLICIT_SCHEMA = "pg_catalog"


def unwrap_node(node: Message) -> Message:
    """If *node* is a ``Node`` oneof wrapper, return the inner concrete message; otherwise return *node* unchanged.

    In libpg_query's protobuf schema every child reference is wrapped in a generic ``Node`` message that contains a
    single ``oneof node`` field. Concrete messages are returned as-is, so this is safe to call unconditionally.
    """
    oneofs = type(node).DESCRIPTOR.oneofs
    if len(oneofs) == 1 and oneofs[0].name == _NODE_ONEOF:
        which = node.WhichOneof(_NODE_ONEOF)
        if which is not None:
            return getattr(node, which)
    return node


def _type_name(message: Message) -> str:
    return type(message).DESCRIPTOR.name


def _enum_name(message: Message, field_name: str) -> str:
    """Return the symbolic name of an enum field, or ``""`` if the value is unknown to the descriptor."""
    field = message.DESCRIPTOR.fields_by_name[field_name]
    value = field.enum_type.values_by_number.get(getattr(message, field_name))
    return value.name if value is not None else ""


def _strings(nodes: object) -> list[str]:
    """Collect ``String.sval`` values from a repeated ``Node`` field."""
    parts: list[str] = []
    for item in nodes:  # type: ignore[attr-defined]
        inner = unwrap_node(item)
        if _type_name(inner) == "String":
            parts.append(inner.sval)
    return parts


def _alter_target(stmt: Message) -> str:
    fields = stmt.DESCRIPTOR.fields_by_name
    for field_name in _ALTER_TARGET_FIELDS:
        if field_name in fields:
            return _enum_name(stmt, field_name)
    return ""


def _relation_name(relation: Message) -> str:
    if relation.schemaname:
        return f"{relation.schemaname}.{relation.relname}"
    return relation.relname


class _Converter:
    """Converts the statements of one parse result; holds the encoded source for location lookups."""

    def __init__(self, sql: str) -> None:
        self._sql = sql.encode("utf-8")

    def line_at(self, location: int, default: int = 0) -> int:
        """Map a libpg_query byte *location* to a 1-based line; negative locations are unknown."""
        if location < 0:
            return default
        return self._sql.count(b"\n", 0, location) + 1

    def statement(self, raw: Message) -> pg.PgNode:
        start = raw.stmt_location
        end = start + raw.stmt_len if raw.stmt_len else len(self._sql)
        chunk = self._sql[start:end]
        # Statement locations include whitespace left over from the previous statement.
        offset = start + len(chunk) - len(chunk.lstrip())
        text = chunk.decode("utf-8").strip()
        line = self.line_at(offset)

        stmt = unwrap_node(raw.stmt)
        name = _type_name(stmt)
        if name == "CreateStmt":
            return self.create_table(stmt, text, line)
        if name == "AlterTableStmt" and _alter_target(stmt) == "OBJECT_TABLE":
            return self.alter_table(stmt, text, line)
        if name == "InsertStmt":
            return pg.InsertStmt(table=_relation_name(stmt.relation), text=text, line=line)
        if name in ("UpdateStmt", "DeleteStmt"):
            where = pg.WhereClause(line=line) if stmt.HasField("where_clause") else None
            node_type = pg.UpdateStmt if name == "UpdateStmt" else pg.DeleteStmt
            return node_type(table=_relation_name(stmt.relation), where=where, text=text, line=line)
        if name == "SelectStmt":
            return pg.SelectStmt(text=text, line=line)
        logger.debug("Statement %s is not modeled, keeping it as OtherStmt", name)
        return pg.OtherStmt(tag=name, text=text, line=line)

    def column(self, column: Message, default_line: int) -> pg.ColumnDef:
        line = self.line_at(column.location, default_line)
        collation = None
        if column.HasField("coll_clause"):
            clause = column.coll_clause
            collation = pg.Collation(name=".".join(_strings(clause.collname)), line=self.line_at(clause.location, line))
        type_name = ""
        if column.HasField("type_name"):
            type_name = ".".join(part for part in _strings(column.type_name.names) if part != _IMPLICIT_SCHEMA)
        return pg.ColumnDef(name=column.colname, type_name=type_name, collation=collation, line=line)

    def create_table(self, stmt: Message, text: str, line: int) -> pg.CreateTableStmt:
        columns = []
        for element in stmt.table_elts:
            inner = unwrap_node(element)
            if _type_name(inner) == "ColumnDef":
                columns.append(self.column(inner, line))
        return pg.CreateTableStmt(table=_relation_name(stmt.relation), columns=tuple(columns), text=text, line=line)

    def alter_table(self, stmt: Message, text: str, line: int) -> pg.AlterTableStmt:
        table = _relation_name(stmt.relation)
        items: list[pg.AddColumnListStmt | pg.AlterColumnTypeStmt | pg.DropColumnStmt] = []
        for item in stmt.cmds:
            cmd = unwrap_node(item)
            subtype = _enum_name(cmd, "subtype")
            definition = unwrap_node(getattr(cmd, "def")) if cmd.HasField("def") else None
            if subtype == "AT_AddColumn" and definition is not None:
                column = self.column(definition, line)
                items.append(pg.AddColumnListStmt(table=table, columns=(column,), line=column.line))
            elif subtype == "AT_AlterColumnType" and definition is not None:
                column = self.column(definition, line)
                collation = column.collation
                item_line = collation.line if collation is not None else column.line
                items.append(
                    pg.AlterColumnTypeStmt(
                        table=table, column=cmd.name, type_name=column.type_name, collation=collation, line=item_line
                    )
                )
            elif subtype == "AT_DropColumn":
                items.append(pg.DropColumnStmt(table=table, column=cmd.name, line=line))
        return pg.AlterTableStmt(table=table, items=tuple(items), text=text, line=line)


def from_parse_result(tree: Message, sql: str) -> list[pg.PgNode]:
    """Convert a libpg_query ``ParseResult`` into Postgres statement nodes.

    Args:
        tree: A ``pg_query.ParseResult`` protobuf message.
        sql: The exact SQL text *tree* was parsed from; statement text and lines are resolved against it.

    Returns:
        One node per statement, in source order.
    """
    converter = _Converter(sql)
    return [converter.statement(raw) for raw in tree.stmts]
