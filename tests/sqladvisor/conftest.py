from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

from sqladvisor import CancelToken, Registry, Reviewer, register_builtin

if TYPE_CHECKING:
    from collections.abc import Callable

# -- Query executors -----------------------------------------------------------


class ProbeRejected(Exception):
    """Stands in for a driver error raised by a rejected EXPLAIN."""


class FakeExecutor:
    """Records every statement and rejects those containing a configured fragment."""

    def __init__(self, failures: dict[str, str] | None = None) -> None:
        self.failures = failures or {}
        self.executed: list[str] = []

    def execute(self, statement: str) -> None:
        self.executed.append(statement)
        for fragment, message in self.failures.items():
            if fragment in statement:
                raise ProbeRejected(message)


class CancellingExecutor(FakeExecutor):
    """Cancels *token* once *after* probes have been issued."""

    def __init__(self, token: CancelToken, after: int) -> None:
        super().__init__()
        self.token = token
        self.after = after

    def execute(self, statement: str) -> None:
        super().execute(statement)
        if len(self.executed) >= self.after:
            self.token.cancel()


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def registry() -> Registry:
    registry = Registry()
    register_builtin(registry)
    registry.freeze()
    return registry


@pytest.fixture
def reviewer(registry: Registry) -> Reviewer:
    return Reviewer(registry, max_workers=2)


# -- libpg_query protobuf subset -------------------------------------------------

_F = descriptor_pb2.FieldDescriptorProto

# name -> [(field, number, kind, type_name, repeated)]; kind is "string", "int", "bool", "enum" or "message".
_MESSAGES: dict[str, list[tuple[str, int, str, str, bool]]] = {
    "String": [("sval", 1, "string", "", False)],
    "RangeVar": [("schemaname", 2, "string", "", False), ("relname", 3, "string", "", False)],
    "TypeName": [("names", 1, "message", "Node", True)],
    "CollateClause": [
        ("arg", 1, "message", "Node", False),
        ("collname", 2, "message", "Node", True),
        ("location", 3, "int", "", False),
    ],
    "ColumnDef": [
        ("colname", 1, "string", "", False),
        ("type_name", 2, "message", "TypeName", False),
        ("coll_clause", 16, "message", "CollateClause", False),
        ("location", 19, "int", "", False),
    ],
    "CreateStmt": [("relation", 1, "message", "RangeVar", False), ("table_elts", 2, "message", "Node", True)],
    "AlterTableCmd": [
        ("subtype", 1, "enum", "AlterTableType", False),
        ("name", 2, "string", "", False),
        ("def", 5, "message", "Node", False),
    ],
    "AlterTableStmt": [
        ("relation", 1, "message", "RangeVar", False),
        ("cmds", 2, "message", "Node", True),
        ("objtype", 3, "enum", "ObjectType", False),
    ],
    "A_Const": [("isnull", 10, "bool", "", False), ("location", 11, "int", "", False)],
    "InsertStmt": [("relation", 1, "message", "RangeVar", False)],
    "UpdateStmt": [("relation", 1, "message", "RangeVar", False), ("where_clause", 3, "message", "Node", False)],
    "DeleteStmt": [("relation", 1, "message", "RangeVar", False), ("where_clause", 3, "message", "Node", False)],
    "SelectStmt": [("target_list", 3, "message", "Node", True)],
    "TruncateStmt": [("relations", 1, "message", "Node", True)],
    "RawStmt": [
        ("stmt", 1, "message", "Node", False),
        ("stmt_location", 2, "int", "", False),
        ("stmt_len", 3, "int", "", False),
    ],
    "ParseResult": [("version", 1, "int", "", False), ("stmts", 2, "message", "RawStmt", True)],
}

_NODE_VARIANTS = [
    ("string", "String"),
    ("range_var", "RangeVar"),
    ("type_name", "TypeName"),
    ("collate_clause", "CollateClause"),
    ("column_def", "ColumnDef"),
    ("create_stmt", "CreateStmt"),
    ("alter_table_cmd", "AlterTableCmd"),
    ("alter_table_stmt", "AlterTableStmt"),
    ("a_const", "A_Const"),
    ("insert_stmt", "InsertStmt"),
    ("update_stmt", "UpdateStmt"),
    ("delete_stmt", "DeleteStmt"),
    ("select_stmt", "SelectStmt"),
    ("truncate_stmt", "TruncateStmt"),
]

_ENUMS = {
    "AlterTableType": ["ALTER_TABLE_TYPE_UNDEFINED", "AT_AddColumn", "AT_DropColumn", "AT_AlterColumnType"],
    "ObjectType": ["OBJECT_TYPE_UNDEFINED", "OBJECT_INDEX", "OBJECT_TABLE"],
}

_SCALARS = {"string": _F.TYPE_STRING, "int": _F.TYPE_INT32, "bool": _F.TYPE_BOOL}


def _build_pg_query_schema(alter_target_field: str = "objtype") -> dict[str, Any]:
    """Assemble the subset of ``pg_query.proto`` the converter reads and return its message classes by name.

    *alter_target_field* names the ``AlterTableStmt`` target-kind field: ``objtype``, or ``relkind`` as in
    libpg_query 13.
    """
    proto = descriptor_pb2.FileDescriptorProto(name="pg_query_subset.proto", package="pg_query", syntax="proto3")
    for enum_name, values in _ENUMS.items():
        enum_type = proto.enum_type.add(name=enum_name)
        for number, value in enumerate(values):
            enum_type.value.add(name=value, number=number)

    node = proto.message_type.add(name="Node")
    node.oneof_decl.add(name="node")
    for number, (field_name, type_name) in enumerate(_NODE_VARIANTS, start=1):
        node.field.add(
            name=field_name,
            number=number,
            type=_F.TYPE_MESSAGE,
            type_name=f".pg_query.{type_name}",
            label=_F.LABEL_OPTIONAL,
            oneof_index=0,
        )

    for message_name, fields in _MESSAGES.items():
        message = proto.message_type.add(name=message_name)
        for field_name, number, kind, type_name, repeated in fields:
            if message_name == "AlterTableStmt" and field_name == "objtype":
                field_name = alter_target_field  # noqa: PLW2901
            field = message.field.add(
                name=field_name, number=number, label=_F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL
            )
            if kind == "message":
                field.type = _F.TYPE_MESSAGE
                field.type_name = f".pg_query.{type_name}"
            elif kind == "enum":
                field.type = _F.TYPE_ENUM
                field.type_name = f".pg_query.{type_name}"
            else:
                field.type = _SCALARS[kind]

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(proto.SerializeToString())
    classes = {"Node": message_factory.GetMessageClass(pool.FindMessageTypeByName("pg_query.Node"))}
    for message_name in _MESSAGES:
        classes[message_name] = message_factory.GetMessageClass(pool.FindMessageTypeByName(f"pg_query.{message_name}"))
    classes["enums"] = {name: pool.FindEnumTypeByName(f"pg_query.{name}") for name in _ENUMS}
    return classes


@pytest.fixture(scope="session")
def pg_query() -> dict[str, Any]:
    return _build_pg_query_schema()


@pytest.fixture(scope="session")
def pg_query_13() -> dict[str, Any]:
    return _build_pg_query_schema(alter_target_field="relkind")


# -- Assertion helpers ---------------------------------------------------------


def assert_single_ok(advice: list[Any]) -> None:
    """Assert that *advice* is exactly the synthetic success finding."""
    assert len(advice) == 1
    assert advice[0].code.value == "Ok"
    assert advice[0].status.value == "SUCCESS"
    assert advice[0].title == "OK"
    assert advice[0].content == ""


def codes(advice: list[Any]) -> list[str]:
    return [item.code.value for item in advice]


def run_twice(fn: Callable[[], list[Any]]) -> tuple[list[Any], list[Any]]:
    return fn(), fn()
