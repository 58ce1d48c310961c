"""Contract every advisor satisfies, plus the shared traversal scaffolding built-in advisors use."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from sqladvisor.advice import Advice, Code, normalize_statement, ok_advice
from sqladvisor.ast.base import NodeVisitor
from sqladvisor.ast.mysql import MySQLNode
from sqladvisor.ast.pg import PgNode
from sqladvisor.dialect import Family
from sqladvisor.dryrun import DryRunProber
from sqladvisor.errors import ASTTypeError, ReviewCancelledError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqladvisor.advice import Status
    from sqladvisor.ast.base import Node
    from sqladvisor.context import Context

_FAMILY_NODE: dict[Family, type[Node]] = {
    Family.MYSQL: MySQLNode,
    Family.POSTGRES: PgNode,
}


@runtime_checkable
class Advisor(Protocol):
    """A unit implementing one policy rule for one AST family.

    ``check`` returns findings in statement order, then traversal order, and raises only for conditions that prevent
    a report (type mismatch, cancellation). ``parse_payload`` decodes the rule payload before ``check`` runs.
    """

    family: Family

    def parse_payload(self, raw: str | bytes | None) -> object | None: ...

    def check(self, ctx: Context) -> list[Advice]: ...


class StatementChecker(NodeVisitor):
    """Visitor that accumulates advice for one advisor invocation.

    :meth:`begin` is called before each top-level statement so subclasses can refer to the statement being walked.
    """

    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx
        self.level: Status = ctx.status
        self.title = ctx.title
        self.advice: list[Advice] = []
        self.text = ""
        self.line = 0

    def begin(self, statement: Node) -> None:
        self.text = normalize_statement(statement.text)
        self.line = statement.line

    def add(self, code: Code, content: str, line: int) -> None:
        self.advice.append(Advice(status=self.level, code=code, title=self.title, content=content, line=line))


class BaseAdvisor:
    """Template for advisors that walk every statement with a :class:`StatementChecker`.

    Subclasses set :attr:`family` and implement :meth:`new_checker`; they may override :meth:`parse_payload` and
    :meth:`should_walk`.
    """

    family: ClassVar[Family]

    def parse_payload(self, raw: str | bytes | None) -> object | None:  # noqa: ARG002
        return None

    def new_checker(self, ctx: Context) -> StatementChecker:
        raise NotImplementedError

    def should_walk(self, ctx: Context) -> bool:  # noqa: ARG002
        return True

    def statements(self, ctx: Context) -> Sequence[Node]:
        """Return the context's statements after verifying they belong to this advisor's family.

        Raises:
            ASTTypeError: If any statement is not a node of :attr:`family`.
        """
        expected = _FAMILY_NODE[self.family]
        for statement in ctx.statements:
            if not isinstance(statement, expected):
                raise ASTTypeError(expected.__name__, type(statement).__name__)
        return ctx.statements

    def check(self, ctx: Context) -> list[Advice]:
        statements = self.statements(ctx)
        ctx.token.raise_if_cancelled()
        checker = self.new_checker(ctx)
        if self.should_walk(ctx):
            try:
                for statement in statements:
                    ctx.token.raise_if_cancelled()
                    checker.begin(statement)
                    statement.accept(checker)
            except ReviewCancelledError as exc:
                raise ReviewCancelledError(exc.message, advice=checker.advice) from exc
        if not checker.advice:
            return [ok_advice()]
        return checker.advice


class DMLDryRunChecker(StatementChecker):
    """Probe every top-level statement whose kind is in *dml_kinds*; never descend.

    Shared by the dry-run advisors of every family, which differ only in the kinds they treat as DML.
    """

    def __init__(self, ctx: Context, dml_kinds: frozenset[object]) -> None:
        super().__init__(ctx)
        self.dml_kinds = dml_kinds
        self.prober = DryRunProber(ctx.executor, ctx.token) if ctx.executor is not None else None

    def enter(self, node: Node) -> bool:
        if node.kind in self.dml_kinds and self.prober is not None:
            result = self.prober.probe(node.text)
            if not result.validated:
                self.add(
                    Code.STATEMENT_DML_DRY_RUN_FAILED,
                    f'"{node.text}" dry runs failed: {result.error}',
                    self.line,
                )
        return False
