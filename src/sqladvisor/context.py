"""Per-evaluation review context and the capabilities it hands to advisors."""

from __future__ import annotations

import dataclasses
import threading
import time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqladvisor.errors import ReviewCancelledError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqladvisor.advice import Status
    from sqladvisor.ast.base import Node
    from sqladvisor.dialect import Dialect
    from sqladvisor.rule import Rule


@runtime_checkable
class QueryExecutor(Protocol):
    """Minimal query-execution capability supplied by the host.

    ``execute`` runs one read-only statement and returns normally on success. Any failure is raised as an exception
    whose message is reported verbatim.
    """

    def execute(self, statement: str) -> None: ...


class DBAPIExecutor:
    """Adapt a PEP 249 connection to :class:`QueryExecutor`.

    Each call opens its own cursor and closes it before returning. Unless the connection is in autocommit mode, every
    probe is rolled back afterwards: a rejected ``EXPLAIN`` aborts the open transaction on Postgres, and later probes
    would otherwise fail with "current transaction is aborted". Hand it a connection dedicated to dry runs, since any
    transaction the host left open on it is rolled back too.
    """

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    def execute(self, statement: str) -> None:
        cursor = self._connection.cursor()
        try:
            cursor.execute(statement)
            if cursor.description is not None:
                cursor.fetchall()
        finally:
            cursor.close()
            if not getattr(self._connection, "autocommit", False):
                self._connection.rollback()


class CancelToken:
    """Thread-safe cancellation flag with an optional deadline.

    Args:
        timeout: Seconds from now after which the token counts as cancelled, or ``None`` for no deadline.

    Example:
        >>> token = CancelToken()
        >>> token.cancelled
        False
        >>> token.cancel()
        >>> token.cancelled
        True
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.expired

    def raise_if_cancelled(self) -> None:
        """Raise :class:`ReviewCancelledError` if the token was cancelled or its deadline passed."""
        if self._event.is_set():
            raise ReviewCancelledError("review cancelled")
        if self.expired:
            raise ReviewCancelledError("review deadline exceeded")


@dataclasses.dataclass(frozen=True, slots=True)
class Context:
    """Everything one advisor invocation may read.

    Built by the reviewer for a single ``check`` call and discarded afterwards.

    Attributes:
        dialect: Dialect the statements were parsed for.
        statements: Parsed statements, in source order.
        rule: The rule being evaluated.
        status: Status violations are reported with, resolved from the rule level.
        payload: Decoded rule payload, or ``None`` for rules without parameters.
        executor: Live query execution for dry runs, or ``None`` when no connection is configured.
        token: Cancellation token honoured between statements and before each probe.
    """

    dialect: Dialect
    statements: Sequence[Node]
    rule: Rule
    status: Status
    payload: object | None = None
    executor: QueryExecutor | None = None
    token: CancelToken = dataclasses.field(default_factory=CancelToken)

    @property
    def title(self) -> str:
        return str(self.rule.type)
