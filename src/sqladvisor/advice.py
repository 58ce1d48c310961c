"""Finding model shared by every advisor."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any

MAX_STATEMENT_LENGTH = 1000


class Status(str, enum.Enum):
    """Severity of a single finding."""

    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Code(str, enum.Enum):
    """Stable identifier of what a finding reports."""

    OK = "Ok"
    DISABLED_COLLATION = "DisabledCollation"
    STATEMENT_DML_DRY_RUN_FAILED = "StatementDMLDryRunFailed"
    STATEMENT_NO_WHERE = "StatementNoWhere"


@dataclasses.dataclass(frozen=True, slots=True)
class Advice:
    """One finding emitted by an advisor.

    Attributes:
        status: Severity, derived from the rule level when a violation is found.
        code: What was found.
        title: Human label, normally the rule type; ``"OK"`` for the synthetic success finding.
        content: Explanation carrying the offending value and statement text.
        line: 1-based source line of the offending construct, ``0`` when not applicable.
    """

    status: Status
    code: Code
    title: str
    content: str
    line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "code": self.code.value,
            "title": self.title,
            "content": self.content,
            "line": self.line,
        }


def ok_advice() -> Advice:
    """Return the synthetic finding used when a rule found nothing."""
    return Advice(status=Status.SUCCESS, code=Code.OK, title="OK", content="")


def normalize_statement(statement: str) -> str:
    """Limit *statement* to :data:`MAX_STATEMENT_LENGTH` characters for embedding in advice content.

    Example:
        >>> normalize_statement("SELECT 1")
        'SELECT 1'
        >>> len(normalize_statement("x" * 2000))
        1003
    """
    if len(statement) > MAX_STATEMENT_LENGTH:
        return statement[:MAX_STATEMENT_LENGTH] + "..."
    return statement
