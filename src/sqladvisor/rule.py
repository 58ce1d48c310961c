"""Operator-configured rules and their payloads."""

from __future__ import annotations

import dataclasses
import enum
import json

from sqladvisor.advice import Status
from sqladvisor.dialect import Dialect
from sqladvisor.errors import PayloadError, RuleLevelError


class RuleLevel(str, enum.Enum):
    """Severity configured by the operator."""

    DISABLED = "DISABLED"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class RuleType(str, enum.Enum):
    """Identifier naming a policy."""

    COLLATION_ALLOWLIST = "system.collation.allowlist"
    STATEMENT_DML_DRY_RUN = "statement.dml-dry-run"
    STATEMENT_REQUIRE_WHERE = "statement.where.require"

    def __str__(self) -> str:
        return self.value


_LEVEL_STATUS = {
    RuleLevel.ERROR: Status.ERROR,
    RuleLevel.WARNING: Status.WARNING,
    RuleLevel.INFO: Status.SUCCESS,
}


@dataclasses.dataclass(frozen=True, slots=True)
class Rule:
    """A policy instance: what to check, how severe a violation is, and rule-specific parameters.

    Attributes:
        type: The policy to apply.
        level: Operator-configured severity.
        payload: Raw rule parameters (JSON text or bytes), decoded by the advisor that runs the rule.
        engine: Dialect the rule was configured for, when it comes from a policy file.
    """

    type: RuleType
    level: RuleLevel
    payload: str | bytes | None = None
    engine: Dialect | None = None


def status_for_level(level: RuleLevel) -> Status:
    """Map a rule level to the status its violations are reported with.

    Raises:
        RuleLevelError: If *level* is ``DISABLED`` or not a :class:`RuleLevel`. Disabled rules are filtered out
            before evaluation, so seeing one here means the caller skipped that step.
    """
    try:
        return _LEVEL_STATUS[level]
    except KeyError:
        raise RuleLevelError(level) from None


@dataclasses.dataclass(frozen=True, slots=True)
class StringArrayPayload:
    """Payload made of an ordered list of strings, e.g. allowed collation names.

    Encoded as ``{"list": ["a", "b"]}``.
    """

    list: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, raw: str | bytes | None, *, rule_type: RuleType | str | None = None) -> StringArrayPayload:
        """Decode *raw* JSON into a payload.

        Raises:
            PayloadError: If *raw* is missing, not valid JSON, or not an object whose ``list`` holds strings.

        Example:
            >>> StringArrayPayload.from_payload('{"list": ["C", "POSIX"]}').list
            ('C', 'POSIX')
        """
        if raw is None or not raw.strip():
            raise PayloadError("rule payload is empty", rule_type=rule_type)
        try:
            data = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise PayloadError(f"failed to decode rule payload: {exc}", rule_type=rule_type) from exc
        if not isinstance(data, dict):
            raise PayloadError("rule payload must be a JSON object", rule_type=rule_type)
        items = data.get("list", [])
        if not isinstance(items, list) or not all(isinstance(item, str) for item in items):
            raise PayloadError('rule payload "list" must be an array of strings', rule_type=rule_type)
        return cls(list=tuple(items))
