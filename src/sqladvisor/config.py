"""Review policy files and environment settings."""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Any

import yaml

from sqladvisor.dialect import Dialect
from sqladvisor.errors import ConfigurationError
from sqladvisor.rule import Rule, RuleLevel, RuleType

if TYPE_CHECKING:
    from pathlib import Path

MAX_WORKERS_ENV = "SQLADVISOR_MAX_WORKERS"
DEFAULT_MAX_WORKERS = 4


def default_max_workers() -> int:
    """Return the worker count for concurrent rule evaluation.

    Reads ``SQLADVISOR_MAX_WORKERS`` and falls back to 4.

    Raises:
        ConfigurationError: If the variable is set to something other than a positive integer.
    """
    raw = os.environ.get(MAX_WORKERS_ENV)
    if raw is None or not raw.strip():
        return DEFAULT_MAX_WORKERS
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{MAX_WORKERS_ENV} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ConfigurationError(f"{MAX_WORKERS_ENV} must be at least 1, got {value}")
    return value


def _enum_value(enum_type: Any, value: object, what: str) -> Any:
    try:
        return enum_type(value if not isinstance(value, str) else value.strip())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(f"unknown {what} {value!r}; expected one of: {allowed}") from None


def _payload(value: object) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        return json.dumps(value)
    raise ConfigurationError(f"rule payload must be a mapping or a string, got {type(value).__name__}")


def parse_policy(data: object) -> list[Rule]:
    """Build rules from a decoded policy document.

    A policy is a mapping with a ``rules`` list and an optional default ``engine``::

        engine: POSTGRES
        rules:
          - type: system.collation.allowlist
            level: ERROR
            payload:
              list: [C]

    Raises:
        ConfigurationError: If the document, a rule type, level or engine is invalid.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("review policy must be a mapping")
    engine = data.get("engine")
    default_engine = _enum_value(Dialect, str(engine).upper(), "engine") if engine is not None else None
    entries = data.get("rules") or []
    if not isinstance(entries, list):
        raise ConfigurationError('review policy "rules" must be a list')

    rules: list[Rule] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"rule #{index} must be a mapping")
        if "type" not in entry or "level" not in entry:
            raise ConfigurationError(f'rule #{index} needs both "type" and "level"')
        rule_engine = default_engine
        if entry.get("engine") is not None:
            rule_engine = _enum_value(Dialect, str(entry["engine"]).upper(), "engine")
        rules.append(
            Rule(
                type=_enum_value(RuleType, entry["type"], "rule type"),
                level=_enum_value(RuleLevel, str(entry["level"]).upper(), "rule level"),
                payload=_payload(entry.get("payload")),
                engine=rule_engine,
            )
        )
    return rules


def load_policy(path: Path) -> list[Rule]:
    """Read a YAML review policy from *path*; see :func:`parse_policy` for the format."""
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"failed to parse review policy {path}: {exc}") from exc
    return parse_policy(data or {})
