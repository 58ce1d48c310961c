"""Pluggable SQL review engine: advisors, their registry, and dry-run validation."""

import logging

from sqladvisor.advice import Advice, Code, Status, normalize_statement, ok_advice
from sqladvisor.advisors import Advisor, BaseAdvisor, StatementChecker, register_builtin
from sqladvisor.ast import Node, NodeVisitor, Visitor, walk
from sqladvisor.config import load_policy, parse_policy
from sqladvisor.context import CancelToken, Context, DBAPIExecutor, QueryExecutor
from sqladvisor.dialect import Dialect, Family
from sqladvisor.dryrun import DryRunProber, ProbeResult
from sqladvisor.errors import (
    AdvisorError,
    ASTTypeError,
    ConfigurationError,
    DuplicateRegistrationError,
    FamilyMismatchError,
    PayloadError,
    RegistryFrozenError,
    ReviewCancelledError,
    RuleLevelError,
    UnsupportedRuleError,
)
from sqladvisor.registry import Registry, default_registry
from sqladvisor.review import Reviewer, RuleReport
from sqladvisor.rule import Rule, RuleLevel, RuleType, StringArrayPayload, status_for_level

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Advice",
    "Advisor",
    "AdvisorError",
    "ASTTypeError",
    "BaseAdvisor",
    "CancelToken",
    "Code",
    "ConfigurationError",
    "Context",
    "DBAPIExecutor",
    "default_registry",
    "Dialect",
    "DryRunProber",
    "DuplicateRegistrationError",
    "Family",
    "FamilyMismatchError",
    "load_policy",
    "Node",
    "NodeVisitor",
    "normalize_statement",
    "ok_advice",
    "parse_policy",
    "PayloadError",
    "ProbeResult",
    "QueryExecutor",
    "register_builtin",
    "Registry",
    "RegistryFrozenError",
    "Reviewer",
    "ReviewCancelledError",
    "Rule",
    "RuleLevel",
    "RuleLevelError",
    "RuleReport",
    "RuleType",
    "StatementChecker",
    "Status",
    "status_for_level",
    "StringArrayPayload",
    "UnsupportedRuleError",
    "Visitor",
    "walk",
]
