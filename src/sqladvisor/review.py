"""Run rules over parsed statements and collect the findings."""

from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from sqladvisor.advice import ok_advice
from sqladvisor.config import default_max_workers
from sqladvisor.context import CancelToken, Context
from sqladvisor.errors import ConfigurationError, ReviewCancelledError, UnsupportedRuleError
from sqladvisor.registry import default_registry
from sqladvisor.rule import RuleLevel, status_for_level

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqladvisor.advice import Advice, Status
    from sqladvisor.advisors.base import Advisor
    from sqladvisor.ast.base import Node
    from sqladvisor.context import QueryExecutor
    from sqladvisor.dialect import Dialect
    from sqladvisor.registry import Registry
    from sqladvisor.rule import Rule

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class RuleReport:
    """The complete, ordered findings of one rule over one script."""

    rule: Rule
    advice: list[Advice]


@dataclasses.dataclass(frozen=True, slots=True)
class _Prepared:
    rule: Rule
    advisor: Advisor
    status: Status
    payload: object | None


class Reviewer:
    """Dispatch rules to advisors through a :class:`~sqladvisor.registry.Registry`.

    Args:
        registry: Dispatch table; defaults to :func:`~sqladvisor.registry.default_registry`.
        max_workers: Worker threads used by :meth:`review_all`; defaults to ``SQLADVISOR_MAX_WORKERS`` or 4.

    Example:
        >>> from sqladvisor import Dialect, Rule, RuleLevel, RuleType
        >>> from sqladvisor.ast.pg import UpdateStmt
        >>> stmt = UpdateStmt(table="t", text="UPDATE t SET a = 1", line=1)
        >>> rule = Rule(type=RuleType.STATEMENT_DML_DRY_RUN, level=RuleLevel.ERROR)
        >>> [a.code.value for a in Reviewer().review(Dialect.POSTGRES, [stmt], rule)]
        ['Ok']
    """

    def __init__(self, registry: Registry | None = None, *, max_workers: int | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()
        self._max_workers = max_workers

    def _prepare(self, dialect: Dialect, rule: Rule) -> _Prepared:
        """Validate *rule* for *dialect*; every configuration error surfaces here, before any advisor runs."""
        if rule.engine is not None and rule.engine is not dialect:
            raise ConfigurationError(f'rule "{rule.type}" is configured for {rule.engine.name}, not {dialect.name}')
        status = status_for_level(rule.level)
        advisor = self._registry.resolve(dialect, rule.type)
        if advisor is None:
            raise UnsupportedRuleError(dialect, rule.type)
        payload = advisor.parse_payload(rule.payload)
        return _Prepared(rule=rule, advisor=advisor, status=status, payload=payload)

    def _run(
        self,
        dialect: Dialect,
        statements: Sequence[Node],
        prepared: _Prepared,
        executor: QueryExecutor | None,
        token: CancelToken,
    ) -> list[Advice]:
        ctx = Context(
            dialect=dialect,
            statements=statements,
            rule=prepared.rule,
            status=prepared.status,
            payload=prepared.payload,
            executor=executor,
            token=token,
        )
        logger.debug(
            "Checking %d statement(s) with %s for %s", len(statements), type(prepared.advisor).__name__, prepared.rule.type
        )
        advice = list(prepared.advisor.check(ctx))
        if not advice:
            advice.append(ok_advice())
        return advice

    def review(
        self,
        dialect: Dialect,
        statements: Sequence[Node],
        rule: Rule,
        *,
        executor: QueryExecutor | None = None,
        token: CancelToken | None = None,
    ) -> list[Advice]:
        """Evaluate one rule over a batch of statements.

        Args:
            dialect: Dialect the statements were parsed for.
            statements: Parsed statements in source order.
            rule: Rule to evaluate. Disabled rules and rules configured for another engine are the caller's to filter
                out.
            executor: Live query execution for dry-run rules.
            token: Cancellation token; a fresh one is used when omitted.

        Returns:
            Findings in statement order, never empty.

        Raises:
            ConfigurationError: If the rule level, payload, engine or ``(dialect, rule type)`` pair is invalid.
            ASTTypeError: If the statements belong to another dialect family.
            ReviewCancelledError: If *token* was cancelled or expired during the review.
        """
        prepared = self._prepare(dialect, rule)
        return self._run(dialect, statements, prepared, executor, token or CancelToken())

    def review_all(
        self,
        dialect: Dialect,
        statements: Sequence[Node],
        rules: Sequence[Rule],
        *,
        executor: QueryExecutor | None = None,
        token: CancelToken | None = None,
    ) -> list[RuleReport]:
        """Evaluate several rules over the same statements.

        Disabled rules and rules whose ``engine`` names another dialect are skipped. All remaining rules are validated
        before any of them runs, then evaluated concurrently; reports come back in the order of *rules*. If one rule
        fails, the token is cancelled so the others stop probing.

        Raises:
            ConfigurationError: If any enabled rule is invalid; no rule is evaluated in that case.
            ReviewCancelledError: If *token* was cancelled or expired.
        """
        token = token or CancelToken()
        enabled = [
            rule
            for rule in rules
            if rule.level is not RuleLevel.DISABLED and (rule.engine is None or rule.engine is dialect)
        ]
        prepared = [self._prepare(dialect, rule) for rule in enabled]
        if not prepared:
            return []

        max_workers = self._max_workers or default_max_workers()
        with ThreadPoolExecutor(max_workers=min(max_workers, len(prepared))) as pool:
            futures = [pool.submit(self._run, dialect, statements, item, executor, token) for item in prepared]
            try:
                return [RuleReport(rule=item.rule, advice=future.result()) for item, future in zip(prepared, futures)]
            except ReviewCancelledError:
                logger.warning("Review of %d rule(s) cancelled", len(prepared))
                token.cancel()
                raise
            except Exception:
                logger.warning("Review of %d rule(s) aborted, cancelling remaining rules", len(prepared))
                token.cancel()
                raise
