"""Error hierarchy for sqladvisor.

Policy violations and failed dry runs are never raised: they are reported as :class:`~sqladvisor.advice.Advice`.
Everything in this module signals that a review could not produce a report at all, either because the configuration
is wrong, because an advisor received a tree it cannot read, or because the review was cancelled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqladvisor.advice import Advice
    from sqladvisor.dialect import Dialect, Family
    from sqladvisor.rule import RuleType


class AdvisorError(Exception):
    """Base class for every error raised by sqladvisor.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(AdvisorError):
    """The rule configuration cannot be evaluated.

    Raised before any advisor runs, so a review either fails up-front or produces a complete report.
    """


class UnsupportedRuleError(ConfigurationError):
    """No advisor is registered for a ``(dialect, rule_type)`` pair.

    Attributes:
        dialect: The dialect the review was requested for.
        rule_type: The rule type that has no advisor for *dialect*.

    Example:
        >>> from sqladvisor import Dialect, RuleType, UnsupportedRuleError
        >>> err = UnsupportedRuleError(Dialect.MYSQL, RuleType.COLLATION_ALLOWLIST)
        >>> err.message
        'rule "system.collation.allowlist" is not supported for MYSQL'
    """

    def __init__(self, dialect: Dialect, rule_type: RuleType | str) -> None:
        super().__init__(f'rule "{rule_type}" is not supported for {dialect.name}')
        self.dialect = dialect
        self.rule_type = rule_type


class PayloadError(ConfigurationError):
    """A rule payload could not be decoded into the shape its advisor expects.

    Attributes:
        rule_type: The rule whose payload is malformed, or ``None`` when unknown.
    """

    def __init__(self, message: str, *, rule_type: RuleType | str | None = None) -> None:
        super().__init__(message)
        self.rule_type = rule_type


class RuleLevelError(ConfigurationError):
    """A rule level cannot be turned into an advice status (e.g. a disabled rule reached the engine).

    Attributes:
        level: The offending level value.
    """

    def __init__(self, level: object) -> None:
        super().__init__(f"unexpected rule level {level!r}")
        self.level = level


class DuplicateRegistrationError(AdvisorError):
    """An advisor is already registered under the same ``(dialect, rule_type)`` key.

    This is a programming error: registries are populated once at start-up, so it surfaces before any review runs.
    """

    def __init__(self, dialect: Dialect, rule_type: RuleType | str) -> None:
        super().__init__(f'advisor for rule "{rule_type}" on {dialect.name} is already registered')
        self.dialect = dialect
        self.rule_type = rule_type


class RegistryFrozenError(AdvisorError):
    """Registration was attempted on a registry that has already been frozen."""


class FamilyMismatchError(AdvisorError):
    """An advisor was registered for a dialect whose statement trees it cannot read.

    Attributes:
        dialect: The dialect the advisor was registered for.
        family: The AST family the advisor reads.
    """

    def __init__(self, dialect: Dialect, family: Family) -> None:
        super().__init__(f"advisor for the {family.value} family cannot review {dialect.name}")
        self.dialect = dialect
        self.family = family


class ASTTypeError(AdvisorError):
    """An advisor received statements whose tree shape belongs to another dialect family.

    Attributes:
        expected: Name of the node base class the advisor reads.
        actual: Name of the type that was received instead.
    """

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"failed to convert to {expected}: got {actual}")
        self.expected = expected
        self.actual = actual


class ReviewCancelledError(AdvisorError):
    """The review was cancelled or ran past its deadline.

    The advice collected before cancellation is kept on the exception so callers can log it, but it is never
    presented as a complete report.

    Attributes:
        advice: Findings accumulated before the cancellation was observed, in report order.
    """

    def __init__(self, message: str = "review cancelled", *, advice: Sequence[Advice] = ()) -> None:
        super().__init__(message)
        self.advice: tuple[Advice, ...] = tuple(advice)
