"""Lookup table from ``(dialect, rule_type)`` to the advisor that evaluates it."""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

from sqladvisor.errors import DuplicateRegistrationError, FamilyMismatchError, RegistryFrozenError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqladvisor.advisors.base import Advisor
    from sqladvisor.dialect import Dialect
    from sqladvisor.rule import RuleType

logger = logging.getLogger(__name__)


class Registry:
    """Maps ``(dialect, rule_type)`` keys to advisors.

    A registry is populated once at start-up, then frozen. Lookups after that read an immutable table and need no
    locking; registering on a frozen registry raises :class:`~sqladvisor.errors.RegistryFrozenError`.

    Example:
        >>> from sqladvisor import Dialect, RuleType
        >>> from sqladvisor.advisors import PgCollationAllowlistAdvisor
        >>> registry = Registry()
        >>> registry.register(Dialect.POSTGRES, RuleType.COLLATION_ALLOWLIST, PgCollationAllowlistAdvisor())
        >>> registry.resolve(Dialect.MYSQL, RuleType.COLLATION_ALLOWLIST) is None
        True
    """

    def __init__(self) -> None:
        self._advisors: dict[tuple[Dialect, RuleType], Advisor] = {}
        self._frozen = False

    def register(self, dialect: Dialect, rule_type: RuleType, advisor: Advisor) -> None:
        """Install *advisor* for ``(dialect, rule_type)``.

        Raises:
            DuplicateRegistrationError: If the key is already taken. The existing advisor stays registered.
            RegistryFrozenError: If :meth:`freeze` has been called.
            FamilyMismatchError: If the advisor reads another AST family than *dialect* produces.
        """
        if self._frozen:
            raise RegistryFrozenError(f'cannot register rule "{rule_type}" for {dialect.name}: registry is frozen')
        if advisor.family is not dialect.family:
            raise FamilyMismatchError(dialect, advisor.family)
        key = (dialect, rule_type)
        if key in self._advisors:
            raise DuplicateRegistrationError(dialect, rule_type)
        self._advisors[key] = advisor
        logger.debug("Registered %s for %s on %s", type(advisor).__name__, rule_type, dialect.name)

    def resolve(self, dialect: Dialect, rule_type: RuleType) -> Advisor | None:
        """Return the advisor for ``(dialect, rule_type)``, or ``None`` if the pair is not supported."""
        return self._advisors.get((dialect, rule_type))

    def supported(self, dialect: Dialect) -> list[RuleType]:
        """Return the rule types registered for *dialect*, in registration order."""
        return [rule_type for registered, rule_type in self._advisors if registered is dialect]

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, key: object) -> bool:
        return key in self._advisors

    def __iter__(self) -> Iterator[tuple[Dialect, RuleType]]:
        return iter(self._advisors)

    def __len__(self) -> int:
        return len(self._advisors)


@functools.cache
def default_registry() -> Registry:
    """Return the frozen registry holding every built-in advisor, building it once on first use."""
    from sqladvisor.advisors import register_builtin

    registry = Registry()
    register_builtin(registry)
    registry.freeze()
    return registry
