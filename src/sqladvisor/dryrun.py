"""Validate data-changing statements against a live database without running them."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from sqladvisor.errors import ReviewCancelledError

if TYPE_CHECKING:
    from sqladvisor.context import CancelToken, QueryExecutor

logger = logging.getLogger(__name__)

EXPLAIN_PREFIX = "EXPLAIN "


@dataclasses.dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of one dry-run probe.

    Attributes:
        statement: The statement text that was probed (unwrapped).
        validated: Whether the database accepted the probe.
        error: The database error message, verbatim, when the probe was rejected.
    """

    statement: str
    validated: bool
    error: str | None = None


def explain(statement: str) -> str:
    """Wrap *statement* in its non-executing ``EXPLAIN`` form.

    Example:
        >>> explain("UPDATE t SET a = 1;")
        'EXPLAIN UPDATE t SET a = 1'
    """
    return EXPLAIN_PREFIX + statement.strip().rstrip(";").rstrip()


class DryRunProber:
    """Submit ``EXPLAIN`` probes through a shared :class:`~sqladvisor.context.QueryExecutor`.

    Each probe is one request/response exchange; nothing is held between probes, and failures are never retried
    because a rejected dry run is the signal being looked for.
    """

    def __init__(self, executor: QueryExecutor, token: CancelToken) -> None:
        self._executor = executor
        self._token = token

    def probe(self, statement: str) -> ProbeResult:
        """Dry-run *statement*.

        Raises:
            ReviewCancelledError: If the review was cancelled before the probe, or the probe failed while the review
                was being cancelled.
        """
        self._token.raise_if_cancelled()
        logger.debug("Probing %r", statement)
        try:
            self._executor.execute(explain(statement))
        except ReviewCancelledError:
            raise
        except Exception as exc:
            if self._token.cancelled:
                raise ReviewCancelledError("review cancelled during dry run") from exc
            logger.info("Dry run rejected %r: %s", statement, exc)
            return ProbeResult(statement=statement, validated=False, error=str(exc))
        return ProbeResult(statement=statement, validated=True)
