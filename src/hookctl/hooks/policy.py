"""
Failure policy - what to do after a failed or timed-out execution.

Normal hooks report the failure to the caller. Critical hooks are retried
with exponential backoff until the retry budget is spent, then queued for
deferred replay.
"""

from __future__ import annotations

import enum as _enum

import hookctl.constants as constants
import hookctl.hooks.config as config


class FailureAction(_enum.Enum):
    """Decision made by the failure policy."""

    REPORT = "report"
    """Return the failure to the caller."""

    RETRY = "retry"
    """Sleep for the backoff delay, then run the hook again."""

    QUEUE = "queue"
    """Hand the hook-context pair to the failure queue and report."""


class FailurePolicy:
    """Retry/queue decisions for failed executions."""

    def __init__(
        self,
        max_retries: int = constants.DEFAULT_MAX_RETRIES,
        backoff_unit_ms: float = constants.DEFAULT_BACKOFF_UNIT_MS,
    ) -> None:
        """
        Initialize the policy.

        Args:
            max_retries: Immediate retries allowed for critical hooks.
            backoff_unit_ms: Backoff before retry n is 2**n units.
        """
        self.max_retries = max_retries
        self.backoff_unit_ms = backoff_unit_ms

    def decide(self, definition: config.HookDefinition, retries: int) -> FailureAction:
        """
        Decide how to handle a failure.

        Args:
            definition: The hook that failed.
            retries: Retries already made in this invocation chain.

        Returns:
            The action to take.
        """
        if not definition.is_critical:
            return FailureAction.REPORT
        if retries < self.max_retries:
            return FailureAction.RETRY
        return FailureAction.QUEUE

    def backoff_seconds(self, retry_number: int) -> float:
        """Delay before the given retry (1-based): 2**retry_number units."""
        return (2**retry_number) * self.backoff_unit_ms / 1000
