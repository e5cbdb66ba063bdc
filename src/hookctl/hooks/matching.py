"""
Condition evaluation for hooks.

A hook's conditions gate whether it runs for a given context:
- if_agent: context actor must be one of the listed identifiers
- if_file_matches: context path must match the regular expression
- if_phase: context phase must equal the given string

Evaluation is pure: it never mutates the conditions or the context and
returns the same answer for the same inputs.
"""

from __future__ import annotations

import re as _re

import hookctl.hooks.config as config
import hookctl.hooks.events as events


class ConditionMatcher:
    """
    Evaluates one set of conditions against execution contexts.

    The file pattern is compiled once so the matcher can be reused
    across many contexts.
    """

    def __init__(self, conditions: config.HookConditions | None) -> None:
        """
        Initialize with conditions.

        Args:
            conditions: Conditions to evaluate. None matches everything.
        """
        self._conditions = conditions
        self._file_pattern: _re.Pattern[str] | None = None
        if conditions is not None and conditions.if_file_matches is not None:
            self._file_pattern = _re.compile(conditions.if_file_matches)

    def matches(self, context: events.ExecutionContext) -> bool:
        """
        Check if all present conditions hold for the context.

        Args:
            context: The execution context.

        Returns:
            True if every present condition holds, False otherwise.
        """
        conditions = self._conditions
        if conditions is None:
            return True

        if conditions.if_agent is not None:
            if context.actor is None or context.actor not in conditions.if_agent:
                return False

        if self._file_pattern is not None:
            if context.path is None or not self._file_pattern.search(context.path):
                return False

        if conditions.if_phase is not None and conditions.if_phase != context.phase:
            return False

        return True


def matches(
    conditions: config.HookConditions | None,
    context: events.ExecutionContext,
) -> bool:
    """
    Convenience function to evaluate conditions against a context.

    Args:
        conditions: Hook conditions (None means unconditional).
        context: The execution context.

    Returns:
        True if the hook should run.
    """
    return ConditionMatcher(conditions).matches(context)
