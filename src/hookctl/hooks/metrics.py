"""
Per-hook execution statistics.

The MetricsTracker is the single owner of every hook's stats. Callers
record executions through it and read copies back; the live objects are
never handed out.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import threading as _threading

import hookctl.constants as constants

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass
class HookExecutionStats:
    """
    Execution statistics for one hook.

    Attributes:
        executions: Counted executions (success, failure, timeout)
        failures: Counted failures (failure, timeout)
        total_time_ms: Sum of execution durations
        avg_time_ms: total_time_ms / executions
        min_time_ms: Fastest execution (None before the first one)
        max_time_ms: Slowest execution
        disabled: Set once the hook is chronically slow
        retries: Retries made in the current invocation chain
        last_status: Status value of the most recent counted execution
        disabled_at: Execution count at which the hook was auto-disabled
    """

    executions: int = 0
    failures: int = 0
    total_time_ms: float = 0.0
    avg_time_ms: float = 0.0
    min_time_ms: float | None = None
    max_time_ms: float = 0.0
    disabled: bool = False
    retries: int = 0
    last_status: str | None = None
    disabled_at: int | None = None

    @property
    def success_rate(self) -> float | None:
        """Percentage of executions that succeeded, None before any execution."""
        if self.executions == 0:
            return None
        return (self.executions - self.failures) / self.executions * 100

    @property
    def newly_disabled(self) -> bool:
        """True if the execution that produced this copy disabled the hook."""
        return self.disabled_at is not None and self.disabled_at == self.executions


class MetricsTracker:
    """
    Owner of all HookExecutionStats.

    Every mutation happens under a lock so concurrent executions of the
    same hook never interleave partial updates.
    """

    def __init__(self, timeout_ms: float = constants.DEFAULT_TIMEOUT_MS) -> None:
        """
        Initialize the tracker.

        Args:
            timeout_ms: Execution time budget, used for the auto-disable rule.
        """
        self._timeout_ms = timeout_ms
        self._stats: dict[str, HookExecutionStats] = {}
        self._lock = _threading.Lock()

    @property
    def timeout_ms(self) -> float:
        return self._timeout_ms

    @timeout_ms.setter
    def timeout_ms(self, value: float) -> None:
        self._timeout_ms = value

    def initialize(self, hook_name: str) -> None:
        """Start zeroed stats for a hook, replacing any existing stats."""
        with self._lock:
            self._stats[hook_name] = HookExecutionStats()

    def retain_only(self, hook_names: list[str]) -> None:
        """
        Replace the stats table with fresh stats for exactly these hooks.

        Stats for hooks not listed are discarded.
        """
        with self._lock:
            self._stats = {name: HookExecutionStats() for name in hook_names}

    def discard(self, hook_name: str) -> None:
        with self._lock:
            self._stats.pop(hook_name, None)

    def record(
        self,
        hook_name: str,
        duration_ms: float,
        *,
        success: bool,
        status: str,
        announce: bool = True,
    ) -> HookExecutionStats | None:
        """
        Record one counted execution.

        Applies the auto-disable rule: once a hook has more than
        AUTO_DISABLE_MIN_EXECUTIONS executions and its average exceeds
        AUTO_DISABLE_TIMEOUT_RATIO of the timeout, it is disabled until
        its stats are reset.

        Args:
            hook_name: The hook that executed.
            duration_ms: How long the execution took.
            success: Whether it succeeded.
            status: Outcome status value, kept for reporting.
            announce: Log a warning when this execution disables the hook.

        Returns:
            A copy of the updated stats, or None if the hook has no stats
            (it was removed while the execution was in flight).
        """
        with self._lock:
            stats = self._stats.get(hook_name)
            if stats is None:
                return None
            stats.executions += 1
            stats.total_time_ms += duration_ms
            stats.avg_time_ms = stats.total_time_ms / stats.executions
            if stats.min_time_ms is None or duration_ms < stats.min_time_ms:
                stats.min_time_ms = duration_ms
            stats.max_time_ms = max(stats.max_time_ms, duration_ms)
            if not success:
                stats.failures += 1
            stats.last_status = status

            if (
                not stats.disabled
                and stats.executions > constants.AUTO_DISABLE_MIN_EXECUTIONS
                and stats.avg_time_ms > constants.AUTO_DISABLE_TIMEOUT_RATIO * self._timeout_ms
            ):
                stats.disabled = True
                stats.disabled_at = stats.executions
                if announce:
                    _logger.warning(
                        "Disabling slow hook: %s (avg %.0fms over %d executions)",
                        hook_name,
                        stats.avg_time_ms,
                        stats.executions,
                    )

            return _dataclasses.replace(stats)

    def is_disabled(self, hook_name: str) -> bool:
        with self._lock:
            stats = self._stats.get(hook_name)
            return stats is not None and stats.disabled

    def begin_chain(self, hook_name: str) -> None:
        """Reset the retry counter at the start of a fresh invocation chain."""
        with self._lock:
            stats = self._stats.get(hook_name)
            if stats is not None:
                stats.retries = 0

    def note_retry(self, hook_name: str) -> None:
        """Increment the chain's retry counter."""
        with self._lock:
            stats = self._stats.get(hook_name)
            if stats is not None:
                stats.retries += 1

    def reset(self, hook_name: str) -> bool:
        """
        Clear a hook's stats, re-enabling it if it was auto-disabled.

        Returns:
            True if the hook had stats to reset.
        """
        with self._lock:
            if hook_name not in self._stats:
                return False
            self._stats[hook_name] = HookExecutionStats()
            return True

    def reset_all(self) -> None:
        with self._lock:
            for name in self._stats:
                self._stats[name] = HookExecutionStats()

    def snapshot(self, hook_name: str) -> HookExecutionStats | None:
        """Get a copy of one hook's stats."""
        with self._lock:
            stats = self._stats.get(hook_name)
            return _dataclasses.replace(stats) if stats is not None else None

    def snapshots(self) -> dict[str, HookExecutionStats]:
        """Get copies of all stats, keyed by hook name."""
        with self._lock:
            return {name: _dataclasses.replace(s) for name, s in self._stats.items()}
