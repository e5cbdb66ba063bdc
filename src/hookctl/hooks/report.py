"""
Performance report built from metrics snapshots.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

import hookctl.constants as constants
import hookctl.hooks.metrics as metrics


@_dataclasses.dataclass
class HookReport:
    """Per-hook section of the performance report."""

    executions: int
    failures: int
    avg_time_ms: float
    min_time_ms: float | None
    max_time_ms: float
    success_rate: str
    disabled: bool

    @classmethod
    def from_stats(cls, stats: metrics.HookExecutionStats) -> HookReport:
        rate = stats.success_rate
        return cls(
            executions=stats.executions,
            failures=stats.failures,
            avg_time_ms=round(stats.avg_time_ms, 2),
            min_time_ms=round(stats.min_time_ms, 2) if stats.min_time_ms is not None else None,
            max_time_ms=round(stats.max_time_ms, 2),
            success_rate=f"{rate:.2f}%" if rate is not None else "N/A",
            disabled=stats.disabled,
        )


@_dataclasses.dataclass
class ReportSummary:
    total_hooks: int = 0
    total_executions: int = 0
    total_failures: int = 0
    avg_execution_time_ms: float = 0.0


@_dataclasses.dataclass
class PerformanceReport:
    """
    Aggregate and per-hook execution statistics.

    Auto-disabled hooks carry ``disabled=True`` and get a recommendation
    line, so they are never mistaken for hooks that are simply healthy.
    """

    summary: ReportSummary
    hooks: dict[str, HookReport]
    recommendations: list[str]

    def to_dict(self) -> dict[str, _typing.Any]:
        return _dataclasses.asdict(self)


def build_report(
    snapshots: dict[str, metrics.HookExecutionStats],
    *,
    warning_threshold_ms: float = constants.DEFAULT_WARNING_THRESHOLD_MS,
) -> PerformanceReport:
    """
    Build a performance report from stats snapshots.

    Args:
        snapshots: Stats copies keyed by hook name.
        warning_threshold_ms: Average time above which a hook is flagged.

    Returns:
        The report.
    """
    summary = ReportSummary(total_hooks=len(snapshots))
    hooks: dict[str, HookReport] = {}
    recommendations: list[str] = []
    total_time = 0.0

    for name, stats in snapshots.items():
        summary.total_executions += stats.executions
        summary.total_failures += stats.failures
        total_time += stats.total_time_ms
        hooks[name] = HookReport.from_stats(stats)

        if stats.disabled:
            recommendations.append(
                f"Hook '{name}' was auto-disabled (avg {stats.avg_time_ms:.0f}ms) - "
                "optimize it, then reset its stats to re-enable"
            )
        elif stats.executions and stats.avg_time_ms > warning_threshold_ms:
            recommendations.append(
                f"Hook '{name}' averages {stats.avg_time_ms:.0f}ms - monitor for degradation"
            )

        rate = stats.success_rate
        if rate is not None and 100 - rate > constants.HIGH_FAILURE_RATE_PERCENT:
            recommendations.append(
                f"Hook '{name}' has {100 - rate:.2f}% failure rate - investigate root cause"
            )

    if summary.total_executions > 0:
        summary.avg_execution_time_ms = round(total_time / summary.total_executions, 2)

    return PerformanceReport(summary=summary, hooks=hooks, recommendations=recommendations)
