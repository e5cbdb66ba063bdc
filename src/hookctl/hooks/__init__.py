"""
Hook system for hookctl.

Hooks are named handlers (shell commands or Python scripts) that run in a
separate process when the host application asks for them. The manager
gates each execution on the hook's conditions, enforces a time budget,
tracks per-hook performance, and retries critical hooks that fail.
"""

from hookctl.hooks.config import HookConditions, HookDefinition, HooksFile, load_hooks_file
from hookctl.hooks.events import ErrorKind, ExecutionContext, HookOutcome, OutcomeStatus
from hookctl.hooks.manager import GlobalConfig, HookManager
from hookctl.hooks.metrics import HookExecutionStats, MetricsTracker
from hookctl.hooks.policy import FailureAction, FailurePolicy
from hookctl.hooks.queue import DrainSummary, FailureQueue, FailureQueueEntry
from hookctl.hooks.registry import HookRegistry
from hookctl.hooks.report import PerformanceReport

__all__ = [
    "DrainSummary",
    "ErrorKind",
    "ExecutionContext",
    "FailureAction",
    "FailurePolicy",
    "FailureQueue",
    "FailureQueueEntry",
    "GlobalConfig",
    "HookConditions",
    "HookDefinition",
    "HookExecutionStats",
    "HookManager",
    "HookOutcome",
    "HookRegistry",
    "HooksFile",
    "MetricsTracker",
    "OutcomeStatus",
    "PerformanceReport",
    "load_hooks_file",
]
