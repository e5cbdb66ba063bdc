"""
Hook executors - responsible for running handler processes.

Each executor handles a specific hook type:
- CommandHookExecutor: Runs shell commands
- ScriptHookExecutor: Runs Python scripts with JSON on stdin
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing

from hookctl.hooks.executors.base import HookExecutionError, HookExecutor
from hookctl.hooks.executors.command import CommandHookExecutor
from hookctl.hooks.executors.script import ScriptHookExecutor

__all__ = [
    "CommandHookExecutor",
    "HookExecutionError",
    "HookExecutor",
    "ScriptHookExecutor",
    "create_executor",
]


def create_executor(
    hook_type: _typing.Literal["command", "script"],
    *,
    hooks_root: _pathlib.Path | None = None,
) -> HookExecutor:
    """
    Create an executor for the given hook type.

    Args:
        hook_type: Type of hook to execute.
        hooks_root: Directory handlers run in.

    Returns:
        Appropriate executor instance.

    Raises:
        ValueError: If hook type is unknown.
    """
    if hook_type == "command":
        return CommandHookExecutor(hooks_root=hooks_root)
    elif hook_type == "script":
        return ScriptHookExecutor(hooks_root=hooks_root)
    else:
        raise ValueError(f"Unknown hook type: {hook_type}")
