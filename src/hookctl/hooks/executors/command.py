"""
Command hook executor - runs shell commands.

Command hooks execute a shell command in the hooks root. Context is
injected as HOOKCTL_* environment variables and as JSON on stdin.
Exit 0 is success (stdout is the result); anything else is a failure
with stderr as the detail.
"""

from __future__ import annotations

import asyncio as _asyncio

import hookctl.hooks.config as config
import hookctl.hooks.executors.base as base


class CommandHookExecutor(base.HookExecutor):
    """
    Executor for command hooks.

    Runs shell commands via subprocess in a new session so the whole
    process group can be killed on timeout.
    """

    @property
    def hook_type(self) -> str:
        return "command"

    async def _spawn(
        self,
        hook_def: config.HookDefinition,
        env: dict[str, str],
    ) -> _asyncio.subprocess.Process:
        command = hook_def.command
        if not command:
            raise base.HookExecutionError("Command hook has no command")

        return await _asyncio.create_subprocess_shell(
            command,
            stdin=_asyncio.subprocess.PIPE,
            stdout=_asyncio.subprocess.PIPE,
            stderr=_asyncio.subprocess.PIPE,
            cwd=str(self._hooks_root),
            env=env,
            start_new_session=True,
        )
