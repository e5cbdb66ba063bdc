"""
Script hook executor - runs Python handler scripts.

Script hooks receive the context as JSON on stdin (and as HOOKCTL_*
environment variables) and report through their exit code, stdout and
stderr.

Example script:
    import json
    import sys

    context = json.load(sys.stdin)
    if not context.get("path"):
        sys.exit("no path")
    json.dump({"ok": True}, sys.stdout)
"""

from __future__ import annotations

import asyncio as _asyncio
import pathlib as _pathlib
import sys as _sys

import hookctl.hooks.config as config
import hookctl.hooks.executors.base as base


class ScriptHookExecutor(base.HookExecutor):
    """
    Executor for script hooks.

    Runs the script with the current interpreter, resolving relative
    paths against the hooks root.
    """

    @property
    def hook_type(self) -> str:
        return "script"

    def resolve_script(self, hook_def: config.HookDefinition) -> _pathlib.Path:
        """Resolve the script path relative to the hooks root."""
        script_path_str = hook_def.script
        if not script_path_str:
            raise base.HookExecutionError("Script hook has no script path")

        script_path = _pathlib.Path(script_path_str)
        if not script_path.is_absolute():
            script_path = self._hooks_root / script_path
        return script_path

    async def _spawn(
        self,
        hook_def: config.HookDefinition,
        env: dict[str, str],
    ) -> _asyncio.subprocess.Process:
        script_path = self.resolve_script(hook_def)
        if not script_path.exists():
            raise base.HookExecutionError(f"Script not found: {script_path}")

        return await _asyncio.create_subprocess_exec(
            _sys.executable,
            str(script_path),
            stdin=_asyncio.subprocess.PIPE,
            stdout=_asyncio.subprocess.PIPE,
            stderr=_asyncio.subprocess.PIPE,
            cwd=str(self._hooks_root),
            env=env,
            start_new_session=True,
        )
