"""
Base class for hook executors.

All executors run the handler in a separate process and share the same
timeout race: the handler's completion and the time budget compete, and
whichever finishes first decides the outcome.
"""

from __future__ import annotations

import abc as _abc
import asyncio as _asyncio
import contextlib as _contextlib
import os as _os
import pathlib as _pathlib
import signal as _signal
import time as _time
import typing as _typing

import hookctl.constants as constants
import hookctl.hooks.config as config
import hookctl.hooks.events as events


class HookExecutionError(Exception):
    """Raised when a handler fails (non-zero exit, spawn error, bad reference)."""

    pass


class HookExecutor(_abc.ABC):
    """
    Abstract base class for hook executors.

    Subclasses start the handler process; the base class owns the
    timeout race, process cleanup and outcome classification.
    """

    def __init__(
        self,
        *,
        hooks_root: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the executor.

        Args:
            hooks_root: Directory handlers run in and scripts resolve against.
        """
        self._hooks_root = hooks_root or _pathlib.Path.cwd()

    @property
    @_abc.abstractmethod
    def hook_type(self) -> str:
        """The hook type this executor handles."""
        ...

    @_abc.abstractmethod
    async def _spawn(
        self,
        hook_def: config.HookDefinition,
        env: dict[str, str],
    ) -> _asyncio.subprocess.Process:
        """
        Start the handler process.

        Subclasses implement this method. The process must be started
        with piped stdin/stdout/stderr and in its own session.
        """
        ...

    def build_env(
        self,
        hook_def: config.HookDefinition,
        context: events.ExecutionContext,
        extra_env: _typing.Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        """Build the handler environment: inherited env plus HOOKCTL_* vars."""
        env = _os.environ.copy()
        env.update(context.to_env_vars())
        env[f"{constants.ENV_PREFIX}HOOK_NAME"] = hook_def.name
        env[f"{constants.ENV_PREFIX}HOOKS_ROOT"] = str(self._hooks_root)
        if extra_env:
            env.update(extra_env)
        return env

    async def run(
        self,
        hook_def: config.HookDefinition,
        context: events.ExecutionContext,
        *,
        timeout_ms: float,
        extra_env: _typing.Mapping[str, str] | None = None,
    ) -> events.HookOutcome:
        """
        Run a handler once, raced against the time budget.

        The race resolves exactly once. If the budget expires first, the
        handler task is cancelled, its process group is killed, and
        anything it produces afterwards is ignored.

        Args:
            hook_def: The hook definition.
            context: The execution context.
            timeout_ms: Time budget in milliseconds.
            extra_env: Additional environment variables for the handler.

        Returns:
            A success, failed or timed_out outcome with the elapsed time.
        """
        env = self.build_env(hook_def, context, extra_env)
        start = _time.monotonic()

        try:
            stdout = await _asyncio.wait_for(
                self._run_handler(hook_def, context, env),
                timeout=timeout_ms / 1000,
            )
        except TimeoutError:
            return events.HookOutcome.timed_out(hook_def.name, _elapsed_ms(start), timeout_ms)
        except HookExecutionError as e:
            return events.HookOutcome.failed(hook_def.name, str(e), duration_ms=_elapsed_ms(start))
        except OSError as e:
            return events.HookOutcome.failed(
                hook_def.name,
                f"Hook '{hook_def.name}' could not be started: {e}",
                duration_ms=_elapsed_ms(start),
            )

        return events.HookOutcome.success(hook_def.name, _elapsed_ms(start), stdout)

    async def _run_handler(
        self,
        hook_def: config.HookDefinition,
        context: events.ExecutionContext,
        env: dict[str, str],
    ) -> str:
        """Spawn the handler, feed it the context and collect its output."""
        process = await self._spawn(hook_def, env)
        try:
            stdout, stderr = await process.communicate(input=context.to_json().encode("utf-8"))
        except _asyncio.CancelledError:
            _kill_process_group(process)
            raise

        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise HookExecutionError(
                f"Hook '{hook_def.name}' failed with code {process.returncode}: {detail}"
            )
        return stdout.decode("utf-8", errors="replace")


def _elapsed_ms(start: float) -> float:
    return (_time.monotonic() - start) * 1000


def _kill_process_group(process: _asyncio.subprocess.Process) -> None:
    """Kill a handler and anything it spawned. The process is not awaited."""
    if process.returncode is not None:
        return
    with _contextlib.suppress(ProcessLookupError, PermissionError):
        if hasattr(_os, "killpg"):
            _os.killpg(process.pid, _signal.SIGKILL)
        else:
            process.kill()
