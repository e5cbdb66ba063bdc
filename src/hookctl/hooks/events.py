"""
Execution context and outcome dataclasses.

These define the core data structures passed through the hook engine:
- ExecutionContext: Input to one execution attempt (actor, path, phase, payload)
- OutcomeStatus: How an execution call ended
- ErrorKind: Why a failed outcome failed
- HookOutcome: What the engine returns to the caller
"""

from __future__ import annotations

import copy as _copy
import dataclasses as _dataclasses
import enum as _enum
import json as _json
import typing as _typing

import hookctl.constants as constants


@_dataclasses.dataclass(frozen=True)
class ExecutionContext:
    """
    Context for one hook execution attempt.

    Every field is optional. Conditions that reference a missing field
    do not match.

    Attributes:
        actor: Identifier of the agent (or user) that triggered the event
        path: Path-like field the event refers to (e.g. an edited file)
        phase: Workflow phase the event happened in
        payload: Arbitrary event data passed through to the handler
    """

    actor: str | None = None
    path: str | None = None
    phase: str | None = None
    payload: _typing.Mapping[str, _typing.Any] = _dataclasses.field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: _typing.Mapping[str, _typing.Any]) -> ExecutionContext:
        """
        Build a context from a plain mapping.

        Known keys (``actor``, ``path``, ``phase``) become fields, with the
        legacy spellings ``activeAgent``, ``filePath`` and ``sprintPhase``
        accepted as well. ``payload`` is taken as-is if present; any other
        keys are folded into the payload.
        """
        data = dict(data)
        actor = data.pop("actor", None) or data.pop("activeAgent", None)
        path = data.pop("path", None) or data.pop("filePath", None)
        phase = data.pop("phase", None) or data.pop("sprintPhase", None)
        payload = dict(data.pop("payload", None) or {})
        payload.update(data)
        return cls(actor=actor, path=path, phase=phase, payload=payload)

    def with_actor(self, actor: str | None) -> ExecutionContext:
        """Return a copy with the actor replaced."""
        return _dataclasses.replace(self, actor=actor)

    def snapshot(self) -> ExecutionContext:
        """Return a deep copy that shares no mutable state with this context."""
        return _dataclasses.replace(self, payload=_copy.deepcopy(dict(self.payload)))

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict for handlers."""
        result: dict[str, _typing.Any] = {}
        if self.actor is not None:
            result["actor"] = self.actor
        if self.path is not None:
            result["path"] = self.path
        if self.phase is not None:
            result["phase"] = self.phase
        result["payload"] = dict(self.payload)
        return result

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return _json.dumps(self.to_dict(), default=str)

    def to_env_vars(self) -> dict[str, str]:
        """
        Convert to environment variables for handler processes.

        Returns a dict of HOOKCTL_* environment variables.
        """
        prefix = constants.ENV_PREFIX
        return {
            f"{prefix}CONTEXT": self.to_json(),
            f"{prefix}ACTOR": self.actor or "",
            f"{prefix}PATH": self.path or "",
            f"{prefix}PHASE": self.phase or "",
        }


class OutcomeStatus(_enum.Enum):
    """How a call to the engine ended."""

    SUCCESS = "success"
    """Handler exited 0."""

    SKIPPED = "skipped"
    """Hook did not run (conditions not met, or auto-disabled)."""

    FAILED = "failed"
    """Handler failed, or the hook is unknown."""

    DISABLED = "disabled"
    """Hooks are globally disabled."""

    TIMED_OUT = "timed_out"
    """Handler did not finish within the time budget."""

    @property
    def counts_as_execution(self) -> bool:
        """Whether this status is recorded in the execution stats."""
        return self in {
            OutcomeStatus.SUCCESS,
            OutcomeStatus.FAILED,
            OutcomeStatus.TIMED_OUT,
        }

    @property
    def is_failure(self) -> bool:
        """Whether the failure policy applies to this status."""
        return self in {OutcomeStatus.FAILED, OutcomeStatus.TIMED_OUT}


class ErrorKind(_enum.Enum):
    """Classification of failed outcomes."""

    UNKNOWN_HOOK = "unknown_hook"
    HANDLER_FAILURE = "handler_failure"
    TIMEOUT = "timeout"


SKIP_CONDITIONS_NOT_MET = "conditions not met"
SKIP_AUTO_DISABLED = "auto-disabled"


@_dataclasses.dataclass
class HookOutcome:
    """
    Outcome of an execution call.

    Attributes:
        status: How the call ended
        hook_name: Name of the hook that was requested
        duration_ms: Time spent in the handler (last attempt)
        result: Captured stdout (success only)
        error: Error detail (failures only)
        reason: Why the hook was skipped
        error_kind: Classification of a failure
        attempts: Number of handler invocations made by this call
    """

    status: OutcomeStatus
    hook_name: str
    duration_ms: float = 0.0
    result: str | None = None
    error: str | None = None
    reason: str | None = None
    error_kind: ErrorKind | None = None
    attempts: int = 0

    @classmethod
    def success(cls, hook_name: str, duration_ms: float, result: str) -> HookOutcome:
        """Create a success outcome."""
        return cls(
            status=OutcomeStatus.SUCCESS,
            hook_name=hook_name,
            duration_ms=duration_ms,
            result=result,
            attempts=1,
        )

    @classmethod
    def skipped(cls, hook_name: str, reason: str) -> HookOutcome:
        """Create a skipped outcome."""
        return cls(status=OutcomeStatus.SKIPPED, hook_name=hook_name, reason=reason)

    @classmethod
    def failed(
        cls,
        hook_name: str,
        error: str,
        *,
        duration_ms: float = 0.0,
        error_kind: ErrorKind = ErrorKind.HANDLER_FAILURE,
    ) -> HookOutcome:
        """Create a failed outcome."""
        return cls(
            status=OutcomeStatus.FAILED,
            hook_name=hook_name,
            duration_ms=duration_ms,
            error=error,
            error_kind=error_kind,
            attempts=0 if error_kind == ErrorKind.UNKNOWN_HOOK else 1,
        )

    @classmethod
    def disabled(cls, hook_name: str) -> HookOutcome:
        """Create a globally-disabled outcome."""
        return cls(status=OutcomeStatus.DISABLED, hook_name=hook_name)

    @classmethod
    def timed_out(cls, hook_name: str, duration_ms: float, timeout_ms: float) -> HookOutcome:
        """Create a timeout outcome."""
        return cls(
            status=OutcomeStatus.TIMED_OUT,
            hook_name=hook_name,
            duration_ms=duration_ms,
            error=f"Hook timeout after {timeout_ms:g}ms",
            error_kind=ErrorKind.TIMEOUT,
            attempts=1,
        )

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict."""
        result: dict[str, _typing.Any] = {
            "status": self.status.value,
            "hook": self.hook_name,
        }
        if self.status.counts_as_execution:
            result["duration_ms"] = round(self.duration_ms, 2)
            result["attempts"] = self.attempts
        if self.result is not None:
            result["result"] = self.result
        if self.error is not None:
            result["error"] = self.error
        if self.error_kind is not None:
            result["error_kind"] = self.error_kind.value
        if self.reason is not None:
            result["reason"] = self.reason
        return result
