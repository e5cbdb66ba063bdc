"""
Structured hook event log for hookctl.

Appends one JSON object per line for every hook lifecycle event so that
each outcome, including silent skips, can be audited after the fact.
"""

import datetime as _datetime
import json as _json
import pathlib as _pathlib
import typing as _typing

if _typing.TYPE_CHECKING:
    import hookctl.hooks.events as events


class HookEventLog:
    """
    Appends hook lifecycle events to a JSONL file.

    Each line in the file is a JSON object:
    - hook_start: A handler is about to run
    - hook_attempt: One handler run finished (success, failure, timeout)
    - hook_outcome: An execution call finished (any status)
    - hook_retry: A critical hook is about to be retried
    - hook_queued: A critical hook was handed to the failure queue
    - hook_dropped: A queued hook ran out of replays
    - hook_disabled: A hook was auto-disabled for chronic slowness
    - config_change: Global switch or profile changed
    - stats_reset: Stats were cleared for one hook or all hooks
    - profile_loaded: The hook set was replaced by a profile

    Usage:
        log = HookEventLog(log_file="logs/hooks.jsonl")
        log.log_start("md-sync", context)
        log.log_outcome(outcome)
        log.close()
    """

    def __init__(
        self,
        *,
        log_file: _pathlib.Path | str | None = None,
        enabled: bool = True,
    ) -> None:
        """
        Initialize the event log.

        Args:
            log_file: File to append to. None disables the log.
            enabled: Whether logging is enabled.
        """
        self._enabled = enabled and log_file is not None
        self._file: _typing.TextIO | None = None
        self._file_path: _pathlib.Path | None = None
        self._event_count = 0

        if not self._enabled:
            return

        self._file_path = _pathlib.Path(_typing.cast(str, log_file))
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        # Held as instance state, closed in close()
        self._file = open(self._file_path, "a", encoding="utf-8")  # noqa: SIM115

    @property
    def file_path(self) -> _pathlib.Path | None:
        return self._file_path

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _write_event(
        self,
        event_type: str,
        data: dict[str, _typing.Any],
    ) -> None:
        """Write an event to the log file."""
        if not self._enabled or not self._file:
            return

        self._event_count += 1
        event = {
            "timestamp": _datetime.datetime.now(_datetime.timezone.utc).isoformat(),
            "event_number": self._event_count,
            "event_type": event_type,
            **data,
        }

        try:
            self._file.write(_json.dumps(event, default=str) + "\n")
            self._file.flush()
        except OSError:
            # Audit trail must not break hook execution
            pass

    def log_start(self, hook_name: str, context: "events.ExecutionContext") -> None:
        self._write_event("hook_start", {"hook": hook_name, "context": context.to_dict()})

    def log_attempt(self, outcome: "events.HookOutcome") -> None:
        self._write_event("hook_attempt", outcome.to_dict())

    def log_outcome(self, outcome: "events.HookOutcome") -> None:
        self._write_event("hook_outcome", outcome.to_dict())

    def log_retry(self, hook_name: str, attempt: int, delay_s: float) -> None:
        self._write_event(
            "hook_retry",
            {"hook": hook_name, "attempt": attempt, "delay_s": delay_s},
        )

    def log_queued(self, hook_name: str, context: "events.ExecutionContext") -> None:
        self._write_event("hook_queued", {"hook": hook_name, "context": context.to_dict()})

    def log_dropped(self, hook_name: str, retries: int, error: str | None) -> None:
        self._write_event(
            "hook_dropped",
            {"hook": hook_name, "retries": retries, "error": error},
        )

    def log_disabled(self, hook_name: str, avg_time_ms: float, executions: int) -> None:
        self._write_event(
            "hook_disabled",
            {"hook": hook_name, "avg_time_ms": round(avg_time_ms, 2), "executions": executions},
        )

    def log_config_change(self, **changes: _typing.Any) -> None:
        self._write_event("config_change", changes)

    def log_stats_reset(self, hook_name: str | None = None) -> None:
        """Mark a stats reset; hook None means every hook."""
        self._write_event("stats_reset", {"hook": hook_name})

    def log_profile_loaded(self, profile_name: str, hook_names: list[str]) -> None:
        self._write_event("profile_loaded", {"profile": profile_name, "hooks": hook_names})

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None

    def __enter__(self) -> "HookEventLog":
        return self

    def __exit__(self, *args: _typing.Any) -> None:
        self.close()


def read_events(
    log_file: _pathlib.Path,
    *,
    event_type: str | None = None,
) -> _typing.Iterator[dict[str, _typing.Any]]:
    """
    Iterate over the events in a JSONL event log.

    Lines that are not valid JSON objects (e.g. a partially written last
    line) are skipped.

    Args:
        log_file: The log to read. A missing file yields nothing.
        event_type: Only yield events of this type.
    """
    if not log_file.exists():
        return
    with open(log_file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                event = _json.loads(line)
            except _json.JSONDecodeError:
                continue
            if not isinstance(event, dict):
                continue
            if event_type is None or event.get("event_type") == event_type:
                yield event
