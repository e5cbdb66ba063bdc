"""
Failure queue - deferred replay of critical hooks that exhausted retries.

Entries are only replayed by an explicit drain (typically a periodic
worker), never by the execution path that queued them.
"""

from __future__ import annotations

import asyncio as _asyncio
import dataclasses as _dataclasses
import datetime as _datetime
import logging as _logging
import typing as _typing

import hookctl.hooks.events as events

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass
class FailureQueueEntry:
    """
    A hook-context pair waiting for replay.

    Attributes:
        hook_name: The hook to replay
        context: Snapshot of the context that failed
        enqueued_at: When the entry was first queued
        retries: Replays already spent from the queue's own budget
    """

    hook_name: str
    context: events.ExecutionContext
    enqueued_at: _datetime.datetime = _dataclasses.field(
        default_factory=lambda: _datetime.datetime.now(_datetime.timezone.utc)
    )
    retries: int = 0

    def to_dict(self) -> dict[str, _typing.Any]:
        return {
            "hook": self.hook_name,
            "context": self.context.to_dict(),
            "enqueued_at": self.enqueued_at.isoformat(),
            "retries": self.retries,
        }


@_dataclasses.dataclass
class DrainSummary:
    """Counts from one drain pass."""

    succeeded: int = 0
    requeued: int = 0
    dropped: int = 0
    discarded: int = 0
    skipped_reentrant: bool = False

    def to_dict(self) -> dict[str, _typing.Any]:
        return _dataclasses.asdict(self)


Attempt = _typing.Callable[[str, events.ExecutionContext], _typing.Awaitable[events.HookOutcome]]
"""Runs one execution attempt for a queued hook-context pair."""


class FailureQueue:
    """
    In-process queue of failed critical hooks.

    drain() is not re-entrant: a drain started while another is running
    returns immediately without touching the entries.
    """

    def __init__(self, max_retries: int) -> None:
        """
        Initialize the queue.

        Args:
            max_retries: Replays allowed per entry before it is dropped.
        """
        self.max_retries = max_retries
        self._entries: list[FailureQueueEntry] = []
        self._drain_lock = _asyncio.Lock()

    def enqueue(self, entry: FailureQueueEntry) -> None:
        self._entries.append(entry)
        _logger.info("Queued failed hook: %s", entry.hook_name)

    def entries(self) -> list[FailureQueueEntry]:
        """Get a copy of the current entries."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def is_draining(self) -> bool:
        return self._drain_lock.locked()

    async def drain(
        self,
        attempt: Attempt,
        *,
        on_drop: _typing.Callable[[FailureQueueEntry, events.HookOutcome], None] | None = None,
    ) -> DrainSummary:
        """
        Replay every queued entry once.

        The current entries are snapshotted and the live queue cleared
        before replay, so entries queued during the drain wait for the
        next pass.

        - Success: the entry is discarded.
        - Unknown hook (removed since it was queued): dropped.
        - Failed / timed out: re-queued with retries + 1 while
          retries < max_retries, otherwise dropped.
        - Globally disabled: re-queued unchanged.
        - Skipped: discarded (the hook no longer applies).

        Args:
            attempt: Coroutine function running one attempt.
            on_drop: Called for each entry that is given up on.

        Returns:
            Counts for this pass.
        """
        if self._drain_lock.locked():
            _logger.debug("Failure queue drain already in progress; skipping")
            return DrainSummary(skipped_reentrant=True)

        async with self._drain_lock:
            pending = list(self._entries)
            self._entries = []
            summary = DrainSummary()

            for entry in pending:
                outcome = await attempt(entry.hook_name, entry.context)
                status = outcome.status

                if status == events.OutcomeStatus.SUCCESS:
                    summary.succeeded += 1
                elif outcome.error_kind == events.ErrorKind.UNKNOWN_HOOK:
                    _logger.error("Dropping queued hook that is no longer registered: %s", entry.hook_name)
                    summary.dropped += 1
                    if on_drop is not None:
                        on_drop(entry, outcome)
                elif status.is_failure:
                    if entry.retries < self.max_retries:
                        entry.retries += 1
                        self._entries.append(entry)
                        summary.requeued += 1
                    else:
                        _logger.error(
                            "Giving up on hook after max retries: %s",
                            entry.hook_name,
                        )
                        summary.dropped += 1
                        if on_drop is not None:
                            on_drop(entry, outcome)
                elif status == events.OutcomeStatus.DISABLED:
                    self._entries.append(entry)
                    summary.requeued += 1
                else:
                    _logger.info(
                        "Discarding queued hook %s: %s",
                        entry.hook_name,
                        outcome.reason,
                    )
                    summary.discarded += 1

            return summary
