"""Tests for per-hook execution statistics."""

import logging as _logging
import threading as _threading

import pytest as _pytest

import hookctl.hooks.metrics as metrics


@_pytest.fixture
def tracker() -> metrics.MetricsTracker:
    t = metrics.MetricsTracker(timeout_ms=1000)
    t.initialize("h")
    return t


def _record(t: metrics.MetricsTracker, duration: float, success: bool = True) -> metrics.HookExecutionStats | None:
    return t.record("h", duration, success=success, status="success" if success else "failed")


class TestRecord:
    """Tests for MetricsTracker.record()."""

    def test_fresh_stats_are_zeroed(self, tracker: metrics.MetricsTracker) -> None:
        stats = tracker.snapshot("h")
        assert stats == metrics.HookExecutionStats()
        assert stats is not None and stats.success_rate is None

    def test_average_is_total_over_executions(self, tracker: metrics.MetricsTracker) -> None:
        _record(tracker, 10)
        _record(tracker, 20)
        stats = _record(tracker, 60, success=False)
        assert stats is not None
        assert stats.executions == 3
        assert stats.failures == 1
        assert stats.total_time_ms == 90
        assert stats.avg_time_ms == stats.total_time_ms / stats.executions
        assert stats.min_time_ms == 10
        assert stats.max_time_ms == 60
        assert stats.last_status == "failed"

    def test_unknown_hook_not_recorded(self, tracker: metrics.MetricsTracker) -> None:
        """Hooks removed mid-flight have nothing to record into."""
        assert tracker.record("gone", 5, success=True, status="success") is None
        assert tracker.snapshot("gone") is None

    def test_snapshot_is_a_copy(self, tracker: metrics.MetricsTracker) -> None:
        snapshot = tracker.snapshot("h")
        assert snapshot is not None
        snapshot.executions = 99
        assert tracker.snapshot("h") == metrics.HookExecutionStats()

    def test_concurrent_records_are_not_lost(self, tracker: metrics.MetricsTracker) -> None:
        def worker() -> None:
            for _ in range(200):
                _record(tracker, 1)

        threads = [_threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stats = tracker.snapshot("h")
        assert stats is not None
        assert stats.executions == 1600
        assert stats.total_time_ms == 1600


class TestAutoDisable:
    """Tests for the slow-hook auto-disable rule."""

    def test_needs_more_than_five_executions(self, tracker: metrics.MetricsTracker) -> None:
        for _ in range(5):
            _record(tracker, 900)
        assert not tracker.is_disabled("h")
        _record(tracker, 900)
        assert tracker.is_disabled("h")

    def test_average_must_exceed_threshold(self, tracker: metrics.MetricsTracker) -> None:
        """avg == 0.8 * timeout is not enough."""
        for _ in range(10):
            _record(tracker, 800)
        assert not tracker.is_disabled("h")

    def test_disable_logs_warning(
        self,
        tracker: metrics.MetricsTracker,
        caplog: _pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(_logging.WARNING, logger="hookctl.hooks.metrics"):
            for _ in range(6):
                _record(tracker, 950)
        assert "Disabling slow hook: h" in caplog.text

    def test_only_the_disabling_execution_is_newly_disabled(self, tracker: metrics.MetricsTracker) -> None:
        flags = []
        for _ in range(8):
            stats = _record(tracker, 950)
            assert stats is not None
            flags.append(stats.newly_disabled)
        assert flags == [False] * 5 + [True, False, False]

    def test_concurrent_records_disable_once(self, tracker: metrics.MetricsTracker) -> None:
        results: list[metrics.HookExecutionStats | None] = []

        def worker() -> None:
            for _ in range(20):
                results.append(_record(tracker, 950))

        threads = [_threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(1 for s in results if s is not None and s.newly_disabled) == 1

    def test_quiet_record_disables_without_warning(
        self,
        tracker: metrics.MetricsTracker,
        caplog: _pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(_logging.WARNING, logger="hookctl.hooks.metrics"):
            for _ in range(6):
                tracker.record("h", 950, success=True, status="success", announce=False)
        assert tracker.is_disabled("h")
        assert "Disabling slow hook" not in caplog.text

    def test_disable_is_sticky_until_reset(self, tracker: metrics.MetricsTracker) -> None:
        for _ in range(6):
            _record(tracker, 950)
        for _ in range(50):
            _record(tracker, 1)
        assert tracker.is_disabled("h")

        assert tracker.reset("h")
        assert not tracker.is_disabled("h")
        assert tracker.snapshot("h") == metrics.HookExecutionStats()

    def test_reset_unknown_hook(self, tracker: metrics.MetricsTracker) -> None:
        assert not tracker.reset("missing")

    def test_reset_all(self, tracker: metrics.MetricsTracker) -> None:
        tracker.initialize("other")
        for _ in range(6):
            _record(tracker, 950)
        tracker.reset_all()
        assert not tracker.is_disabled("h")
        assert set(tracker.snapshots()) == {"h", "other"}


class TestRetryCounter:
    """Tests for the per-chain retry counter."""

    def test_begin_chain_resets(self, tracker: metrics.MetricsTracker) -> None:
        tracker.note_retry("h")
        tracker.note_retry("h")
        stats = tracker.snapshot("h")
        assert stats is not None and stats.retries == 2

        tracker.begin_chain("h")
        stats = tracker.snapshot("h")
        assert stats is not None and stats.retries == 0

    def test_retain_only_discards_others(self, tracker: metrics.MetricsTracker) -> None:
        _record(tracker, 5)
        tracker.retain_only(["h", "new"])
        assert set(tracker.snapshots()) == {"h", "new"}
        assert tracker.snapshot("h") == metrics.HookExecutionStats()
