"""Tests for the JSONL hook event log."""

import json as _json
import logging as _logging
import pathlib as _pathlib

import pytest as _pytest

import hookctl.hooks.events as events
import hookctl.logging as hook_logging


class TestHookEventLog:
    """Tests for HookEventLog."""

    def test_disabled_without_file(self) -> None:
        log = hook_logging.HookEventLog()
        assert not log.enabled
        log.log_outcome(events.HookOutcome.success("h", 1.0, ""))
        log.close()

    def test_writes_one_json_object_per_line(self, tmp_path: _pathlib.Path) -> None:
        log_file = tmp_path / "logs" / "hooks.jsonl"
        with hook_logging.HookEventLog(log_file=log_file) as log:
            log.log_start("h", events.ExecutionContext(actor="coder"))
            log.log_outcome(events.HookOutcome.success("h", 1.0, "ok"))
            log.log_retry("h", 1, 2.0)
            log.log_config_change(enabled=False)

        lines = log_file.read_text().splitlines()
        records = [_json.loads(line) for line in lines]
        assert [r["event_type"] for r in records] == ["hook_start", "hook_outcome", "hook_retry", "config_change"]
        assert [r["event_number"] for r in records] == [1, 2, 3, 4]
        assert records[0]["context"]["actor"] == "coder"
        assert records[1]["status"] == "success"
        assert records[2]["delay_s"] == 2.0
        assert records[3]["enabled"] is False
        assert all("timestamp" in r for r in records)

    def test_appends_across_instances(self, tmp_path: _pathlib.Path) -> None:
        log_file = tmp_path / "hooks.jsonl"
        for _ in range(2):
            with hook_logging.HookEventLog(log_file=log_file) as log:
                log.log_queued("h", events.ExecutionContext())
        assert len(log_file.read_text().splitlines()) == 2


class TestReadEvents:
    """Tests for read_events()."""

    def test_missing_file(self, tmp_path: _pathlib.Path) -> None:
        assert list(hook_logging.read_events(tmp_path / "nope.jsonl")) == []

    def test_filters_and_skips_bad_lines(self, tmp_path: _pathlib.Path) -> None:
        log_file = tmp_path / "hooks.jsonl"
        log_file.write_text(
            '{"event_type": "hook_attempt", "hook": "a"}\n'
            "\n"
            "not json\n"
            "[1, 2]\n"
            '{"event_type": "hook_outcome", "hook": "a"}\n'
            '{"event_type": "hook_attempt", "hook": "b"'
        )
        hooks = [e["hook"] for e in hook_logging.read_events(log_file, event_type="hook_attempt")]
        assert hooks == ["a"]


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_sets_root_level(self) -> None:
        hook_logging.configure_logging("debug")
        assert _logging.getLogger().level == _logging.DEBUG
        hook_logging.configure_logging("warning")
        assert _logging.getLogger().level == _logging.WARNING

    def test_unknown_level(self) -> None:
        with _pytest.raises(ValueError, match="Unknown log level"):
            hook_logging.configure_logging("loud")
