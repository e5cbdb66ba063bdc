"""
Shared pytest fixtures for hookctl tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import click.testing as _click_testing
import pytest as _pytest
import yaml as _yaml

import hookctl.hooks.config as hooks_config
import hookctl.hooks.manager as manager

# Fast settings for tests that exercise retries and timeouts
FAST_CONFIG = manager.GlobalConfig(
    timeout_ms=2000,
    warning_threshold_ms=1000,
    max_retries=3,
    backoff_unit_ms=1,
)


# =============================================================================
# Environment Isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def isolated_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Remove HOOKCTL_* variables so tests never see the user's settings."""
    for key in list(_os.environ):
        if key.startswith("HOOKCTL_"):
            monkeypatch.delenv(key, raising=False)


@_pytest.fixture(autouse=True)
def restore_root_logger() -> _typing.Iterator[None]:
    """Undo configure_logging() calls made by the CLI or by tests."""
    root = _logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# =============================================================================
# Hooks Root Fixtures
# =============================================================================


def write_yaml(path: _pathlib.Path, data: _typing.Any) -> _pathlib.Path:
    """Write data as YAML, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@_pytest.fixture
def hooks_root(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """Hooks root with a registry, a profile and a config file."""
    root = tmp_path / "hooks"
    write_yaml(
        root / "registry" / "hook-registry.yaml",
        {
            "hooks": {
                "md-sync": {
                    "command": "echo synced $HOOKCTL_PATH",
                    "conditions": {"if_file_matches": r"\.md$"},
                },
                "always-fails": {
                    "command": "echo broken >&2; exit 3",
                },
            },
        },
    )
    write_yaml(
        root / "profiles" / "profile-minimal.yaml",
        {
            "description": "Just the essentials",
            "hooks": {"hello": {"command": "echo hello"}},
        },
    )
    write_yaml(
        root / "config" / "hook-config.yaml",
        {
            "enabled": True,
            "profile": "standard",
            "performance": {"timeout": 2000, "warningThreshold": 1000, "maxRetries": 3, "backoffUnit": 1},
            "logging": {"level": "warning", "file": "hooks.jsonl"},
        },
    )
    return root


@_pytest.fixture
def fast_manager(tmp_path: _pathlib.Path) -> manager.HookManager:
    """Empty manager with millisecond backoff, rooted at tmp_path."""
    return manager.HookManager(FAST_CONFIG, hooks_root=tmp_path)


@_pytest.fixture
def make_hook() -> _typing.Callable[..., hooks_config.HookDefinition]:
    """Factory for command hook definitions."""

    def _create(name: str, command: str = "exit 0", **kwargs: _typing.Any) -> hooks_config.HookDefinition:
        return hooks_config.HookDefinition(name=name, type="command", command=command, **kwargs)

    return _create


# =============================================================================
# CLI Test Fixtures
# =============================================================================


@_pytest.fixture
def cli_runner() -> _click_testing.CliRunner:
    """CLI runner for end-to-end tests."""
    return _click_testing.CliRunner()
