"""
Main CLI entry point for hookctl.

Provides the command-line interface using Click. Every command works on
one hooks root: config/, registry/, profiles/ and logs/ live under it.
"""

import asyncio as _asyncio
import json as _json
import pathlib as _pathlib
import typing as _typing

import click as _click
import pydantic as _pydantic
import yaml as _yaml

import hookctl
import hookctl.config as config
import hookctl.config.sources as config_sources
import hookctl.hooks.config as hooks_config
import hookctl.hooks.events as hooks_events
import hookctl.hooks.manager as hooks_manager
import hookctl.logging as logging
import hookctl.profiles as profiles

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_SAMPLE_REGISTRY = {
    "description": "Hook registry",
    "hooks": {
        "example": {
            "type": "command",
            "command": "echo \"hook ran for $HOOKCTL_ACTOR\"",
            "priority": "normal",
            "description": "Example hook; replace with your own",
        },
    },
}


def _run_async(coro: _typing.Coroutine[_typing.Any, _typing.Any, _typing.Any]) -> _typing.Any:
    """Run an async coroutine synchronously."""
    return _asyncio.run(coro)


def _echo_json(data: _typing.Any) -> None:
    _click.echo(_json.dumps(data, indent=2, default=str))


def _fail(message: str) -> _typing.NoReturn:
    _click.echo(f"Error: {message}", err=True)
    raise SystemExit(1) from None


def _load_manager(ctx: _click.Context, *, restore: bool = True) -> hooks_manager.HookManager:
    """Build a manager for the hooks root, restoring stats from the event log."""
    settings: config.Settings = ctx.obj["settings"]
    try:
        manager = hooks_manager.HookManager.from_settings(settings)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
    log_path = settings.event_log_path
    if restore and log_path is not None:
        manager.restore_stats(log_path)
    return manager


def _persist(settings: config.Settings, updates: dict[str, _typing.Any]) -> None:
    try:
        config_sources.update_config_file(settings.config_path, updates)
    except (config.ConfigFileError, OSError) as e:
        _fail(str(e))


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(hookctl.__version__, "-v", "--version", prog_name="hookctl")
@_click.option(
    "--root",
    "hooks_root",
    type=_click.Path(file_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Hooks root directory (default: $HOOKCTL_HOOKS_ROOT or cwd)",
)
@_click.option(
    "--config",
    "config_file",
    type=_click.Path(dir_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Config file (default: <root>/config/hook-config.yaml)",
)
@_click.option(
    "--log-level",
    type=_click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Override logging.level",
)
@_click.pass_context
def cli(
    ctx: _click.Context,
    hooks_root: _pathlib.Path | None,
    config_file: _pathlib.Path | None,
    log_level: str | None,
) -> None:
    """
    hookctl - hook orchestration engine.

    \b
    Examples:
        hookctl init                                # Create config and registry
        hookctl run md-sync '{"path": "notes.md"}'  # Execute one hook
        hookctl profile minimal                     # Swap the hook set
        hookctl reset md-sync                       # Re-enable an auto-disabled hook
        hookctl report --json                       # Performance report
    """
    try:
        settings = config.Settings.load(hooks_root, config_file=config_file)
    except config.ConfigFileError as e:
        _fail(str(e))
    except _pydantic.ValidationError as e:
        _fail(f"invalid configuration: {e}")

    logging.configure_logging(log_level or settings.logging.level)

    # Store settings in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# Setup
# =============================================================================


@cli.command()
@_click.option("--force", is_flag=True, help="Overwrite existing files")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def init(ctx: _click.Context, force: bool, json_output: bool) -> None:
    """Create the config file, a sample registry and the profiles directory."""
    settings: config.Settings = ctx.obj["settings"]
    root = settings.hooks_root

    config_path = settings.config_path
    registry_path = root / "registry" / hooks_config.REGISTRY_FILENAMES[0]
    created: list[str] = []

    if force or not config_path.exists():
        perf = settings.performance
        data = {
            "enabled": settings.enabled,
            "profile": settings.profile,
            "performance": {
                "timeout": perf.timeout,
                "warningThreshold": perf.warning_threshold,
                "maxRetries": perf.max_retries,
                "backoffUnit": perf.backoff_unit,
            },
            "logging": {
                "level": settings.logging.level,
                "file": settings.logging.file or "hooks.jsonl",
            },
        }
        config_path.parent.mkdir(parents=True, exist_ok=True)
        if config_path.suffix == ".json":
            config_path.write_text(_json.dumps(data, indent=2) + "\n", encoding="utf-8")
        else:
            config_path.write_text(_yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        created.append(str(config_path))

    if force or hooks_config.find_registry_path(root) is None:
        registry_path.parent.mkdir(parents=True, exist_ok=True)
        registry_path.write_text(_yaml.safe_dump(_SAMPLE_REGISTRY, sort_keys=False), encoding="utf-8")
        created.append(str(registry_path))

    for subdir in ("profiles", "logs"):
        path = root / subdir
        if not path.exists():
            path.mkdir(parents=True)
            created.append(str(path))

    if json_output:
        _echo_json({"hooks_root": str(root), "created": created})
    elif created:
        for path_str in created:
            _click.echo(f"Created {path_str}")
    else:
        _click.echo(f"Nothing to do; {root} is already initialized.")


# =============================================================================
# Execution
# =============================================================================


@cli.command()
@_click.argument("hook_name")
@_click.argument("context_json", required=False)
@_click.option("--actor", type=str, default=None, help="Active agent for contexts without one")
@_click.option("--drain", is_flag=True, help="Drain the failure queue once after running")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def run(
    ctx: _click.Context,
    hook_name: str,
    context_json: str | None,
    actor: str | None,
    drain: bool,
    json_output: bool,
) -> None:
    """Execute HOOK_NAME with an optional CONTEXT_JSON object.

    Exits 1 if the hook failed or timed out.
    """
    context_data: dict[str, _typing.Any] = {}
    if context_json:
        try:
            context_data = _json.loads(context_json)
        except _json.JSONDecodeError as e:
            _fail(f"invalid context JSON: {e}")
        if not isinstance(context_data, dict):
            _fail("context JSON must be an object")

    manager = _load_manager(ctx)
    if actor:
        manager.set_active_agent(actor)

    async def _execute() -> tuple[hooks_events.HookOutcome, dict[str, _typing.Any] | None]:
        outcome = await manager.execute(hook_name, hooks_events.ExecutionContext.from_dict(context_data))
        summary = None
        if drain:
            summary = (await manager.drain_failure_queue()).to_dict()
        return outcome, summary

    try:
        outcome, drain_summary = _run_async(_execute())
    finally:
        manager.close()

    if json_output:
        data = outcome.to_dict()
        data["queued"] = len(manager.failure_queue)
        if drain_summary is not None:
            data["drain"] = drain_summary
        _echo_json(data)
    else:
        status = outcome.status.value
        _click.echo(f"{hook_name}: {status}")
        if outcome.result:
            _click.echo(outcome.result.rstrip())
        if outcome.reason:
            _click.echo(f"  Reason: {outcome.reason}")
        if outcome.error:
            _click.echo(f"  Error: {outcome.error}")
        if outcome.status.counts_as_execution:
            _click.echo(f"  Duration: {outcome.duration_ms:.0f}ms ({outcome.attempts} attempt(s))")
        if len(manager.failure_queue):
            _click.echo(f"  Queued for replay: {len(manager.failure_queue)}")

    if outcome.status.is_failure:
        raise SystemExit(1)


# =============================================================================
# Configuration
# =============================================================================


def _set_enabled(ctx: _click.Context, enabled: bool, json_output: bool) -> None:
    settings: config.Settings = ctx.obj["settings"]
    _persist(settings, {"enabled": enabled})
    if json_output:
        _echo_json({"enabled": enabled, "config": str(settings.config_path)})
    else:
        _click.echo(f"Hooks {'enabled' if enabled else 'disabled'} ({settings.config_path})")


@cli.command()
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def enable(ctx: _click.Context, json_output: bool) -> None:
    """Enable all hooks."""
    _set_enabled(ctx, True, json_output)


@cli.command()
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def disable(ctx: _click.Context, json_output: bool) -> None:
    """Disable all hooks; executions return 'disabled'."""
    _set_enabled(ctx, False, json_output)


@cli.command()
@_click.argument("profile_name", required=False)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def profile(ctx: _click.Context, profile_name: str | None, json_output: bool) -> None:
    """Switch to PROFILE_NAME, or show the active profile.

    The profile must exist as profiles/profile-<name>.yaml|.yml|.json.
    """
    settings: config.Settings = ctx.obj["settings"]
    manager = profiles.ProfileManager(settings.profiles_dir)

    if profile_name is None:
        available = manager.list_profile_names()
        if json_output:
            _echo_json({"active": settings.profile, "available": available})
        else:
            _click.echo(f"Active profile: {settings.profile}")
            _click.echo(f"Available: {', '.join(available) if available else '(none)'}")
        return

    try:
        selected = manager.require_profile(profile_name)
    except profiles.UnknownProfileError as e:
        _fail(str(e))
    except ValueError as e:
        _fail(f"invalid profile {profile_name!r}: {e}")

    # Loading a profile starts every hook with fresh stats
    hook_manager = _load_manager(ctx, restore=False)
    try:
        hook_manager.set_profile(profile_name)
    finally:
        hook_manager.close()
    _persist(settings, {"profile": profile_name})
    if json_output:
        _echo_json({"active": profile_name, "hooks": selected.hook_names})
    else:
        _click.echo(f"Profile set to: {profile_name} ({len(selected.hooks)} hooks)")


# =============================================================================
# Inspection
# =============================================================================


@cli.command(name="list")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def list_cmd(ctx: _click.Context, json_output: bool) -> None:
    """List registered hooks."""
    manager = _load_manager(ctx)
    manager.close()

    hooks_data: list[dict[str, _typing.Any]] = []
    for definition in manager.registry.definitions():
        stats = manager.get_stats(definition.name)
        hooks_data.append({
            "name": definition.name,
            "type": definition.type,
            "priority": definition.priority,
            "category": definition.category,
            "disabled": bool(stats and stats.disabled),
        })

    if json_output:
        _echo_json({"enabled": manager.config.enabled, "hooks": hooks_data})
        return

    _click.echo(f"Hooks: {'enabled' if manager.config.enabled else 'DISABLED'}")
    if not hooks_data:
        _click.echo("No hooks registered.")
        return

    _click.echo(f"{'Name':<30} {'Type':<8} {'Priority':<10} {'Status':<10}")
    _click.echo("-" * 60)
    for h in hooks_data:
        status = "disabled" if h["disabled"] else "active"
        _click.echo(f"{h['name']:<30} {h['type']:<8} {h['priority']:<10} {status:<10}")


@cli.command()
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def report(ctx: _click.Context, json_output: bool) -> None:
    """Show the performance report for registered hooks."""
    manager = _load_manager(ctx)
    manager.close()
    perf = manager.get_performance_report()

    if json_output:
        _echo_json(perf.to_dict())
        return

    summary = perf.summary
    _click.echo("Summary:")
    _click.echo(f"  Hooks: {summary.total_hooks}")
    _click.echo(f"  Executions: {summary.total_executions}")
    _click.echo(f"  Failures: {summary.total_failures}")
    _click.echo(f"  Average time: {summary.avg_execution_time_ms}ms")

    if perf.hooks:
        _click.echo()
        _click.echo(f"{'Name':<30} {'Runs':>6} {'Fails':>6} {'Avg ms':>10} {'Success':>9}")
        _click.echo("-" * 65)
        for name, h in perf.hooks.items():
            marker = " (auto-disabled)" if h.disabled else ""
            _click.echo(
                f"{name:<30} {h.executions:>6} {h.failures:>6} {h.avg_time_ms:>10} "
                f"{h.success_rate:>9}{marker}"
            )

    if perf.recommendations:
        _click.echo()
        _click.echo("Recommendations:")
        for rec in perf.recommendations:
            _click.echo(f"  - {rec}")


@cli.command()
@_click.argument("hook_name", required=False)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def reset(ctx: _click.Context, hook_name: str | None, json_output: bool) -> None:
    """Clear stats for HOOK_NAME (or every hook), re-enabling auto-disabled hooks."""
    manager = _load_manager(ctx)
    try:
        found = manager.reset_stats(hook_name)
    finally:
        manager.close()
    if not found:
        _fail(f"unknown hook: {hook_name}")

    if json_output:
        _echo_json({"reset": hook_name or "all", "hooks": [hook_name] if hook_name else manager.list_hooks()})
    else:
        _click.echo(f"Stats reset for {hook_name or 'all hooks'}")


@cli.command()
@_click.argument("files", nargs=-1, type=_click.Path(path_type=_pathlib.Path))
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def validate(
    ctx: _click.Context,
    files: tuple[_pathlib.Path, ...],
    json_output: bool,
) -> None:
    """Validate registry and profile files.

    If no FILES are given, validates the registry and every profile under
    the hooks root.
    """
    settings: config.Settings = ctx.obj["settings"]

    paths = list(files)
    if not paths:
        registry_path = hooks_config.find_registry_path(settings.hooks_root)
        paths.append(registry_path or settings.registry_dir / hooks_config.REGISTRY_FILENAMES[0])
        if settings.profiles_dir.is_dir():
            paths.extend(
                sorted(
                    p
                    for p in settings.profiles_dir.iterdir()
                    if p.stem.startswith("profile-") and p.suffix in profiles.manager.PROFILE_SUFFIXES
                )
            )

    results: list[dict[str, _typing.Any]] = []
    for path in paths:
        result: dict[str, _typing.Any] = {
            "path": str(path),
            "exists": path.exists(),
            "valid": False,
            "error": None,
            "hooks_count": 0,
        }
        if path.exists():
            try:
                hooks_file = hooks_config.load_hooks_file(path)
                result["valid"] = True
                result["hooks_count"] = len(hooks_file.hooks)
            except ValueError as e:
                result["error"] = str(e)
        results.append(result)

    if json_output:
        _echo_json({"results": results})
    else:
        for r in results:
            _click.echo(f"File: {r['path']}")
            if not r["exists"]:
                _click.echo("  Status: not found")
            elif r["valid"]:
                _click.echo(f"  Status: ✓ valid ({r['hooks_count']} hooks)")
            else:
                _click.echo("  Status: ✗ invalid")
                _click.echo(f"  Error: {r['error']}")

    if any(r["exists"] and not r["valid"] for r in results):
        raise SystemExit(1)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="hookctl")


if __name__ == "__main__":
    main()
