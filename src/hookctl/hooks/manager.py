"""
Hook manager - central coordinator for hook execution.

The HookManager owns the registry, metrics, failure policy and failure
queue, and runs each execution call through them:

    global switch -> lookup -> auto-disable check -> conditions
        -> handler (timeout race) -> metrics -> failure policy
"""

from __future__ import annotations

import asyncio as _asyncio
import dataclasses as _dataclasses
import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import hookctl.constants as constants
import hookctl.hooks.config as config
import hookctl.hooks.events as events
import hookctl.hooks.matching as matching
import hookctl.hooks.metrics as metrics
import hookctl.hooks.policy as policy
import hookctl.hooks.queue as queue
import hookctl.hooks.registry as registry
import hookctl.hooks.report as report
import hookctl.logging as hook_logging
import hookctl.profiles as profiles

if _typing.TYPE_CHECKING:
    import hookctl.config as settings_module
    import hookctl.hooks.executors.base as executors_base

_logger = _logging.getLogger(__name__)

Sleep = _typing.Callable[[float], _typing.Awaitable[None]]


@_dataclasses.dataclass(frozen=True)
class GlobalConfig:
    """
    Process-wide execution settings.

    Replaced as a whole by reconfigure(), set_enabled() and set_profile();
    an execution reads it once per attempt.
    """

    enabled: bool = True
    active_profile: str = constants.DEFAULT_PROFILE
    timeout_ms: float = constants.DEFAULT_TIMEOUT_MS
    warning_threshold_ms: float = constants.DEFAULT_WARNING_THRESHOLD_MS
    max_retries: int = constants.DEFAULT_MAX_RETRIES
    backoff_unit_ms: float = constants.DEFAULT_BACKOFF_UNIT_MS

    @classmethod
    def from_settings(cls, settings: settings_module.Settings) -> GlobalConfig:
        perf = settings.performance
        return cls(
            enabled=settings.enabled,
            active_profile=settings.profile,
            timeout_ms=perf.timeout,
            warning_threshold_ms=perf.warning_threshold,
            max_retries=perf.max_retries,
            backoff_unit_ms=perf.backoff_unit,
        )


class HookManager:
    """
    Central manager for hook execution.

    Critical hooks that fail are retried in an explicit loop with
    exponential backoff; once the retry budget is spent the hook-context
    pair goes to the failure queue and the caller gets the failure.
    Retries of one call are strictly sequential; calls for other hooks
    proceed concurrently.
    """

    def __init__(
        self,
        global_config: GlobalConfig | None = None,
        *,
        hooks_root: _pathlib.Path | None = None,
        profile_manager: profiles.ProfileManager | None = None,
        event_log: hook_logging.HookEventLog | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        """
        Initialize the hook manager.

        Args:
            global_config: Execution settings. Defaults to GlobalConfig().
            hooks_root: Directory handlers run in and scripts resolve against.
            profile_manager: Source of profiles for set_profile().
            event_log: JSONL audit log. Defaults to a disabled log.
            sleep: Backoff sleep, replaceable for tests.
        """
        self._config = global_config or GlobalConfig()
        self._hooks_root = hooks_root or _pathlib.Path.cwd()
        self._tracker = metrics.MetricsTracker(self._config.timeout_ms)
        self._registry = registry.HookRegistry(self._tracker)
        self._policy = policy.FailurePolicy(self._config.max_retries, self._config.backoff_unit_ms)
        self._queue = queue.FailureQueue(self._config.max_retries)
        self._profiles = profile_manager or profiles.ProfileManager(self._hooks_root / "profiles")
        self._event_log = event_log or hook_logging.HookEventLog(enabled=False)
        self._sleep: Sleep = sleep or _asyncio.sleep
        self._executors: dict[str, executors_base.HookExecutor] = {}
        self._active_agent: str | None = None
        self._workflow_state: dict[str, _typing.Any] | None = None

    @classmethod
    def from_settings(
        cls,
        settings: settings_module.Settings,
        *,
        load_registry: bool = True,
    ) -> HookManager:
        """
        Create a HookManager from loaded settings.

        Registers every hook in registry/hook-registry.* when present. If
        the configured profile has a profile file, its hooks replace the
        registry's.

        Args:
            settings: Loaded settings.
            load_registry: Whether to register the hooks root's registry.

        Returns:
            Configured HookManager.
        """
        event_log_path = settings.event_log_path
        mgr = cls(
            GlobalConfig.from_settings(settings),
            hooks_root=settings.hooks_root,
            profile_manager=profiles.ProfileManager(settings.profiles_dir),
            event_log=hook_logging.HookEventLog(log_file=event_log_path),
        )
        if load_registry:
            registry_path = config.find_registry_path(settings.hooks_root)
            if registry_path is not None:
                mgr.initialize_from_registry(registry_path)
            else:
                _logger.debug("No hook registry under %s", settings.hooks_root)
            active = mgr.profiles.get_profile(settings.profile)
            if active is not None:
                mgr.registry.replace_all(active.hooks)
        return mgr

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def config(self) -> GlobalConfig:
        return self._config

    @property
    def registry(self) -> registry.HookRegistry:
        return self._registry

    @property
    def metrics(self) -> metrics.MetricsTracker:
        return self._tracker

    @property
    def failure_queue(self) -> queue.FailureQueue:
        return self._queue

    @property
    def profiles(self) -> profiles.ProfileManager:
        return self._profiles

    # =========================================================================
    # Registration
    # =========================================================================

    def initialize_from_registry(self, path: _pathlib.Path) -> int:
        """
        Register every hook in a registry file.

        Returns:
            Number of hooks registered.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the file is invalid.
        """
        hooks_file = config.load_hooks_file(path)
        for definition in hooks_file.definitions():
            self._registry.register(definition)
        _logger.debug("Initialized %d hooks from %s", len(hooks_file.hooks), path)
        return len(hooks_file.hooks)

    def register(self, definition: config.HookDefinition) -> None:
        """Register (or replace) a hook with fresh stats."""
        self._registry.register(definition)

    def list_hooks(self) -> list[str]:
        """List registered hook names."""
        return self._registry.list_names()

    # =========================================================================
    # Execution
    # =========================================================================

    async def execute(
        self,
        hook_name: str,
        context: events.ExecutionContext | None = None,
    ) -> events.HookOutcome:
        """
        Execute a hook with full error handling and monitoring.

        Args:
            hook_name: Registered hook name.
            context: Execution context. Defaults to an empty context.

        Returns:
            The outcome of the call. For critical hooks this is the
            outcome of the last attempt; ``attempts`` counts them all.
        """
        context = self._prepare_context(context)
        self._tracker.begin_chain(hook_name)

        retries = 0
        attempts = 0
        while True:
            outcome = await self._attempt(hook_name, context)
            attempts += outcome.attempts

            if not outcome.status.is_failure or outcome.error_kind == events.ErrorKind.UNKNOWN_HOOK:
                break

            definition = self._registry.get(hook_name)
            if definition is None:
                break

            action = self._policy.decide(definition, retries)
            if action == policy.FailureAction.REPORT:
                break

            if action == policy.FailureAction.QUEUE:
                self._queue.enqueue(queue.FailureQueueEntry(hook_name, context.snapshot()))
                self._event_log.log_queued(hook_name, context)
                break

            retries += 1
            self._tracker.note_retry(hook_name)
            delay = self._policy.backoff_seconds(retries)
            _logger.info("Retrying critical hook: %s (attempt %d)", hook_name, retries)
            self._event_log.log_retry(hook_name, retries, delay)
            await self._sleep(delay)

        outcome.attempts = attempts
        self._event_log.log_outcome(outcome)
        return outcome

    async def _attempt(
        self,
        hook_name: str,
        context: events.ExecutionContext,
    ) -> events.HookOutcome:
        """Run one gated, timed and recorded attempt."""
        cfg = self._config
        if not cfg.enabled:
            _logger.debug("Hooks disabled; not running %s", hook_name)
            return events.HookOutcome.disabled(hook_name)

        definition = self._registry.get(hook_name)
        if definition is None:
            _logger.error("Unknown hook: %s", hook_name)
            return events.HookOutcome.failed(
                hook_name,
                "Unknown hook",
                error_kind=events.ErrorKind.UNKNOWN_HOOK,
            )

        if self._tracker.is_disabled(hook_name):
            _logger.debug("Hook %s is auto-disabled; skipping", hook_name)
            return events.HookOutcome.skipped(hook_name, events.SKIP_AUTO_DISABLED)

        if not matching.matches(definition.conditions, context):
            _logger.debug("Conditions not met for hook %s", hook_name)
            return events.HookOutcome.skipped(hook_name, events.SKIP_CONDITIONS_NOT_MET)

        _logger.debug("Executing hook: %s", hook_name)
        self._event_log.log_start(hook_name, context)

        executor = self._get_executor(definition)
        outcome = await executor.run(
            definition,
            context,
            timeout_ms=cfg.timeout_ms,
            extra_env=self._handler_env(),
        )

        stats = self._tracker.record(
            hook_name,
            outcome.duration_ms,
            success=outcome.status == events.OutcomeStatus.SUCCESS,
            status=outcome.status.value,
        )
        self._event_log.log_attempt(outcome)
        if stats is not None and stats.newly_disabled:
            self._event_log.log_disabled(hook_name, stats.avg_time_ms, stats.executions)

        if outcome.duration_ms > cfg.warning_threshold_ms:
            _logger.warning("Slow hook execution: %s took %.0fms", hook_name, outcome.duration_ms)

        if outcome.status.is_failure:
            _logger.error("Hook failed: %s: %s", hook_name, outcome.error)

        return outcome

    def _prepare_context(
        self,
        context: events.ExecutionContext | None,
    ) -> events.ExecutionContext:
        """Default the context and fill in the active agent as actor."""
        context = context or events.ExecutionContext()
        if context.actor is None and self._active_agent is not None:
            context = context.with_actor(self._active_agent)
        return context

    def _handler_env(self) -> dict[str, str]:
        return {
            f"{constants.ENV_PREFIX}WORKFLOW_STATE": _json.dumps(self._workflow_state or {}, default=str),
        }

    def _get_executor(
        self,
        hook_def: config.HookDefinition,
    ) -> executors_base.HookExecutor:
        """Get or create an executor for the hook type."""
        # Import here to avoid circular imports
        import hookctl.hooks.executors as executors

        hook_type = _typing.cast(_typing.Literal["command", "script"], hook_def.type)
        if hook_type not in self._executors:
            self._executors[hook_type] = executors.create_executor(
                hook_type,
                hooks_root=self._hooks_root,
            )
        return self._executors[hook_type]

    # =========================================================================
    # Failure queue
    # =========================================================================

    async def drain_failure_queue(self) -> queue.DrainSummary:
        """
        Replay queued failures once each.

        A drain requested while another is running does nothing.
        """

        def on_drop(entry: queue.FailureQueueEntry, outcome: events.HookOutcome) -> None:
            self._event_log.log_dropped(entry.hook_name, entry.retries, outcome.error)

        summary = await self._queue.drain(self._replay, on_drop=on_drop)
        if not summary.skipped_reentrant:
            _logger.info(
                "Failure queue drained: %d succeeded, %d requeued, %d dropped, %d discarded",
                summary.succeeded,
                summary.requeued,
                summary.dropped,
                summary.discarded,
            )
        return summary

    async def _replay(
        self,
        hook_name: str,
        context: events.ExecutionContext,
    ) -> events.HookOutcome:
        outcome = await self._attempt(hook_name, context)
        self._event_log.log_outcome(outcome)
        return outcome

    async def run_failure_queue_worker(
        self,
        interval_s: float = constants.DEFAULT_QUEUE_DRAIN_INTERVAL_S,
        stop_event: _asyncio.Event | None = None,
    ) -> None:
        """
        Drain the failure queue every interval until stopped.

        Args:
            interval_s: Seconds between drains.
            stop_event: Set to stop the worker. Without one, the worker
                runs until cancelled.
        """
        stop_event = stop_event or _asyncio.Event()
        while not stop_event.is_set():
            try:
                await _asyncio.wait_for(stop_event.wait(), timeout=interval_s)
            except TimeoutError:
                pass
            else:
                return
            if len(self._queue):
                await self.drain_failure_queue()

    # =========================================================================
    # Configuration
    # =========================================================================

    def reconfigure(self, **changes: _typing.Any) -> GlobalConfig:
        """
        Replace the global config with updated values.

        Takes effect for the next attempt; in-flight attempts keep the
        config they started with.

        Raises:
            TypeError: If a key is not a GlobalConfig field.
        """
        self._config = _dataclasses.replace(self._config, **changes)
        self._tracker.timeout_ms = self._config.timeout_ms
        self._policy.max_retries = self._config.max_retries
        self._policy.backoff_unit_ms = self._config.backoff_unit_ms
        self._queue.max_retries = self._config.max_retries
        self._event_log.log_config_change(**changes)
        return self._config

    def set_enabled(self, enabled: bool) -> None:
        """Enable/disable hooks globally."""
        self.reconfigure(enabled=enabled)
        _logger.info("Hooks %s globally", "enabled" if enabled else "disabled")

    def set_profile(self, profile_name: str) -> None:
        """
        Replace every registered hook with the hooks of a profile.

        Hooks not in the profile become unknown and lose their stats.

        Raises:
            profiles.UnknownProfileError: If the profile does not exist.
                The registry is left untouched.
            ValueError: If the profile file is invalid.
        """
        profile = self._profiles.require_profile(profile_name)
        self._registry.replace_all(profile.hooks)
        self._event_log.log_profile_loaded(profile_name, profile.hook_names)
        self.reconfigure(active_profile=profile_name)
        _logger.info("Hook profile set to: %s (%d hooks)", profile_name, len(profile.hooks))

    def set_active_agent(self, agent_name: str | None) -> None:
        """Set the actor used for contexts that don't name one."""
        self._active_agent = agent_name

    def update_workflow_state(self, state: dict[str, _typing.Any] | None) -> None:
        """Set the workflow state passed to handlers as HOOKCTL_WORKFLOW_STATE."""
        self._workflow_state = dict(state) if state is not None else None

    # =========================================================================
    # Reporting
    # =========================================================================

    def reset_stats(self, hook_name: str | None = None) -> bool:
        """
        Clear stats for one hook (or all), re-enabling auto-disabled hooks.

        Returns:
            False if a named hook has no stats.
        """
        if hook_name is None:
            self._tracker.reset_all()
        elif not self._tracker.reset(hook_name):
            return False
        self._event_log.log_stats_reset(hook_name)
        _logger.info("Stats reset for %s", hook_name or "all hooks")
        return True

    def get_stats(self, hook_name: str) -> metrics.HookExecutionStats | None:
        """Get a copy of one hook's stats."""
        return self._tracker.snapshot(hook_name)

    def restore_stats(self, log_file: _pathlib.Path) -> int:
        """
        Rebuild stats by replaying handler runs from a JSONL event log.

        Lets a short-lived process (such as the CLI) report on executions
        made by earlier processes. Runs of hooks that are not registered
        are ignored; the auto-disable rule applies as it did live, without
        repeating its warning. A ``stats_reset`` record clears the stats it
        names and a ``profile_loaded`` record clears every hook's, so only
        runs after the latest of those count.

        Returns:
            Number of runs replayed and still counted.
        """
        counted_statuses = {s.value for s in events.OutcomeStatus if s.counts_as_execution}
        replayed: dict[str, int] = {}
        for event in hook_logging.read_events(log_file):
            event_type = event.get("event_type")
            hook_name = event.get("hook")
            if event_type == "profile_loaded" or (event_type == "stats_reset" and hook_name is None):
                self._tracker.reset_all()
                replayed.clear()
            elif event_type == "stats_reset":
                self._tracker.reset(str(hook_name))
                replayed.pop(str(hook_name), None)
            elif event_type == "hook_attempt" and event.get("status") in counted_statuses:
                status = event["status"]
                stats = self._tracker.record(
                    str(hook_name),
                    float(event.get("duration_ms", 0.0)),
                    success=status == events.OutcomeStatus.SUCCESS.value,
                    status=status,
                    announce=False,
                )
                if stats is not None:
                    replayed[str(hook_name)] = replayed.get(str(hook_name), 0) + 1
        return sum(replayed.values())

    def get_performance_report(self) -> report.PerformanceReport:
        """Build a performance report from current stats."""
        return report.build_report(
            self._tracker.snapshots(),
            warning_threshold_ms=self._config.warning_threshold_ms,
        )

    def close(self) -> None:
        self._event_log.close()
