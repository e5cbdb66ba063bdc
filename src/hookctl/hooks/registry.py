"""
Hook registry - the table of registered hook definitions.

Registering a name that already exists replaces the earlier definition
and restarts its stats. Profile switching relies on replace_all() to swap
the whole table at once.
"""

from __future__ import annotations

import hookctl.hooks.config as config
import hookctl.hooks.metrics as metrics


class HookRegistry:
    """
    Name-keyed table of hook definitions.

    Stats for every registered hook are initialized in the metrics
    tracker, which stays their sole owner.
    """

    def __init__(self, tracker: metrics.MetricsTracker) -> None:
        self._tracker = tracker
        self._hooks: dict[str, config.HookDefinition] = {}

    def register(self, definition: config.HookDefinition) -> None:
        """Insert or replace a definition and start zeroed stats for it."""
        self._hooks[definition.name] = definition
        self._tracker.initialize(definition.name)

    def get(self, name: str) -> config.HookDefinition | None:
        """Get a definition by name, or None if not registered."""
        return self._hooks.get(name)

    def list_names(self) -> list[str]:
        """List registered hook names in registration order."""
        return list(self._hooks)

    def definitions(self) -> list[config.HookDefinition]:
        return list(self._hooks.values())

    def replace_all(self, definitions: list[config.HookDefinition]) -> None:
        """
        Swap the entire table for a new set of definitions.

        Hooks absent from the new set become unreachable and lose their
        stats; every hook in the new set starts with fresh stats.
        """
        new_hooks = {d.name: d for d in definitions}
        self._hooks = new_hooks
        self._tracker.retain_only(list(new_hooks))

    def unregister(self, name: str) -> bool:
        """Remove a definition. Returns True if it was registered."""
        if self._hooks.pop(name, None) is None:
            return False
        self._tracker.discard(name)
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._hooks

    def __len__(self) -> int:
        return len(self._hooks)
