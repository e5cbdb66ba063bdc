"""
Type definitions for hook profiles.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

import hookctl.hooks.config as hooks_config


@_dataclasses.dataclass
class HookProfile:
    """
    A named, swappable set of hook definitions.

    Activating a profile replaces the whole registry with its hooks.
    """

    name: str
    """Unique profile name (e.g., 'standard', 'minimal')."""

    description: str = ""
    """Human-readable description of the profile."""

    hooks: list[hooks_config.HookDefinition] = _dataclasses.field(default_factory=list)
    """Hook definitions bound to this profile."""

    @property
    def hook_names(self) -> list[str]:
        return [h.name for h in self.hooks]

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert profile to dictionary for serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "hooks": {h.name: h.model_dump(exclude={"name"}, exclude_none=True) for h in self.hooks},
        }

    @classmethod
    def from_hooks_file(cls, name: str, data: hooks_config.HooksFile) -> HookProfile:
        """Create a profile from a parsed profile file."""
        return cls(name=name, description=data.description, hooks=data.definitions())
