"""
Profile manager for loading hook profiles.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib

import hookctl.hooks.config as hooks_config
import hookctl.profiles.types as types

_logger = _logging.getLogger(__name__)

PROFILE_SUFFIXES = (".yaml", ".yml", ".json")


class UnknownProfileError(LookupError):
    """Raised when a profile name has no definition."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        listing = ", ".join(available) if available else "none"
        super().__init__(f"Unknown hook profile: {name!r} (available: {listing})")


class ProfileManager:
    """
    Manager for loading hook profiles.

    Profiles are looked up in this order:
    1. Profiles registered programmatically
    2. Files in the profiles directory: profile-<name>.yaml, .yml or .json

    Files are read on demand, so edits are picked up by the next
    profile switch.
    """

    def __init__(self, profiles_dir: _pathlib.Path | None = None) -> None:
        """
        Initialize the profile manager.

        Args:
            profiles_dir: Directory holding profile files. None disables
                file lookup.
        """
        self._profiles_dir = profiles_dir
        self._profiles: dict[str, types.HookProfile] = {}

    @property
    def profiles_dir(self) -> _pathlib.Path | None:
        return self._profiles_dir

    def _profile_path(self, name: str) -> _pathlib.Path | None:
        if self._profiles_dir is None:
            return None
        for suffix in PROFILE_SUFFIXES:
            candidate = self._profiles_dir / f"profile-{name}{suffix}"
            if candidate.exists():
                return candidate
        return None

    def get_profile(self, name: str) -> types.HookProfile | None:
        """
        Get a profile by exact name.

        Raises:
            ValueError: If the profile file exists but is invalid.
        """
        if name in self._profiles:
            return self._profiles[name]

        path = self._profile_path(name)
        if path is None:
            return None

        data = hooks_config.load_hooks_file(path)
        _logger.debug("Loaded profile %s from %s", name, path)
        return types.HookProfile.from_hooks_file(name, data)

    def require_profile(self, name: str) -> types.HookProfile:
        """Get a profile by name, raising UnknownProfileError if missing."""
        profile = self.get_profile(name)
        if profile is None:
            raise UnknownProfileError(name, self.list_profile_names())
        return profile

    def list_profile_names(self) -> list[str]:
        """List names of all available profiles."""
        names = set(self._profiles)
        if self._profiles_dir is not None and self._profiles_dir.is_dir():
            for path in self._profiles_dir.iterdir():
                if path.suffix in PROFILE_SUFFIXES and path.stem.startswith("profile-"):
                    names.add(path.stem[len("profile-"):])
        return sorted(names)

    def register_profile(self, profile: types.HookProfile) -> None:
        """Register a profile (for testing or dynamic registration)."""
        self._profiles[profile.name] = profile
