"""
Hook profiles for hookctl.

A profile is a named set of hook definitions that can replace the
active registry in one step.
"""

from hookctl.profiles.manager import ProfileManager, UnknownProfileError
from hookctl.profiles.types import HookProfile

__all__ = [
    "HookProfile",
    "ProfileManager",
    "UnknownProfileError",
]
