"""
hookctl - Hook orchestration engine.

Registers named automation handlers, gates them on execution context,
runs them under a time budget, retries critical failures and throttles
chronically slow handlers.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml
_raw_version = _metadata.version("hookctl")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from hookctl.config import Settings  # noqa: E402
from hookctl.hooks import HookManager  # noqa: E402

__all__ = ["__version__", "__version_info__", "HookManager", "Settings"]
