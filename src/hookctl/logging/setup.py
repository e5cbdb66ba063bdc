"""
Console logging setup for the hookctl CLI.
"""

import logging as _logging

_FORMAT = "[hookctl] %(levelname)s: %(message)s"


def configure_logging(level: str = "info") -> None:
    """
    Configure root logging for command-line use.

    Args:
        level: One of debug, info, warning, error.
    """
    numeric = _logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    _logging.basicConfig(level=numeric, format=_FORMAT, force=True)
