"""
Logging for hookctl.

Provides JSONL audit logging of hook lifecycle events plus console
logging setup for the CLI.
"""

from hookctl.logging.event_log import HookEventLog, read_events
from hookctl.logging.setup import configure_logging

__all__ = [
    "HookEventLog",
    "configure_logging",
    "read_events",
]
