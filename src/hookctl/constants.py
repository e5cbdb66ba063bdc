"""
Shared constants for hookctl.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Execution defaults
DEFAULT_TIMEOUT_MS = 5000
"""Default time budget for a single hook execution."""

DEFAULT_WARNING_THRESHOLD_MS = 1000
"""Executions slower than this are logged as slow."""

DEFAULT_MAX_RETRIES = 3
"""Default retry budget for critical hooks (and for queued replays)."""

DEFAULT_BACKOFF_UNIT_MS = 1000
"""Backoff before retry n is 2**n times this unit."""

DEFAULT_PROFILE = "standard"
"""Profile name used when the config file does not name one."""

# Auto-disable thresholds
AUTO_DISABLE_MIN_EXECUTIONS = 5
"""Auto-disable only considers hooks with more executions than this."""

AUTO_DISABLE_TIMEOUT_RATIO = 0.8
"""Auto-disable when the average time exceeds this fraction of the timeout."""

# Report thresholds
HIGH_FAILURE_RATE_PERCENT = 20.0
"""Failure rate above which the report recommends investigation."""

# Queue worker
DEFAULT_QUEUE_DRAIN_INTERVAL_S = 60.0
"""Default interval between failure queue drains."""

# Environment variable prefix passed to handlers
ENV_PREFIX = "HOOKCTL_"
