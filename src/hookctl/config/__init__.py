"""
Configuration module for hookctl.

Uses pydantic-settings for environment variable and config file loading.
"""

from hookctl.config.settings import Settings
from hookctl.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings"]
