"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with HOOKCTL_ prefix
3. The hook configuration file (config/hook-config.yaml|yml|json)
4. Built-in defaults

Nested config uses double underscore delimiter:
  HOOKCTL_PERFORMANCE__TIMEOUT=10000
  HOOKCTL_LOGGING__LEVEL=debug
"""

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import hookctl.config.sources as sources
import hookctl.config.types as types
import hookctl.constants as constants

_logger = _logging.getLogger(__name__)


class Settings(_pydantic_settings.BaseSettings):
    """
    hookctl configuration settings.

    All settings can be overridden via environment variables with HOOKCTL_ prefix.
    For nested config, use double underscore: HOOKCTL_PERFORMANCE__MAX_RETRIES=5

    Use Settings.load() to read the config file of a specific hooks root.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="HOOKCTL_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args) - highest
        2. env_settings (HOOKCTL_* env vars)
        3. hook config file
        4. (defaults via Field definitions) - lowest
        """
        return (
            init_settings,
            env_settings,
            sources.HookConfigFileSettingsSource(settings_cls),
        )

    @classmethod
    def load(
        cls,
        hooks_root: _pathlib.Path | None = None,
        *,
        config_file: _pathlib.Path | None = None,
        **overrides: _typing.Any,
    ) -> "Settings":
        """
        Load settings for a hooks root.

        Args:
            hooks_root: Hooks root directory. Defaults to HOOKCTL_HOOKS_ROOT or cwd.
            config_file: Explicit config file. Defaults to HOOKCTL_CONFIG_FILE,
                then the first config/hook-config.* found under the hooks root.
            **overrides: Values taking precedence over every source.

        Raises:
            sources.ConfigFileError: If the config file is malformed.
            pydantic.ValidationError: If a value is invalid.
        """
        root = hooks_root or sources.get_hooks_root()
        path = config_file or sources.config_file_from_env() or sources.find_config_path(root)
        token = sources.set_config_path_override(path)
        try:
            settings = cls(hooks_root=root, **overrides)
        finally:
            sources.reset_config_path_override(token)
        settings._config_path = path
        for section_name in ("performance", "logging"):
            extra = getattr(settings, section_name).get_extra_fields()
            if extra:
                _logger.warning(
                    "Unknown keys in %s section: %s", section_name, ", ".join(sorted(extra))
                )
        return settings

    # =========================================================================
    # Top-level settings
    # =========================================================================

    enabled: bool = True
    """Master switch. When false every execution returns 'disabled'."""

    profile: str = constants.DEFAULT_PROFILE
    """Active hook profile."""

    hooks_root: _pathlib.Path = _pydantic.Field(default_factory=sources.get_hooks_root)
    """Directory holding config/, registry/, profiles/ and handler scripts."""

    # =========================================================================
    # Nested config sections
    # =========================================================================

    performance: types.PerformanceConfig = _pydantic.Field(
        default_factory=types.PerformanceConfig
    )
    """Timeout, warning threshold and retry settings."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Logging settings."""

    _config_path: _pathlib.Path | None = _pydantic.PrivateAttr(default=None)

    # =========================================================================
    # Derived paths
    # =========================================================================

    @property
    def config_path(self) -> _pathlib.Path:
        """The config file these settings were read from (or would be)."""
        if self._config_path is not None:
            return self._config_path
        return sources.find_config_path(self.hooks_root)

    @property
    def registry_dir(self) -> _pathlib.Path:
        return self.hooks_root / "registry"

    @property
    def profiles_dir(self) -> _pathlib.Path:
        return self.hooks_root / "profiles"

    @property
    def event_log_path(self) -> _pathlib.Path | None:
        """Resolved JSONL event log path, or None if disabled."""
        if not self.logging.file:
            return None
        path = _pathlib.Path(self.logging.file)
        if not path.is_absolute():
            path = self.hooks_root / "logs" / path
        return path
