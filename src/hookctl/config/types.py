"""Configuration section types for hookctl settings.

These are the nested sections of the main Settings class:
- PerformanceConfig: timeout, warning threshold, retry budget, backoff
- LoggingConfig: console level and JSONL event log file

Keys are accepted in snake_case or in the camelCase spelling used by
existing hook-config.json files (warningThreshold, maxRetries, ...).
"""

import typing as _typing

import pydantic as _pydantic

import hookctl.constants as constants


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for config sections.

    Unknown keys are preserved so they can be reported instead of being
    silently dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow", populate_by_name=True)

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}


class PerformanceConfig(ConfigBase):
    """
    Execution budget settings.

    YAML section: performance.*
    """

    timeout: int = _pydantic.Field(default=constants.DEFAULT_TIMEOUT_MS, gt=0)
    """Time budget per execution, in milliseconds."""

    warning_threshold: int = _pydantic.Field(
        default=constants.DEFAULT_WARNING_THRESHOLD_MS,
        ge=0,
        validation_alias=_pydantic.AliasChoices("warning_threshold", "warningThreshold"),
    )
    """Executions slower than this (ms) are logged as slow."""

    max_retries: int = _pydantic.Field(
        default=constants.DEFAULT_MAX_RETRIES,
        ge=0,
        validation_alias=_pydantic.AliasChoices("max_retries", "maxRetries"),
    )
    """Retry budget for critical hooks and for queued replays."""

    backoff_unit: int = _pydantic.Field(
        default=constants.DEFAULT_BACKOFF_UNIT_MS,
        ge=0,
        validation_alias=_pydantic.AliasChoices("backoff_unit", "backoffUnit"),
    )
    """Backoff unit in milliseconds; retry n waits 2**n units."""


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: _typing.Literal["debug", "info", "warning", "error"] = "info"
    """Console log level."""

    file: str | None = None
    """JSONL event log, relative to the hooks root. None disables it."""

    @_pydantic.field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            value = value.lower()
            if value == "warn":
                return "warning"
        return value
