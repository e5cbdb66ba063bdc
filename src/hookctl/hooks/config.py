"""
Hook definition loading.

Hooks are defined in registry files under the hooks root:
- Registry: registry/hook-registry.yaml (or .yml / .json)
- Profiles: profiles/profile-<name>.yaml (or .yml / .json)

Both use the same shape: a top-level ``hooks`` mapping of hook name to
definition. JSON files are read with the YAML loader (JSON is valid YAML).
"""

from __future__ import annotations

import pathlib as _pathlib
import re as _re
import typing as _typing

import pydantic as _pydantic
import yaml as _yaml

REGISTRY_FILENAMES = ("hook-registry.yaml", "hook-registry.yml", "hook-registry.json")


class HookConditions(_pydantic.BaseModel):
    """
    Run conditions for a hook.

    All present conditions must hold (AND logic). Absent conditions
    impose no constraint.
    """

    model_config = _pydantic.ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    if_agent: tuple[str, ...] | None = _pydantic.Field(
        default=None,
        validation_alias=_pydantic.AliasChoices("if_agent", "ifAgent"),
    )
    """Allowed actor identifiers."""

    if_file_matches: str | None = _pydantic.Field(
        default=None,
        validation_alias=_pydantic.AliasChoices("if_file_matches", "ifFileMatches"),
    )
    """Regular expression searched in the context path."""

    if_phase: str | None = _pydantic.Field(
        default=None,
        validation_alias=_pydantic.AliasChoices("if_phase", "ifPhase", "if_sprint_phase"),
    )
    """Exact workflow phase."""

    @_pydantic.field_validator("if_agent", mode="before")
    @classmethod
    def _coerce_agent_list(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            return (value,)
        return value

    @_pydantic.field_validator("if_file_matches")
    @classmethod
    def _validate_regex(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                _re.compile(value)
            except _re.error as e:
                raise ValueError(f"invalid if_file_matches pattern {value!r}: {e}") from e
        return value

    @property
    def is_empty(self) -> bool:
        return self.if_agent is None and self.if_file_matches is None and self.if_phase is None


class HookDefinition(_pydantic.BaseModel):
    """
    Definition of a single hook.

    Specifies:
    - What to execute (shell command or Python script)
    - When to run (conditions)
    - How failures are handled (priority)
    """

    model_config = _pydantic.ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    name: str
    """Unique identifier for this hook."""

    type: _typing.Literal["command", "script"] | None = None
    """Handler type. Inferred from which of command/script is set when omitted."""

    command: str | None = None
    """Shell command to execute (for type=command)."""

    script: str | None = _pydantic.Field(
        default=None,
        validation_alias=_pydantic.AliasChoices("script", "handler"),
    )
    """Path to a Python script, relative to the hooks root (for type=script)."""

    priority: str = "normal"
    """Failure priority. Only 'critical' hooks are retried and queued."""

    conditions: HookConditions | None = None
    """Optional run conditions."""

    category: str | None = None
    """Descriptive grouping (metadata only)."""

    trigger_events: tuple[str, ...] = _pydantic.Field(
        default=(),
        validation_alias=_pydantic.AliasChoices("trigger_events", "triggerEvents"),
    )
    """Events the hook is meant for (metadata only)."""

    description: str | None = None
    """Human-readable description."""

    @_pydantic.field_validator("trigger_events", mode="before")
    @classmethod
    def _coerce_events(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            return (value,)
        return value

    @_pydantic.model_validator(mode="before")
    @classmethod
    def _infer_type(cls, data: _typing.Any) -> _typing.Any:
        """Infer the handler type from which handler field is set."""
        if isinstance(data, dict) and data.get("type") is None:
            if data.get("command"):
                data = {**data, "type": "command"}
            elif data.get("script") or data.get("handler"):
                data = {**data, "type": "script"}
        return data

    @_pydantic.model_validator(mode="after")
    def _validate_handler(self) -> HookDefinition:
        """Validate that the right fields are set for the hook type."""
        if self.type is None:
            raise ValueError(f"hook '{self.name}' must specify 'command' or 'script'")
        if self.type == "command" and not self.command:
            raise ValueError("command hooks must specify 'command' field")
        if self.type == "script" and not self.script:
            raise ValueError("script hooks must specify 'script' field")
        return self

    @property
    def is_critical(self) -> bool:
        return self.priority == "critical"


class HooksFile(_pydantic.BaseModel):
    """
    Contents of a registry or profile file.

    ```yaml
    description: Everyday hooks
    hooks:
      md-sync:
        command: ./sync.sh
        conditions:
          if_file_matches: "\\.md$"
      deploy-check:
        script: handlers/deploy_check.py
        priority: critical
    ```
    """

    model_config = _pydantic.ConfigDict(extra="ignore")

    description: str = ""
    hooks: dict[str, HookDefinition] = _pydantic.Field(default_factory=dict)

    @_pydantic.model_validator(mode="before")
    @classmethod
    def _inject_names(cls, data: _typing.Any) -> _typing.Any:
        """Fill each definition's name from its mapping key."""
        if isinstance(data, dict) and isinstance(data.get("hooks"), dict):
            hooks = {}
            for name, body in data["hooks"].items():
                if isinstance(body, dict):
                    body = {"name": name, **body}
                hooks[name] = body
            data = {**data, "hooks": hooks}
        return data

    def definitions(self) -> list[HookDefinition]:
        return list(self.hooks.values())


def load_hooks_file(path: _pathlib.Path) -> HooksFile:
    """
    Load a registry or profile file.

    Args:
        path: Path to a YAML or JSON file.

    Returns:
        Parsed HooksFile.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Hooks file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = _yaml.safe_load(content) or {}
        return HooksFile.model_validate(data)
    except _yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except _pydantic.ValidationError as e:
        raise ValueError(f"Invalid hooks file {path}: {e}") from e


def find_registry_path(hooks_root: _pathlib.Path) -> _pathlib.Path | None:
    """Find the registry file under the hooks root, if any."""
    for filename in REGISTRY_FILENAMES:
        candidate = hooks_root / "registry" / filename
        if candidate.exists():
            return candidate
    return None
