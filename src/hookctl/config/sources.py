"""Custom pydantic-settings source for the hook configuration file.

The configuration file lives in the config/ directory of the hooks root
and may be YAML or JSON:
hook-config.yaml, hook-config.yml or hook-config.json (first found wins).
JSON files are parsed with the YAML loader.

Environment variables:
- HOOKCTL_HOOKS_ROOT: Hooks root directory (default: current directory)
- HOOKCTL_CONFIG_FILE: Explicit config file path
"""

import contextvars as _contextvars
import json as _json
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

ENV_HOOKS_ROOT = "HOOKCTL_HOOKS_ROOT"
ENV_CONFIG_FILE = "HOOKCTL_CONFIG_FILE"

CONFIG_FILENAMES = ("hook-config.yaml", "hook-config.yml", "hook-config.json")

# Config file chosen by Settings.load() for the duration of one construction
_config_path_override: _contextvars.ContextVar[_pathlib.Path | None] = _contextvars.ContextVar(
    "hookctl_config_path", default=None
)


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def get_hooks_root() -> _pathlib.Path:
    """Get the hooks root, respecting HOOKCTL_HOOKS_ROOT."""
    root_env = _os.environ.get(ENV_HOOKS_ROOT)
    if root_env:
        return _pathlib.Path(root_env)
    return _pathlib.Path.cwd()


def find_config_path(hooks_root: _pathlib.Path) -> _pathlib.Path:
    """
    Find the config file for a hooks root.

    Returns the first existing candidate, or the default YAML path if
    none exists yet.
    """
    for filename in CONFIG_FILENAMES:
        candidate = hooks_root / "config" / filename
        if candidate.exists():
            return candidate
    return hooks_root / "config" / CONFIG_FILENAMES[0]


def config_file_from_env() -> _pathlib.Path | None:
    file_env = _os.environ.get(ENV_CONFIG_FILE)
    return _pathlib.Path(file_env) if file_env else None


def resolve_config_path() -> _pathlib.Path:
    """Resolve the config file from the override, env var, or hooks root."""
    override = _config_path_override.get()
    if override is not None:
        return override
    return config_file_from_env() or find_config_path(get_hooks_root())


def load_config_file(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Load a config file and return its contents as a dict.

    Args:
        path: Path to the YAML or JSON file.

    Returns:
        Parsed contents, or an empty dict if the file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed, or is
            not a mapping at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML/JSON: {e}") from e

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(path, f"config must be a mapping, got {type_name}")

    return parsed


def update_config_file(path: _pathlib.Path, updates: dict[str, _typing.Any]) -> None:
    """
    Write top-level key updates back to a config file.

    Creates the file if needed. JSON files stay JSON; everything else is
    written as YAML.
    """
    data = load_config_file(path) if path.exists() else {}
    data.update(updates)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".json":
        path.write_text(_json.dumps(data, indent=2) + "\n", encoding="utf-8")
    else:
        path.write_text(_yaml.safe_dump(data, sort_keys=False), encoding="utf-8")


class HookConfigFileSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that loads the hook configuration file.

    A missing file is normal (defaults apply); a malformed one raises
    ConfigFileError.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        config_path: _pathlib.Path | None = None,
    ) -> None:
        super().__init__(settings_cls)
        self._config_path = config_path or resolve_config_path()
        self._data = load_config_file(self._config_path) if self._config_path.exists() else {}

    @property
    def config_path(self) -> _pathlib.Path:
        return self._config_path

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        return dict(self._data)


def set_config_path_override(path: _pathlib.Path | None) -> _contextvars.Token[_pathlib.Path | None]:
    return _config_path_override.set(path)


def reset_config_path_override(token: _contextvars.Token[_pathlib.Path | None]) -> None:
    _config_path_override.reset(token)
