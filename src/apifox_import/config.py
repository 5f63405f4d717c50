"""Configuration resolution for apifox_import.

This module turns the loose values collected by the CLI into the immutable
:class:`~apifox_import.models.ImporterConfig` consumed by the importer:

* **Project config** -- an optional ``apifox-import.json`` in the working
  directory (or the path given with ``--config``) whose keys are spelled like
  the CLI flags. See :class:`~apifox_import.models.ProjectConfig`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables (already folded into the CLI values by Typer),
  project config and built-in defaults.
* **Build metadata** -- :func:`load_build_info` builds the
  :class:`~apifox_import.models.BuildInfo` shown by ``--version``.
* **Data directory** -- :func:`get_data_dir` locates where crash logs are
  written, following the XDG Base Directory spec on Linux/BSD.
"""

from __future__ import annotations

import json
import os
import platform
from collections.abc import Collection
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from apifox_import import __version__
from apifox_import.exceptions import ConfigError, InvalidUsageError
from apifox_import.models import (
    DEFAULT_API_VERSION,
    DEFAULT_DOCUMENT_PATH,
    BuildInfo,
    ImporterConfig,
    ImportOptions,
    ProjectConfig,
)

_APP_NAME = "apifox-import"
PROJECT_CONFIG_FILENAME = "apifox-import.json"
BUILD_TIME_ENV_VAR = "APIFOX_IMPORT_BUILD_TIME"

_OPTION_FIELDS = (
    "target_endpoint_folder_id",
    "target_schema_folder_id",
    "endpoint_overwrite_behavior",
    "schema_overwrite_behavior",
    "update_folder_of_changed_endpoint",
    "prepend_base_path",
)


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/apifox-import/`` (default
    ``~/.local/share/apifox-import/``). Elsewhere: ``~/.apifox-import/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config(path: Optional[str] = None) -> Optional[ProjectConfig]:
    """Load project-local defaults.

    Args:
        path: Explicit config file path. When ``None``,
            ``./apifox-import.json`` is used if it exists.

    Returns:
        The parsed :class:`~apifox_import.models.ProjectConfig`, or ``None``
        if no path was given and the default file does not exist.

    Raises:
        ConfigError: If an explicit path does not exist, or the file contains
            invalid JSON or values of the wrong type.
    """
    if path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_FILENAME
        if not config_path.is_file():
            return None
    else:
        config_path = Path(path).expanduser()
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid project config at {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid project config at {config_path}: expected a JSON object, "
            f"got {type(data).__name__}"
        )
    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid project config at {config_path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_values: dict[str, Any],
    explicit: Collection[str] = (),
    config_path: Optional[str] = None,
) -> tuple[ImporterConfig, str]:
    """Resolve the effective configuration for one import.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``APIFOX_PROJECT_ID``, ``APIFOX_TOKEN``,
           ``APIFOX_API_VERSION``)
        3. Project config (``./apifox-import.json`` or *config_path*)
        4. Defaults

    Typer has already folded 1, 2 and 4 into *cli_values*; *explicit* names
    the keys whose value came from the command line or the environment
    rather than from a default, so project config only overrides the rest.

    Args:
        cli_values: Values keyed by :class:`ProjectConfig` attribute name,
            plus ``verbose``.
        explicit: Keys of *cli_values* that were set explicitly.
        config_path: Optional explicit project config path.

    Returns:
        A tuple of ``(importer_config, document_path)``.

    Raises:
        ConfigError: If the project config cannot be loaded or the merged
            values are invalid.
        InvalidUsageError: If the project id or token is missing.
    """
    values = dict(cli_values)

    project = load_project_config(config_path)
    if project is not None:
        for key, value in project.model_dump(exclude_none=True).items():
            if key not in explicit:
                values[key] = value

    if values.get("project_id") is None:
        raise InvalidUsageError(
            "Missing required option '--projectID' (or APIFOX_PROJECT_ID)"
        )
    if values.get("token") is None:
        raise InvalidUsageError("Missing required option '--token' (or APIFOX_TOKEN)")

    option_values = {
        key: values[key] for key in _OPTION_FIELDS if values.get(key) is not None
    }
    try:
        config = ImporterConfig(
            project_id=values["project_id"],
            token=values["token"],
            api_version=_first_set(values.get("api_version"), DEFAULT_API_VERSION),
            options=ImportOptions(**option_values),
            verbose=bool(values.get("verbose", False)),
            timeout=values.get("timeout"),
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    return config, _first_set(values.get("file"), DEFAULT_DOCUMENT_PATH)


def _first_set(value: Optional[str], default: str) -> str:
    return default if value is None else value


# --- Build metadata ---


def load_build_info() -> BuildInfo:
    """Return build metadata for ``--version``.

    The build time is injected by packaging through the
    ``APIFOX_IMPORT_BUILD_TIME`` environment variable and defaults to
    ``unknown``.
    """
    return BuildInfo(
        version=__version__,
        build_time=os.environ.get(BUILD_TIME_ENV_VAR) or "unknown",
    )
