"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for yapi:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.yapi/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_data_dir`, :func:`get_profiles_dir`.
* **Global config** -- a single :class:`~yapi.models.GlobalConfig` JSON file.
* **Profiles** -- one JSON file per YApi instance, each deserialised into a
  :class:`~yapi.models.Profile`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config.
* **Credential resolution** -- :func:`resolve_credential` reads the token
  from an env var, a file, or takes it literally.

All file writes go through :func:`_atomic_write` (temp file then rename).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from yapi.exceptions import ConfigError
from yapi.models import GlobalConfig, Profile

_APP_NAME = "yapi"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "yapi.json"

ENV_PROFILE = "YAPI_PROFILE"
ENV_BASE_URL = "YAPI_BASE_URL"
ENV_TOKEN = "YAPI_TOKEN"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/yapi/`` (default ``~/.config/yapi/``).
    On macOS/Windows: ``~/.yapi/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/yapi/`` (default ``~/.local/share/yapi/``).
    On macOS/Windows: ``~/.yapi/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created next to *path* so that ``os.replace`` is an
    atomic rename on POSIX. On any failure the temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration, or defaults when the file is absent.

    Raises:
        ConfigError: If the file exists but is invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return all profile names, sorted alphabetically."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def load_profile(name: str) -> Profile:
    """Load and validate a profile from disk.

    Raises:
        ConfigError: If the profile file does not exist, contains invalid
            JSON, or fails Pydantic validation.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Profile.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    data = profile.model_dump(mode="json")
    _atomic_write(_profile_path(profile.name), json.dumps(data, indent=2) + "\n")


def delete_profile(name: str) -> None:
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./yapi.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[Profile]]:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_profile``, ``cli_base_url``, ``cli_format``)
        2. Environment variables (``YAPI_PROFILE``, ``YAPI_BASE_URL``)
        3. Project config (``./yapi.json``)
        4. User config (``~/.config/yapi/config.json``)
        5. Defaults

    When no profile is selected but a base URL is given by flag or env var,
    an unsaved ad-hoc profile named ``default`` is returned.

    Returns:
        A tuple of ``(global_config, active_profile_or_None)``.
    """
    global_cfg = load_global_config()

    project = load_project_config()
    project_profile_name: Optional[str] = None
    if project is not None:
        project_profile_name = project.get("default_profile")

    resolved_profile_name: Optional[str] = global_cfg.default_profile
    if project_profile_name is not None:
        resolved_profile_name = project_profile_name
    env_profile = os.environ.get(ENV_PROFILE)
    if env_profile:
        resolved_profile_name = env_profile
    if cli_profile is not None:
        resolved_profile_name = cli_profile

    if resolved_profile_name is None and global_cfg.auto_select_single_profile:
        profiles = list_profiles()
        if len(profiles) == 1:
            resolved_profile_name = profiles[0]

    base_url_override = cli_base_url or os.environ.get(ENV_BASE_URL) or None

    profile: Optional[Profile] = None
    if resolved_profile_name is not None:
        profile = load_profile(resolved_profile_name)
        if base_url_override:
            profile.base_url = base_url_override
    elif base_url_override:
        profile = Profile(name="default", base_url=base_url_override)

    if cli_format is not None:
        global_cfg.output.format = cli_format

    return global_cfg, profile


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a token from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - anything else -- used literally as the token

    Raises:
        ConfigError: If the env var is unset or the file cannot be read.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    return source
