"""verbump settings from ``verbump.toml`` or ``pyproject.toml``.

Options live under ``[verbump]`` in a ``verbump.toml`` or under
``[tool.verbump]`` in a ``pyproject.toml``::

    [verbump]
    registry_url = "https://registry.npmmirror.com"
    show_prerelease = false
    dependency_types = ["dependencies", "devDependencies"]

A path given with ``--config`` (or ``VERBUMP_CONFIG``) is used as is.
Otherwise the working directory is searched, ``verbump.toml`` first; a
``pyproject.toml`` only counts when it has a ``[tool.verbump]`` table.
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from verbump.exceptions import ConfigError
from verbump.utils.logger import get_logger
from verbump.constants import (
    DEFAULT_SHOW_PRERELEASE,
    DEPENDENCY_SECTIONS,
    NPM_REGISTRY,
)

logger = get_logger("config")

CONFIG_FILE_NAME = "verbump.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"


@dataclass
class VerbumpConfig:
    """Settings for one verbump run. Every option has a default.

    Attributes:
        registry_url: Base URL of the npm-compatible registry.
        show_prerelease: Offer the prerelease tier when ``latest`` is a
            prerelease.
        dependency_types: Manifest sections to inspect.
        source_path: File the settings came from, if any.
    """

    registry_url: str = NPM_REGISTRY
    show_prerelease: bool = DEFAULT_SHOW_PRERELEASE
    dependency_types: Tuple[str, ...] = tuple(DEPENDENCY_SECTIONS)
    source_path: Optional[Path] = field(default=None, repr=False)


def _registry_url(value: Any) -> str:
    if isinstance(value, str) and value.startswith(("http://", "https://")):
        return value.rstrip("/")
    raise ValueError(f"must be an http(s) URL, got {value!r}")


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"must be a boolean, got {type(value).__name__}")


def _sections(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError("must be a list of strings")
    unknown = [item for item in value if item not in DEPENDENCY_SECTIONS]
    if unknown:
        raise ValueError(f"lists unknown dependency types: {', '.join(unknown)}")
    return tuple(value)


#: Option name to a converter that raises ``ValueError`` on bad input.
_OPTIONS: Dict[str, Callable[[Any], Any]] = {
    "registry_url": _registry_url,
    "show_prerelease": _flag,
    "dependency_types": _sections,
}


def _parse_options(table: Any, *, config_path: Optional[str] = None) -> VerbumpConfig:
    """Validate a ``[verbump]`` table and build the config from it.

    Raises:
        ConfigError: The table is not a table, or has an unknown key or a
            bad value.
    """
    if not isinstance(table, dict):
        raise ConfigError("verbump settings must be a TOML table", config_path=config_path)

    unknown = sorted(set(table) - set(_OPTIONS))
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(unknown)}", config_path=config_path
        )

    values: Dict[str, Any] = {}
    for option, raw in table.items():
        try:
            values[option] = _OPTIONS[option](raw)
        except ValueError as exc:
            raise ConfigError(f"{option} {exc}", config_path=config_path, option=option) from exc
    return VerbumpConfig(**values)


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path.name}: {exc}", config_path=str(path)) from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}", config_path=str(path)) from exc


def _verbump_table(path: Path, document: Dict[str, Any]) -> Any:
    """Return the verbump table of a parsed *document*, or ``None``."""
    if path.name == PYPROJECT_FILE_NAME:
        return document.get("tool", {}).get("verbump")
    return document.get("verbump")


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Return the configuration file to use, or ``None`` for defaults.

    Raises:
        ConfigError: *explicit_path* is given but is not a file.
    """
    if explicit_path is not None:
        if not explicit_path.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        return explicit_path.resolve()

    cwd = Path.cwd()
    dedicated = cwd / CONFIG_FILE_NAME
    if dedicated.is_file():
        return dedicated

    pyproject = cwd / PYPROJECT_FILE_NAME
    if not pyproject.is_file():
        return None
    try:
        document = _read_toml(pyproject)
    except ConfigError as exc:
        logger.debug("Skipping %s: %s", pyproject, exc)
        return None
    return pyproject if _verbump_table(pyproject, document) is not None else None


def load_config(config_path: Optional[Path] = None) -> VerbumpConfig:
    """Find, read and validate the configuration.

    A file without a verbump table yields the defaults.

    Raises:
        ConfigError: The file is missing, unreadable or invalid.
    """
    path = discover_config_file(config_path)
    if path is None:
        logger.debug("No configuration file, using defaults")
        return VerbumpConfig()

    logger.info("Loading configuration from %s", path)
    table = _verbump_table(path, _read_toml(path))
    config = _parse_options(table or {}, config_path=str(path))
    config.source_path = path
    logger.debug("Configuration: %s", config)
    return config
