"""
Centralized constants for verbump.

This module defines immutable configuration values used across verbump,
including registry endpoints, network settings, version specifier rules,
manifest layout, and logging formats. All values are intended to be
treated as read-only.
"""

from typing import Final, FrozenSet, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "verbump/{version} (https://github.com/verbump/verbump)"

# ---------------------------------------------------------------------------
# npm registry
# ---------------------------------------------------------------------------

#: Base URL of the public npm registry.
NPM_REGISTRY: Final[str] = "https://registry.npmjs.org"

#: Dist-tag that marks the version a registry considers current.
LATEST_DIST_TAG: Final[str] = "latest"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Accept header for registry requests. Full packuments carry ``time`` and
#: ``dist.attestations``; the abbreviated install format does not.
PACKUMENT_ACCEPT: Final[str] = "application/json"

#: Maximum number of registry fetches in flight at once.
DEFAULT_CONCURRENT_LIMIT: Final[int] = 10

# ---------------------------------------------------------------------------
# Version specifiers
# ---------------------------------------------------------------------------

#: Specifier protocols whose versions can be resolved against the registry.
#: ``None`` stands for a bare range such as ``^1.2.3``.
SUPPORTED_PROTOCOLS: Final[FrozenSet[object]] = frozenset({None, "npm"})

#: Marker separating a version core from its prerelease identifiers.
PRERELEASE_MARKER: Final[str] = "-"

#: Marker separating a version core from its build metadata.
BUILD_MARKER: Final[str] = "+"

# ---------------------------------------------------------------------------
# Manifest layout
# ---------------------------------------------------------------------------

#: File name of an npm package manifest.
MANIFEST_FILE_NAME: Final[str] = "package.json"

#: Manifest sections that declare dependencies, in display order.
DEPENDENCY_SECTIONS: Final[Sequence[str]] = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Offer the prerelease tier when the ``latest`` tag is a prerelease.
DEFAULT_SHOW_PRERELEASE: Final[bool] = True

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading manifests.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
