"""
Version comparison utilities for verbump.

npm versions follow Semantic Versioning. Only the leading
``major.minor.patch`` triple takes part in comparisons; prerelease and
build suffixes are ignored. The classifier keeps prerelease versions out
of tier computations, so prerelease precedence is never needed.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from verbump.constants import BUILD_MARKER, PRERELEASE_MARKER

SemverTuple = Tuple[int, int, int]

_SEMVER_TUPLE_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")


def parse_semver_tuple(version: str) -> Optional[SemverTuple]:
    """Extract the leading ``(major, minor, patch)`` triple of *version*.

    Any trailing prerelease or build suffix is ignored.

    Args:
        version: Version string such as ``"1.2.3"`` or ``"2.0.0-rc.1"``.

    Returns:
        The integer triple, or ``None`` when *version* does not start
        with ``\\d+.\\d+.\\d+``.

    Examples:
        >>> parse_semver_tuple("1.2.3-beta.1")
        (1, 2, 3)
        >>> parse_semver_tuple("v1.2.3") is None
        True
    """
    match = _SEMVER_TUPLE_RE.match(version)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def compare(a: str, b: str) -> int:
    """Compare two version strings by their numeric triple.

    Callers must pass strings that :func:`parse_semver_tuple` accepts.

    Returns:
        ``-1`` if *a* < *b*, ``0`` if equal, ``1`` if *a* > *b*.

    Raises:
        ValueError: Either argument has no ``major.minor.patch`` triple.

    Examples:
        >>> compare("1.2.3", "1.2.4")
        -1
        >>> compare("2.0.0", "1.9.9")
        1
    """
    left = _require_tuple(a)
    right = _require_tuple(b)
    return (left > right) - (left < right)


def is_prerelease(version: str) -> bool:
    """Return True if *version* carries a prerelease marker."""
    return PRERELEASE_MARKER in version


def has_build_metadata(version: str) -> bool:
    """Return True if *version* carries ``+build`` metadata."""
    return BUILD_MARKER in version


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Describe the distance between two versions.

    Args:
        current_version: Version currently declared.
        target_version: Version being offered.

    Returns:
        One of ``"major"``, ``"minor"``, ``"patch"``, ``"prerelease"``
        (same triple, suffix differs), ``"same"``, ``"downgrade"`` or
        ``"unknown"`` (either side missing or unparseable).

    Examples:
        >>> get_update_type("1.0.0", "2.0.0")
        'major'
        >>> get_update_type("1.0.0", "1.0.0-beta.2")
        'prerelease'
    """
    if current_version is None or target_version is None:
        return "unknown"

    current = parse_semver_tuple(current_version)
    target = parse_semver_tuple(target_version)
    if current is None or target is None:
        return "unknown"

    if target < current:
        return "downgrade"

    if target == current:
        return "same" if current_version == target_version else "prerelease"

    if target[0] != current[0]:
        return "major"
    if target[1] != current[1]:
        return "minor"
    return "patch"


def _require_tuple(version: str) -> SemverTuple:
    parsed = parse_semver_tuple(version)
    if parsed is None:
        raise ValueError(f"Not a semantic version: {version!r}")
    return parsed
