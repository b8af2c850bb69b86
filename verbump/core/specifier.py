"""Parsing and formatting of declared dependency versions.

A declared version such as ``npm:lodash@^4.17.21`` is split into its
protocol (``npm``), alias (``lodash``), range prefix (``^``) and
semantic-version core (``4.17.21``). :func:`format_version` is the exact
inverse, so an upgrade can swap the core while keeping everything else
the user wrote::

    >>> spec = parse_version("npm:lodash@^4.17.20")
    >>> format_version(spec.with_semver("4.17.21"))
    'npm:lodash@^4.17.21'

Strings without a recognizable ``major.minor.patch`` core (``latest``,
``1.x``, ``workspace:*``, git URLs, compound ranges...) yield ``None``.
"""

from __future__ import annotations

import re
from typing import Optional

from verbump.constants import SUPPORTED_PROTOCOLS
from verbump.models.specifier import VersionSpecifier

__all__ = ["parse_version", "format_version", "is_supported_protocol"]

_SPECIFIER_RE = re.compile(
    r"""
    (?:(?P<protocol>[a-z][a-z0-9+.-]*):)?
    (?:(?P<alias>(?:@[^\s@/]+/)?[^\s@/]+)@)?
    (?P<prefix>>=|<=|[\^~<>=]|v)?
    (?P<semver>
        \d+\.\d+\.\d+
        (?:-[0-9A-Za-z.-]+)?
        (?:\+[0-9A-Za-z.-]+)?
    )
    """,
    re.VERBOSE,
)


def parse_version(raw: str) -> Optional[VersionSpecifier]:
    """Parse a declared version string into a :class:`VersionSpecifier`.

    Args:
        raw: Version string exactly as declared in the manifest.

    Returns:
        The structured specifier, or ``None`` when no semantic-version
        core can be located. An alias is only accepted behind a protocol.

    Examples:
        >>> parse_version("^1.2.3")
        VersionSpecifier(semver='1.2.3', protocol=None, alias=None, prefix='^')
        >>> parse_version("workspace:*") is None
        True
    """
    match = _SPECIFIER_RE.fullmatch(raw)
    if match is None:
        return None

    protocol = match.group("protocol")
    alias = match.group("alias")
    if alias is not None and protocol is None:
        return None

    return VersionSpecifier(
        semver=match.group("semver"),
        protocol=protocol,
        alias=alias,
        prefix=match.group("prefix") or "",
    )


def format_version(specifier: VersionSpecifier) -> str:
    """Render a specifier back into a declared version string."""
    protocol = f"{specifier.protocol}:" if specifier.protocol else ""
    alias = f"{specifier.alias}@" if specifier.alias else ""
    return f"{protocol}{alias}{specifier.prefix}{specifier.semver}"


def is_supported_protocol(protocol: Optional[str]) -> bool:
    """Return True if versions behind *protocol* resolve on the registry."""
    return protocol in SUPPORTED_PROTOCOLS
