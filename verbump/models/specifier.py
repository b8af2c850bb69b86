"""
Version specifier data model for verbump.

A specifier is the full version string a manifest declares for one
dependency, split into the parts the registry does not care about
(protocol, alias, range prefix) and the semantic-version core that gets
compared and replaced.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, replace
from typing import Optional


class ProtocolKind(Enum):
    """Broad family of a specifier's protocol."""

    BARE = "bare"
    NPM = "npm"
    WORKSPACE = "workspace"
    CATALOG = "catalog"
    JSR = "jsr"
    OTHER = "other"

    @classmethod
    def from_protocol(cls, protocol: Optional[str]) -> "ProtocolKind":
        """Map a raw protocol name (or ``None``) to its kind."""
        if protocol is None:
            return cls.BARE
        try:
            return cls(protocol)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class VersionSpecifier:
    """Structured form of a declared dependency version.

    Attributes:
        semver: ``major.minor.patch`` core, optionally with prerelease
            and build suffixes.
        protocol: Protocol name without the trailing colon (``"npm"``,
            ``"workspace"``...), or ``None`` for a bare range.
        alias: Aliased package name for ``npm:name@1.0.0`` specifiers.
        prefix: Range operator preceding the core (``"^"``, ``"~"``,
            ``">="``...), empty for an exact version.

    Example::

        >>> VersionSpecifier(semver="1.0.0", protocol="npm", alias="lodash", prefix="^")
        VersionSpecifier(semver='1.0.0', protocol='npm', alias='lodash', prefix='^')
    """

    semver: str
    protocol: Optional[str] = None
    alias: Optional[str] = None
    prefix: str = ""

    @property
    def kind(self) -> ProtocolKind:
        return ProtocolKind.from_protocol(self.protocol)

    def with_semver(self, semver: str) -> "VersionSpecifier":
        """Return a copy with the core replaced, keeping the shape."""
        return replace(self, semver=semver)
