"""
Unified data model exports for verbump.

Example:
    >>> from verbump.models import Dependency, UpgradeOptions, VersionSpecifier
"""

from __future__ import annotations

from verbump.models.dependency import Dependency
from verbump.models.upgrade import UPGRADE_TIERS, UpgradeOptions
from verbump.models.specifier import ProtocolKind, VersionSpecifier
from verbump.models.packument import ResolvedPackument, ResolvedPackumentVersion

__all__ = [
    "Dependency",
    "ProtocolKind",
    "ResolvedPackument",
    "ResolvedPackumentVersion",
    "UPGRADE_TIERS",
    "UpgradeOptions",
    "VersionSpecifier",
]
