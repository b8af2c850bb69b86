"""
verbump — dependency upgrade detection for npm package manifests.

Given the declared version of a dependency, verbump finds the newer
versions published to the registry and classifies them into upgrade
tiers (patch, minor, major, prerelease and the ``latest`` dist-tag).

Typical usage::

    from verbump import Dependency, PackumentStore, UpgradePlanner
    from verbump.core import NpmRegistryClient
    from verbump.utils import HTTPClient

    async with HTTPClient() as http:
        store = PackumentStore(NpmRegistryClient(http))
        await store.fetch("react")
        plan = UpgradePlanner(store).plan(Dependency("react", "^17.0.2"))
"""

from __future__ import annotations

from verbump.__version__ import __version__
from verbump.core import (
    PackumentStore,
    PendingPackument,
    UpgradePlanner,
    format_version,
    get_upgrade_options,
    parse_version,
)
from verbump.models import Dependency, UpgradeOptions, VersionSpecifier
from verbump.utils.version_utils import compare, parse_semver_tuple

__author__ = "verbump Contributors"
__license__ = "MIT"
__description__ = "Dependency upgrade detection for npm package manifests."

__all__ = [
    "__version__",
    "Dependency",
    "PackumentStore",
    "PendingPackument",
    "UpgradeOptions",
    "UpgradePlanner",
    "VersionSpecifier",
    "compare",
    "format_version",
    "get_upgrade_options",
    "parse_semver_tuple",
    "parse_version",
]
