"""
Core functionality exports for verbump.

    from verbump.core import PackumentStore, get_upgrade_options
"""

from __future__ import annotations

from verbump.core.classifier import get_upgrade_options
from verbump.core.manifest import ManifestParser, apply_updates
from verbump.core.registry import NpmRegistryClient, encode_package_name
from verbump.core.specifier import format_version, is_supported_protocol, parse_version
from verbump.core.data_store import (
    PackumentStore,
    PendingPackument,
    normalize_packument,
)
from verbump.core.planner import (
    UPGRADE_ORDER,
    DependencyPlan,
    PlanStatus,
    UpgradeItem,
    UpgradePlanner,
    build_upgrade_items,
)

__all__ = [
    "DependencyPlan",
    "ManifestParser",
    "NpmRegistryClient",
    "PackumentStore",
    "PendingPackument",
    "PlanStatus",
    "UPGRADE_ORDER",
    "UpgradeItem",
    "UpgradePlanner",
    "apply_updates",
    "build_upgrade_items",
    "encode_package_name",
    "format_version",
    "get_upgrade_options",
    "is_supported_protocol",
    "normalize_packument",
    "parse_version",
]
