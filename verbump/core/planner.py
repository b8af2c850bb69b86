"""Per-dependency upgrade plans.

Ties the pieces together for one manifest entry: parse the declared
version, look the package up in the :class:`PackumentStore`, classify
the registry versions and render every target back into the shape the
user declared. The result is plain data; rendering it (annotations,
tables, quick fixes) is up to the caller.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from verbump.models.upgrade import UpgradeOptions
from verbump.models.dependency import Dependency
from verbump.models.specifier import VersionSpecifier
from verbump.core.classifier import get_upgrade_options
from verbump.core.data_store import PackumentStore, PendingPackument
from verbump.core.specifier import format_version, is_supported_protocol, parse_version

__all__ = [
    "UPGRADE_LABELS",
    "UPGRADE_ORDER",
    "DependencyPlan",
    "PlanStatus",
    "UpgradeItem",
    "UpgradePlanner",
    "build_upgrade_items",
    "package_name_for",
]

#: Display order of upgrade targets.
UPGRADE_ORDER: Tuple[str, ...] = ("latest", "major", "minor", "patch", "prerelease")

#: Short labels for each upgrade type.
UPGRADE_LABELS: Mapping[str, str] = {
    "latest": "latest",
    "major": "major",
    "minor": "minor",
    "patch": "patch",
    "prerelease": "pre",
}


class PlanStatus(Enum):
    """Outcome of planning one dependency."""

    UNSUPPORTED = "unsupported"
    PENDING = "pending"
    UNKNOWN = "unknown"
    ERROR = "error"
    UP_TO_DATE = "up-to-date"
    UPGRADE = "upgrade"


@dataclass(frozen=True)
class UpgradeItem:
    """One upgrade a user can apply.

    Attributes:
        upgrade_type: Tier name from :data:`UPGRADE_ORDER`.
        target_version: Registry version being offered.
        new_version: Full declared string to write back, e.g.
            ``"^2.0.0"`` for a ``"^1.4.0"`` dependency.
    """

    upgrade_type: str
    target_version: str
    new_version: str

    @property
    def label(self) -> str:
        return UPGRADE_LABELS[self.upgrade_type]


@dataclass
class DependencyPlan:
    """Upgrade plan for a single dependency."""

    dependency: Dependency
    status: PlanStatus
    specifier: Optional[VersionSpecifier] = None
    options: Optional[UpgradeOptions] = None
    items: List[UpgradeItem] = field(default_factory=list)
    pending: Optional[PendingPackument] = field(default=None, repr=False)
    error: Optional[BaseException] = field(default=None, repr=False)

    @property
    def current_version(self) -> Optional[str]:
        return self.specifier.semver if self.specifier else None

    def has_upgrade(self) -> bool:
        return self.status is PlanStatus.UPGRADE

    def get_item(self, upgrade_type: str) -> Optional[UpgradeItem]:
        """Return the item for *upgrade_type*, or ``None``."""
        for item in self.items:
            if item.upgrade_type == upgrade_type:
                return item
        return None

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable summary."""
        return {
            "name": self.dependency.name,
            "section": self.dependency.section,
            "declared": self.dependency.version,
            "current": self.current_version,
            "status": self.status.value,
            "latest": self.options.latest if self.options else None,
            "error": str(self.error) if self.error else None,
            "upgrades": [
                {
                    "type": item.upgrade_type,
                    "target": item.target_version,
                    "new_version": item.new_version,
                }
                for item in self.items
            ],
        }


def build_upgrade_items(
    specifier: VersionSpecifier,
    options: UpgradeOptions,
    *,
    include_prerelease: bool = True,
) -> List[UpgradeItem]:
    """Turn classified options into ordered, applicable upgrade items.

    ``latest`` is skipped when it equals the current core, since applying
    it would change nothing.
    """
    items: List[UpgradeItem] = []

    for upgrade_type in UPGRADE_ORDER:
        if upgrade_type == "prerelease" and not include_prerelease:
            continue

        if upgrade_type == "latest":
            target = options.latest if options.latest != specifier.semver else None
        else:
            target = options.get(upgrade_type)

        if not target:
            continue

        items.append(
            UpgradeItem(
                upgrade_type=upgrade_type,
                target_version=target,
                new_version=format_version(specifier.with_semver(target)),
            )
        )

    return items


class UpgradePlanner:
    """Builds :class:`DependencyPlan` objects from a shared store.

    Planning never waits: a dependency whose packument is still being
    fetched gets a ``PENDING`` plan carrying the store's handle, so the
    caller can re-plan once it completes.

    Args:
        store: Shared :class:`PackumentStore`.
        include_prerelease: Offer the prerelease tier.
    """

    def __init__(self, store: PackumentStore, *, include_prerelease: bool = True) -> None:
        self.store = store
        self.include_prerelease = include_prerelease

    def plan(
        self,
        dependency: Dependency,
        *,
        failures: Optional[Mapping[str, BaseException]] = None,
    ) -> DependencyPlan:
        """Plan upgrades for *dependency*.

        Args:
            dependency: Manifest entry to plan.
            failures: Package names whose fetch already failed (as returned
                by :meth:`PackumentStore.prefetch`). Such names get an
                ``ERROR`` plan instead of a new fetch.
        """
        specifier = parse_version(dependency.version)
        if specifier is None or not is_supported_protocol(specifier.protocol):
            return DependencyPlan(dependency, PlanStatus.UNSUPPORTED, specifier)

        package_name = package_name_for(dependency, specifier)
        if failures and package_name in failures:
            return DependencyPlan(
                dependency, PlanStatus.ERROR, specifier, error=failures[package_name]
            )

        packument = self.store.get(package_name)
        if isinstance(packument, PendingPackument):
            return DependencyPlan(
                dependency, PlanStatus.PENDING, specifier, pending=packument
            )

        latest = packument.latest
        if not latest:
            return DependencyPlan(dependency, PlanStatus.UNKNOWN, specifier)

        options = get_upgrade_options(specifier.semver, packument.versions, latest)
        items = build_upgrade_items(
            specifier, options, include_prerelease=self.include_prerelease
        )
        status = PlanStatus.UPGRADE if items else PlanStatus.UP_TO_DATE
        return DependencyPlan(dependency, status, specifier, options, items)

    def plan_all(
        self,
        dependencies: List[Dependency],
        *,
        failures: Optional[Mapping[str, BaseException]] = None,
    ) -> List[DependencyPlan]:
        """Plan each of *dependencies* in order; see :meth:`plan`."""
        return [self.plan(dep, failures=failures) for dep in dependencies]

    async def resolve(self, dependencies: List[Dependency]) -> List[DependencyPlan]:
        """Fetch every needed packument, then plan all *dependencies*.

        Unlike :meth:`plan`, the returned plans are never ``PENDING``:
        names whose fetch failed come back as ``ERROR`` plans.
        """
        names: List[str] = []
        for dependency in dependencies:
            specifier = parse_version(dependency.version)
            if specifier is not None and is_supported_protocol(specifier.protocol):
                names.append(package_name_for(dependency, specifier))

        failures = await self.store.prefetch(names)
        return self.plan_all(dependencies, failures=failures)


def package_name_for(dependency: Dependency, specifier: Optional[VersionSpecifier]) -> str:
    """Registry name to look up; aliased dependencies resolve to the alias."""
    if specifier is not None and specifier.alias:
        return specifier.alias
    return dependency.name
