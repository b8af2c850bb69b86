"""Upgrade tier classification.

Given the version a manifest currently declares, every version the
registry knows and the ``latest`` dist-tag, :func:`get_upgrade_options`
picks the best target in each tier:

- **patch**: same major and minor, greater patch
- **minor**: same major, greater minor
- **major**: greater major
- **prerelease**: the ``latest`` tag itself, when it is a prerelease and
  the current version is not
- **latest**: the ``latest`` tag, always reported

Prerelease versions never compete for patch/minor/major. A tier whose
best candidate is the ``latest`` tag is left empty so that the same
target is not offered twice.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from verbump.models.upgrade import UpgradeOptions
from verbump.utils.version_utils import (
    compare,
    has_build_metadata,
    is_prerelease,
    parse_semver_tuple,
)

__all__ = ["get_upgrade_options"]


def get_upgrade_options(
    current: str,
    candidates: Iterable[str],
    dist_tag_latest: str,
) -> UpgradeOptions:
    """Classify *candidates* into upgrade tiers relative to *current*.

    Args:
        current: Semantic-version core currently declared (no protocol
            or range prefix).
        candidates: Every known version of the package.
        dist_tag_latest: Version the registry's ``latest`` tag points at.

    Returns:
        :class:`UpgradeOptions` with ``latest`` always set and each other
        tier set only when a distinct, newer target exists.

    Example::

        >>> get_upgrade_options("1.2.3", ["1.2.4", "1.3.0", "2.0.0"], "2.0.0")
        UpgradeOptions(latest='2.0.0', major=None, minor='1.3.0', patch='1.2.4', prerelease=None)
    """
    current_tuple = parse_semver_tuple(current)
    if current_tuple is None:
        return UpgradeOptions(latest=dist_tag_latest)

    cur_major, cur_minor, cur_patch = current_tuple
    best: Dict[str, Optional[str]] = {"major": None, "minor": None, "patch": None}

    for version in candidates:
        if is_prerelease(version):
            continue
        version_tuple = parse_semver_tuple(version)
        if version_tuple is None:
            continue

        major, minor, patch = version_tuple
        if major == cur_major and minor == cur_minor and patch > cur_patch:
            best["patch"] = _greater(best["patch"], version)
        if major == cur_major and minor > cur_minor:
            best["minor"] = _greater(best["minor"], version)
        if major > cur_major:
            best["major"] = _greater(best["major"], version)

    tiers: Dict[str, str] = {}
    if dist_tag_latest != current:
        for tier, target in best.items():
            if target is not None and target != dist_tag_latest:
                tiers[tier] = target

    if is_prerelease(dist_tag_latest) and not is_prerelease(current):
        tiers["prerelease"] = dist_tag_latest

    return UpgradeOptions(latest=dist_tag_latest, **tiers)


def _greater(best: Optional[str], version: str) -> str:
    """Return the greater of the tier's best so far and *version*.

    Equal triples prefer a version without build metadata, then the
    greater literal string, so the winner does not depend on input order.
    """
    if best is None:
        return version

    order = compare(version, best)
    if order == 0:
        key = (not has_build_metadata(version), version)
        best_key = (not has_build_metadata(best), best)
        return version if key > best_key else best
    return version if order > 0 else best
