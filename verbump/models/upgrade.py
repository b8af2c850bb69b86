"""
Upgrade option data model for verbump.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

#: Upgrade tiers besides ``latest``, in the order they are computed.
UPGRADE_TIERS: Tuple[str, ...] = ("major", "minor", "patch", "prerelease")


@dataclass(frozen=True)
class UpgradeOptions:
    """Best available version per upgrade tier.

    ``latest`` mirrors the registry's ``latest`` dist-tag and is always
    set, even when it equals the current version. Every other field is
    either ``None`` or a version newer than the current one in its tier
    and different from ``latest``.
    """

    latest: str
    major: Optional[str] = None
    minor: Optional[str] = None
    patch: Optional[str] = None
    prerelease: Optional[str] = None

    def get(self, tier: str) -> Optional[str]:
        """Return the target for *tier* (``"latest"`` included)."""
        if tier != "latest" and tier not in UPGRADE_TIERS:
            raise KeyError(tier)
        return getattr(self, tier)

    def as_dict(self) -> Dict[str, str]:
        """Return only the populated fields."""
        result = {"latest": self.latest}
        for tier in UPGRADE_TIERS:
            value = getattr(self, tier)
            if value is not None:
                result[tier] = value
        return result
