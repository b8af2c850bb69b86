"""
Registry metadata data model for verbump.

A *packument* is the registry's full metadata document for one package.
verbump keeps a compact, normalized view of it: one entry per published
version plus the dist-tag pointers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from verbump.constants import LATEST_DIST_TAG


@dataclass(frozen=True)
class ResolvedPackumentVersion:
    """Metadata kept for a single published version.

    Attributes:
        version: Version string as published.
        dist_tag: Name of a dist-tag pointing at this version, if any.
        has_provenance: Whether the upload carries provenance attestations.
        deprecated: Deprecation message, if the version was deprecated.
    """

    version: str
    dist_tag: Optional[str] = None
    has_provenance: bool = False
    deprecated: Optional[str] = None


@dataclass(frozen=True)
class ResolvedPackument:
    """Normalized snapshot of one package's version history.

    Created once per package name by the data store and never mutated
    afterwards.

    Attributes:
        name: Package name the snapshot was fetched for.
        versions: Version string to its metadata, in registry order.
        dist_tags: Dist-tag name to version, as published.
    """

    name: str
    versions: Dict[str, ResolvedPackumentVersion] = field(default_factory=dict)
    dist_tags: Dict[str, str] = field(default_factory=dict)

    @property
    def latest(self) -> Optional[str]:
        """Version the ``latest`` dist-tag points at."""
        return self.dist_tags.get(LATEST_DIST_TAG)

    def version_list(self) -> List[str]:
        return list(self.versions)

    def is_deprecated(self, version: str) -> bool:
        meta = self.versions.get(version)
        return bool(meta and meta.deprecated)
