"""
Dependency data model for verbump.
"""

from __future__ import annotations

from dataclasses import dataclass

from verbump.constants import DEPENDENCY_SECTIONS


@dataclass(frozen=True)
class Dependency:
    """One entry of a manifest dependency section.

    Attributes:
        name: Package name as declared (e.g. ``"@types/node"``).
        version: Raw declared version string (e.g. ``"^18.11.0"``).
        section: Manifest section the entry comes from.
    """

    name: str
    version: str
    section: str = DEPENDENCY_SECTIONS[0]

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"
