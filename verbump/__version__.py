"""
verbump version information.

Single source of truth for the package version. Follows Semantic
Versioning: https://semver.org/
"""

from __future__ import annotations

__version__ = "0.1.0"
