"""
Utility helpers for verbump: terminal output, logging, manifest file IO,
the registry HTTP client and semver comparison.
"""

from __future__ import annotations

from verbump.utils.filesystem import backup_file, read_text_file, write_text_file
from verbump.utils.logger import get_logger, setup_logging
from verbump.utils.console import (
    colorize_upgrade_type,
    confirm,
    get_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reset_console,
)
from verbump.utils.http import HTTPClient
from verbump.utils.version_utils import (
    compare,
    get_update_type,
    is_prerelease,
    parse_semver_tuple,
)

__all__ = [
    "HTTPClient",
    "backup_file",
    "colorize_upgrade_type",
    "compare",
    "confirm",
    "get_console",
    "get_logger",
    "get_update_type",
    "is_prerelease",
    "parse_semver_tuple",
    "print_error",
    "print_success",
    "print_table",
    "print_warning",
    "read_text_file",
    "reset_console",
    "setup_logging",
    "write_text_file",
]
