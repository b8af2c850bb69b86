"""
Executable module for verbump.

``python -m verbump`` is equivalent to ``verbump``.
"""

from __future__ import annotations

import sys


def main() -> int:
    """Run the CLI and return its exit code."""
    from verbump.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
