"""
Shared context object for verbump CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from verbump.config import VerbumpConfig


class VerbumpContext:
    """Global context object for verbump CLI commands.

    Created once per CLI invocation and passed to commands through
    Click's context mechanism.

    Attributes:
        config_path: Path to the verbump configuration file, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: VerbumpConfig = VerbumpConfig()


#: Click decorator for injecting :class:`VerbumpContext` into commands.
pass_context = click.make_pass_decorator(VerbumpContext, ensure=True)
