"""Check command implementation for verbump.

Reads a ``package.json``, looks every dependency up on the registry and
reports the upgrade targets available per tier.

Typical usage::

    # Table of every dependency
    $ verbump check

    # Only dependencies with upgrades, machine-readable
    $ verbump check web/package.json --outdated-only --format json
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from pathlib import Path
from typing import Any, Dict, List

from verbump.exceptions import VerbumpError
from verbump.constants import MANIFEST_FILE_NAME
from verbump.context import pass_context, VerbumpContext
from verbump.core import (
    DependencyPlan,
    ManifestParser,
    NpmRegistryClient,
    PackumentStore,
    PlanStatus,
    UpgradePlanner,
)
from verbump.utils import (
    HTTPClient,
    get_logger,
    print_success,
    print_error,
    print_warning,
    print_table,
    get_console,
    colorize_upgrade_type,
)

logger = get_logger("commands.check")

_STATUS_DISPLAY = {
    PlanStatus.UPGRADE: "[yellow]⬆ OUTDATED[/yellow]",
    PlanStatus.UP_TO_DATE: "[green]✓ OK[/green]",
    PlanStatus.UNKNOWN: "[dim]? UNKNOWN[/dim]",
    PlanStatus.UNSUPPORTED: "[dim]- SKIPPED[/dim]",
    PlanStatus.ERROR: "[red]✗ ERROR[/red]",
    PlanStatus.PENDING: "[dim]… PENDING[/dim]",
}


@click.command()
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=MANIFEST_FILE_NAME,
)
@click.option(
    "--outdated-only",
    is_flag=True,
    help="Show only dependencies with available upgrades.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "simple", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def check(
    ctx: VerbumpContext,
    file: Path,
    outdated_only: bool,
    format: str,
) -> None:
    """Check a package.json for available dependency upgrades.

    Exits with 0 when every dependency is up to date and 1 when upgrades
    are available or an error occurred.
    """
    try:
        has_upgrades = asyncio.run(_check_async(ctx, file, outdated_only, format))
    except VerbumpError as e:
        print_error(f"{e}")
        sys.exit(1)

    sys.exit(1 if has_upgrades else 0)


async def load_plans(ctx: VerbumpContext, file: Path) -> List[DependencyPlan]:
    """Parse *file* and resolve an upgrade plan per dependency.

    Shared by ``check`` and ``update``: one store, so every package is
    fetched once.
    """
    config = ctx.config
    dependencies = ManifestParser(config.dependency_types).parse_file(file)
    logger.info("Found %d dependencies in %s", len(dependencies), file)
    if not dependencies:
        return []

    async with HTTPClient() as http:
        store = PackumentStore(NpmRegistryClient(http, config.registry_url))
        planner = UpgradePlanner(store, include_prerelease=config.show_prerelease)
        plans = await planner.resolve(dependencies)

    for plan in plans:
        if plan.status is PlanStatus.ERROR:
            logger.warning("Lookup failed for %s: %s", plan.dependency.name, plan.error)
    return plans


async def _check_async(
    ctx: VerbumpContext,
    file: Path,
    outdated_only: bool,
    format: str,
) -> bool:
    """Resolve and display plans; return True if any upgrade exists."""
    show_progress = format == "table" or ctx.verbose > 0

    plans = await load_plans(ctx, file)
    if not plans:
        if show_progress:
            print_warning("No dependencies found in manifest")
        return False

    upgradable = sum(1 for plan in plans if plan.has_upgrade())

    if outdated_only:
        plans = [plan for plan in plans if plan.has_upgrade()]

    if not plans:
        if show_progress:
            print_success("All dependencies are up to date!")
        return False

    if format == "table":
        _display_table(plans)
    elif format == "simple":
        _display_simple(plans)
    else:
        _display_json(plans)

    if show_progress:
        if upgradable:
            print_warning(f"\n{upgradable} dependency(ies) have upgrades available")
        else:
            print_success("\nAll dependencies are up to date!")

    return upgradable > 0


def _display_table(plans: List[DependencyPlan]) -> None:
    data = [_create_table_row(plan) for plan in plans]

    column_styles: Dict[str, Dict[str, Any]] = {
        "Status": {"justify": "center", "no_wrap": True},
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Section": {"style": "dim"},
        "Declared": {"justify": "center"},
        "Latest": {"justify": "center", "style": "bold green"},
        "Upgrades": {"justify": "left"},
    }

    print_table(
        data,
        title="Dependency Upgrades",
        column_styles=column_styles,
        show_lines=True,
    )


def _create_table_row(plan: DependencyPlan) -> Dict[str, str]:
    """Build a Rich-markup row for one plan.

    Example::

        {
            "Status": "[yellow]⬆ OUTDATED[/yellow]",
            "Package": "react",
            "Section": "dependencies",
            "Declared": "^17.0.2",
            "Latest": "18.2.0",
            "Upgrades": "[cyan]latest[/cyan] ^18.2.0",
        }
    """
    upgrades = "\n".join(
        f"{colorize_upgrade_type(item.label)} {item.new_version}" for item in plan.items
    )
    return {
        "Status": _STATUS_DISPLAY[plan.status],
        "Package": plan.dependency.name,
        "Section": plan.dependency.section,
        "Declared": plan.dependency.version,
        "Latest": plan.options.latest if plan.options else "[dim]-[/dim]",
        "Upgrades": upgrades or "[dim]-[/dim]",
    }


def _display_simple(plans: List[DependencyPlan]) -> None:
    """One line per dependency, upgrade targets indented below.

    Example::

        [upgrade] react                ^17.0.2
               ↑ latest 18.2.0 (^18.2.0)
               ↑ minor 17.1.0 (^17.1.0)
    """
    console = get_console()

    for plan in plans:
        console.print(
            f"[{plan.status.value}] {plan.dependency.name:20} {plan.dependency.version}",
            markup=False,
        )
        for item in plan.items:
            console.print(
                f"       ↑ {item.label} {item.target_version} ({item.new_version})",
                markup=False,
            )
        if plan.error is not None:
            console.print(f"       ✗ {plan.error}", markup=False)


def _display_json(plans: List[DependencyPlan]) -> None:
    print(json.dumps([plan.to_json() for plan in plans], indent=2))
