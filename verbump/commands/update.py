"""Update command implementation for verbump.

Rewrites dependency versions in a ``package.json`` to the target of one
upgrade tier, keeping each declared specifier's shape (``^``, ``~``,
``npm:`` aliases...).

Typical usage::

    # Bump every dependency to its latest dist-tag
    $ verbump update

    # Preview patch-level bumps for two packages
    $ verbump update --tier patch -p react -p react-dom --dry-run

    # Apply minor bumps with a backup, no prompt
    $ verbump update --tier minor --backup -y
"""

from __future__ import annotations

import sys
import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import click

from verbump.exceptions import VerbumpError
from verbump.constants import MANIFEST_FILE_NAME
from verbump.commands.check import load_plans
from verbump.context import pass_context, VerbumpContext
from verbump.core import UPGRADE_ORDER, DependencyPlan, UpgradeItem, apply_updates
from verbump.utils import (
    confirm,
    get_logger,
    get_update_type,
    print_error,
    print_success,
    print_table,
    print_warning,
    read_text_file,
    write_text_file,
    colorize_upgrade_type,
)

logger = get_logger("commands.update")


@click.command()
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=MANIFEST_FILE_NAME,
)
@click.option(
    "--tier",
    "-t",
    type=click.Choice(list(UPGRADE_ORDER), case_sensitive=False),
    default="latest",
    show_default=True,
    help="Upgrade tier to apply.",
)
@click.option(
    "--packages",
    "-p",
    multiple=True,
    help="Update only specific packages (can be repeated).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Preview changes without applying them.",
)
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Skip confirmation prompt.",
)
@click.option(
    "--backup",
    is_flag=True,
    help="Create backup file before updating.",
)
@click.option(
    "--allow-downgrade",
    is_flag=True,
    help="Apply targets older than the declared version.",
)
@pass_context
def update(
    ctx: VerbumpContext,
    file: Path,
    tier: str,
    packages: Tuple[str, ...],
    dry_run: bool,
    yes: bool,
    backup: bool,
    allow_downgrade: bool,
) -> None:
    """Update dependencies in a package.json to one upgrade tier.

    For ``patch`` and ``minor``, a dependency whose best target in that
    tier is the ``latest`` dist-tag is bumped to ``latest``. A target older
    than the declared version (a ``latest`` tag behind a declared
    prerelease, say) is skipped unless ``--allow-downgrade`` is given.
    """
    try:
        plans = asyncio.run(load_plans(ctx, file))
    except VerbumpError as e:
        print_error(f"{e}")
        sys.exit(1)

    if packages:
        wanted = set(packages)
        unknown = wanted - {plan.dependency.name for plan in plans}
        for name in sorted(unknown):
            print_warning(f"Package not found in manifest: {name}")
        plans = [plan for plan in plans if plan.dependency.name in wanted]

    selected: List[Tuple[DependencyPlan, UpgradeItem]] = []
    for plan in plans:
        item = select_item(plan, tier)
        if item is None:
            continue
        if not allow_downgrade and is_downgrade(plan, item):
            print_warning(
                f"Skipping {plan.dependency.name}: {item.target_version} is older than "
                f"{plan.current_version} (use --allow-downgrade to apply)"
            )
            continue
        selected.append((plan, item))

    if not selected:
        print_success(f"No {tier} upgrades available")
        return

    _display_changes(selected)

    if dry_run:
        print_warning("Dry run: no changes written")
        return

    if not yes and not confirm(f"Apply {len(selected)} update(s) to {file}?"):
        print_warning("Update cancelled")
        return

    updates: Dict[Tuple[str, str], str] = {
        (plan.dependency.section, plan.dependency.name): item.new_version
        for plan, item in selected
    }
    try:
        text = read_text_file(file)
        backup_path = write_text_file(
            file,
            apply_updates(text, updates, file_path=str(file)),
            backup=backup,
        )
    except VerbumpError as e:
        print_error(f"{e}")
        sys.exit(1)

    if backup_path:
        logger.info("Backup written to %s", backup_path)
        print_success(f"Backup created: {backup_path}")
    print_success(f"Updated {len(selected)} dependency(ies) in {file}")


def select_item(plan: DependencyPlan, tier: str) -> Optional[UpgradeItem]:
    """Pick the item to apply for *tier*, if any.

    Tier entries equal to ``latest`` are folded into the ``latest`` item,
    so for ``patch``/``minor``/``major`` that item is used when its
    distance from the current version matches the tier.
    """
    item = plan.get_item(tier)
    if item is not None or tier in ("latest", "prerelease"):
        return item

    latest = plan.get_item("latest")
    if latest is not None and get_update_type(plan.current_version, latest.target_version) == tier:
        return latest
    return None


def is_downgrade(plan: DependencyPlan, item: UpgradeItem) -> bool:
    return get_update_type(plan.current_version, item.target_version) == "downgrade"


def _display_changes(selected: List[Tuple[DependencyPlan, UpgradeItem]]) -> None:
    data = [
        {
            "Package": plan.dependency.name,
            "Section": plan.dependency.section,
            "Current": plan.dependency.version,
            "New": item.new_version,
            "Type": colorize_upgrade_type(
                get_update_type(plan.current_version, item.target_version)
            ),
        }
        for plan, item in selected
    ]
    print_table(
        data,
        title="Planned Updates",
        column_styles={
            "Package": {"style": "bold cyan", "no_wrap": True},
            "Current": {"style": "dim", "justify": "center"},
            "New": {"style": "bold green", "justify": "center"},
            "Type": {"justify": "center"},
        },
    )
