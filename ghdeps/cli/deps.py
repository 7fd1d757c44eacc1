"""
CLI dependency commands — list, update and resolve declared dependencies.

Usage:
    ghdeps print-deps [--json]
    ghdeps update-deps [--dry-run]
    ghdeps classpath [--json]
"""

from __future__ import annotations

import json

import click

from .common import reports_errors


@click.command("print-deps")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@reports_errors
def print_deps(ctx: click.Context, as_json: bool) -> None:
    """List the GitHub dependencies declared across the project tree."""
    from ..deps.scanner import ProjectTree

    declared = ProjectTree(ctx.obj["root"]).declarations()

    if as_json:
        click.echo(json.dumps(
            [{"group": d.group, "name": d.name, "version": d.version} for d in declared],
            indent=2,
        ))
        return

    if not declared:
        click.echo("No GitHub dependencies declared.")
        return
    click.echo("GitHub dependencies:")
    for dep in declared:
        click.echo(f"  - {dep.coordinate}")


@click.command("update-deps")
@click.option("--dry-run", is_flag=True, help="Show the planned updates without writing")
@click.pass_context
@reports_errors
def update_deps(ctx: click.Context, dry_run: bool) -> None:
    """Bump declared dependencies to their latest release."""
    from . import common
    from ..deps.resolution import ResolutionState
    from ..deps.scanner import ProjectTree
    from ..deps.updater import DependencyUpdater

    root = ctx.obj["root"]
    settings = ctx.obj["settings"]
    tree = ProjectTree(root)
    declared = tree.declarations()

    with common.open_client(settings) as client:
        cache = common.release_cache(settings, client)
        updater = DependencyUpdater(
            cache.latest_version,
            resolution=ResolutionState(root),
            resolver=cache.resolve_dependency,
        )
        plan = updater.plan(declared)

        if not plan:
            click.secho("✅ All dependencies are up to date", fg="green")
            return

        for update in plan:
            click.echo(f"  {update.search} → {update.new_version}")

        if dry_run:
            click.echo(f"\n{len(plan)} update(s) planned (dry run, nothing written)")
            return

        changed = updater.apply(plan, tree.build_files(), declared=declared)

    click.secho(f"\n✅ Updated {len(plan)} dependency(ies) in {len(changed)} file(s)", fg="green")


@click.command("classpath")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@reports_errors
def classpath(ctx: click.Context, as_json: bool) -> None:
    """Resolve every declared dependency to a cached jar and record the result."""
    from . import common
    from ..deps.resolution import STANDARD_CLASSPATHS, ResolutionState
    from ..deps.scanner import ProjectTree

    root = ctx.obj["root"]
    settings = ctx.obj["settings"]
    declared = ProjectTree(root).declarations()
    state = ResolutionState(root)

    with common.open_client(settings) as client:
        cache = common.release_cache(settings, client)
        artifacts = state.resolve_all(declared, cache.resolve_dependency, STANDARD_CLASSPATHS[0])
    for name in STANDARD_CLASSPATHS[1:]:
        state.record(name, artifacts)

    if as_json:
        click.echo(json.dumps({k: str(v) for k, v in artifacts.items()}, indent=2))
        return
    for path in artifacts.values():
        click.echo(str(path))
