"""
CLI resource commands — mirror a resource repository into the project.

Usage:
    ghdeps sync-resources [--build-only]
"""

from __future__ import annotations

import click

from .common import reports_errors


@click.command("sync-resources")
@click.option("--build-only", is_flag=True,
              help="Copy into build/resources instead of the source dirs")
@click.pass_context
@reports_errors
def sync_resources(ctx: click.Context, build_only: bool) -> None:
    """Synchronize the resource mirror and copy its content into the project."""
    from ..mirror.repository import RepositoryMirror
    from ..mirror.resources import ResourceSync

    root = ctx.obj["root"]
    settings = ctx.obj["settings"]
    resources = ctx.obj["project"].resources

    if not resources.configured:
        click.echo("No resources repository configured (resources.repo_url in ghdeps.yaml).")
        return
    if build_only:
        resources = resources.model_copy(update={"build_only": True})

    mirror = RepositoryMirror(settings.transport())
    written = ResourceSync(mirror, settings.resources_dir).place(root, resources)

    click.secho(f"✅ Resources synchronized from {resources.repo_url}", fg="green")
    for dest in written:
        click.echo(f"  → {dest}")
