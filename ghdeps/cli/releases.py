"""
CLI release commands — resolve release assets and query latest versions.

Usage:
    ghdeps resolve OWNER NAME VERSION
    ghdeps latest OWNER NAME
"""

from __future__ import annotations

import click

from .common import reports_errors


@click.command("resolve")
@click.argument("owner")
@click.argument("name")
@click.argument("version")
@click.pass_context
@reports_errors
def resolve(ctx: click.Context, owner: str, name: str, version: str) -> None:
    """Download (or reuse) the NAME.jar asset of a release and print its path."""
    from . import common

    settings = ctx.obj["settings"]
    with common.open_client(settings) as client:
        path = common.release_cache(settings, client).resolve(owner, name, version)
    click.echo(str(path))


@click.command("latest")
@click.argument("owner")
@click.argument("name")
@click.pass_context
@reports_errors
def latest(ctx: click.Context, owner: str, name: str) -> None:
    """Print the tag of the latest release."""
    from . import common

    settings = ctx.obj["settings"]
    with common.open_client(settings) as client:
        version = common.release_cache(settings, client).latest_version(owner, name)

    if version is None:
        click.echo(f"No releases found for {owner}/{name}")
        return
    click.echo(version)
