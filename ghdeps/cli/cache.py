"""
CLI cache commands — inspect and prune the release asset cache.

Usage:
    ghdeps cache-status [--json]
    ghdeps cache-prune --older-than DAYS
"""

from __future__ import annotations

import json

import click

from .common import reports_errors


@click.command("cache-status")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@reports_errors
def cache_status(ctx: click.Context, as_json: bool) -> None:
    """Show the cache location and the cached release assets."""
    from ..releases.cache import ReleaseAssetCache

    settings = ctx.obj["settings"]
    cache = ReleaseAssetCache(settings.assets_dir)
    entries = cache.entries()

    if as_json:
        click.echo(json.dumps({
            "cache_root": str(settings.cache_root),
            "assets": [e.to_dict() for e in entries],
        }, indent=2))
        return

    click.echo(f"\n📦 Cache: {settings.cache_root}\n")
    if not entries:
        click.echo("  No cached assets.")
        return
    total = sum(e.size for e in entries)
    for e in entries:
        click.echo(f"  {e.owner}/{e.file_name}  ({e.size} bytes)")
    click.echo(f"\n  {len(entries)} asset(s), {total} bytes")


@click.command("cache-prune")
@click.option("--older-than", "older_than", type=float, required=True,
              help="Remove assets not modified for this many days")
@click.pass_context
@reports_errors
def cache_prune(ctx: click.Context, older_than: float) -> None:
    """Delete cached release assets older than N days."""
    from ..releases.cache import ReleaseAssetCache

    settings = ctx.obj["settings"]
    removed = ReleaseAssetCache(settings.assets_dir).prune(older_than)
    click.echo(f"Removed {len(removed)} cached asset(s)")
