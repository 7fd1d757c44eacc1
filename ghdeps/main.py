"""
ghdeps — CLI Entry Point

Usage:
    ghdeps [--project-dir DIR] [--debug] sync-resources
    ghdeps resolve OWNER NAME VERSION
    ghdeps latest OWNER NAME
    ghdeps print-deps [--json]
    ghdeps update-deps [--dry-run]
    ghdeps classpath [--json]
    ghdeps cache-status [--json]
    ghdeps cache-prune --older-than DAYS
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from . import __version__
from .cli.cache import cache_prune, cache_status
from .cli.deps import classpath, print_deps, update_deps
from .cli.releases import latest, resolve
from .cli.resources import sync_resources
from .config.project import load_project_config
from .config.settings import Settings
from .errors import GhDepsError
from .logging_config import setup_logging


@click.group()
@click.option("--project-dir", type=click.Path(file_okay=False, path_type=Path),
              default=".", help="Project root (default: current directory)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="ghdeps")
@click.pass_context
def cli(ctx: click.Context, project_dir: Path, debug: bool) -> None:
    """ghdeps — GitHub releases and repositories as build dependencies."""
    root = project_dir.resolve()
    env_file = root / ".env"
    if env_file.exists():
        load_dotenv(env_file)

    setup_logging()

    try:
        project = load_project_config(root)
        settings = project.apply_to(Settings.from_env())
    except GhDepsError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        raise SystemExit(1)

    if debug or settings.debug:
        setup_logging(level="DEBUG")

    ctx.ensure_object(dict)
    ctx.obj["root"] = root
    ctx.obj["project"] = project
    ctx.obj["settings"] = settings


# Resources
cli.add_command(sync_resources)

# Releases
cli.add_command(resolve)
cli.add_command(latest)

# Dependencies
cli.add_command(print_deps)
cli.add_command(update_deps)
cli.add_command(classpath)

# Cache
cli.add_command(cache_status)
cli.add_command(cache_prune)


if __name__ == "__main__":
    cli()
