#!/usr/bin/env python3
"""
LeetCode → GitHub Sync CLI

Usage:
    python sync.py                      # Run full sync
    python sync.py --dry-run            # Preview commits without writing
    python sync.py --only two-sum       # Sync selected problems
    python sync.py --limit 5            # Sync the first 5 solved problems
    python sync.py list                 # Show solved problems
    python sync.py version              # Show version
"""

import sys
from typing import Optional

import click
from rich.console import Console

from leetcode_sync import __version__
from leetcode_sync.config import Config
from leetcode_sync.errors import ConfigError

console = Console()


def _load_config(ctx: click.Context) -> Config:
    config = Config.from_env()

    # Apply CLI overrides
    if ctx.obj.get("dry_run"):
        config.dry_run = True
    if ctx.obj.get("debug"):
        config.debug = True
    if ctx.obj.get("branch"):
        config.branch = ctx.obj["branch"]

    return config


@click.group(invoke_without_command=True)
@click.option("--dry-run", is_flag=True, help="Preview commits without writing to GitHub")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.option("--branch", default=None, help="Target branch (overrides REPO_BRANCH)")
@click.option("--only", multiple=True, metavar="SLUG", help="Only sync this problem slug (repeatable)")
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Sync at most N problems")
@click.pass_context
def cli(ctx, dry_run: bool, debug: bool, branch: Optional[str], only: tuple, limit: Optional[int]):
    """
    LeetCode → GitHub Sync

    Publishes accepted LeetCode solutions and problem statements to a
    GitHub repository.
    """
    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["debug"] = debug
    ctx.obj["branch"] = branch
    ctx.obj["only"] = only
    ctx.obj["limit"] = limit

    # If no subcommand, run sync
    if ctx.invoked_subcommand is None:
        ctx.invoke(sync)


@cli.command()
@click.pass_context
def sync(ctx):
    """Run synchronization from LeetCode to GitHub."""
    from leetcode_sync.sync_engine import SyncEngine

    try:
        config = _load_config(ctx)

        engine = SyncEngine(config)
        result = engine.sync(only=ctx.obj.get("only", ()), limit=ctx.obj.get("limit"))

        # Exit with error code if sync failed
        if not result.success:
            sys.exit(1)

    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        console.print("\n[dim]Make sure you have created a .env file with your credentials.[/dim]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Sync cancelled.[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if ctx.obj.get("debug"):
            import traceback
            traceback.print_exc()
        sys.exit(1)


@cli.command(name="list")
@click.pass_context
def list_problems(ctx):
    """Show solved problems and their target directories."""
    from leetcode_sync.sync_engine import SyncEngine

    try:
        config = _load_config(ctx)
        engine = SyncEngine(config)
        engine.list_problems()
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if ctx.obj.get("debug"):
            import traceback
            traceback.print_exc()
        sys.exit(1)


@cli.command()
def version():
    """Show version information."""
    console.print(f"LeetCode → GitHub Sync v{__version__}")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
