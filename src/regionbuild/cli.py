# src/regionbuild/cli.py: Command-Line Interface (CLI) entry point.
# Implemented using Typer, this module provides the 'regionctl' command. It
# runs the decision engine against a local git clone, checks paths against
# the configured regions and shows the effective configuration.

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import StrategyConfig, load_config
from .engine import DecisionEngine
from .gitscm import GitScmSource
from .gitwrap import git_rev_parse
from .matcher import matching_region
from .models import Head, PlainRevision, PullRequestRevision
from .state import RevisionStore
from .util.errors import RegionBuildError
from .util.log import setup_logging
from .util.paths import get_default_config_path

app = typer.Typer(
    name="regionctl",
    help="Decide whether branch and pull-request updates touch the included regions.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        print(f"regionctl version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to the strategy.yaml configuration file. [default: {get_default_config_path()}]",
    ),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True
    ),
):
    """
    Included-region build strategy CLI.
    """
    ctx.obj = config_path


def get_config(ctx: typer.Context) -> StrategyConfig:
    """Loads the config and handles errors."""
    try:
        return load_config(ctx.obj)
    except RegionBuildError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(e.exit_code)


@app.command()
def decide(
    ctx: typer.Context,
    head: str = typer.Argument(..., help="Branch or pull-request name being built."),
    curr: str = typer.Argument(..., help="Commit or ref of the update."),
    prev: Optional[str] = typer.Option(
        None, "--prev", help="Revision of the last build. Defaults to the recorded one."
    ),
    target: Optional[str] = typer.Option(
        None, "--target", help="Target branch; marks HEAD as a pull request."
    ),
    target_rev: Optional[str] = typer.Option(
        None, "--target-rev", help="Commit or ref of the target branch. Defaults to TARGET."
    ),
    record: bool = typer.Option(
        False, "--record", help="Record CURR as the last build of HEAD when a build is triggered."
    ),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="Revision store location."),
):
    """Decide whether an update should trigger a build. Exits 0 to build, 1 to skip."""
    config = get_config(ctx)
    setup_logging(config.logging.level, config.logging.json_format)

    repo = config.repo.path
    source = GitScmSource(repo, config.repo.remote)
    store = RevisionStore(state_file)

    try:
        curr_hash = git_rev_parse(repo, curr)
        if target:
            head_obj = Head(head, target=Head(target))
            pull = PlainRevision(head_obj, curr_hash)
            target_head = PlainRevision(head_obj.target, git_rev_parse(repo, target_rev or target))
            curr_rev = PullRequestRevision(head_obj, pull=pull, target=target_head)
        else:
            head_obj = Head(head)
            curr_rev = PlainRevision(head_obj, curr_hash)

        prev_ref = prev or store.get(head)
        prev_rev = PlainRevision(head_obj, git_rev_parse(repo, prev_ref)) if prev_ref else None
    except RegionBuildError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(e.exit_code)

    decision = DecisionEngine(config).evaluate(source, head_obj, curr_rev, prev_rev)

    table = Table("Head", "Current", "Previous", "Build", "Reason", "Region", "Path")
    table.add_row(
        str(head_obj),
        str(curr_rev),
        str(prev_rev) if prev_rev else "-",
        "[bold green]yes[/bold green]" if decision.build else "[yellow]no[/yellow]",
        decision.reason.value,
        decision.region or "-",
        decision.path or "-",
    )
    console.print(table)
    if decision.error:
        console.print(f"[bold red]Error:[/bold red] {decision.error}")

    if decision.build and record:
        try:
            store.record(head, curr_hash)
        except RegionBuildError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(e.exit_code)

    raise typer.Exit(0 if decision.build else 1)


@app.command()
def match(
    ctx: typer.Context,
    paths: List[str] = typer.Argument(..., help="Repository-relative file paths."),
):
    """Show which included region, if any, each path falls in."""
    config = get_config(ctx)
    regions = config.regions

    table = Table("Path", "Region")
    for path in paths:
        region = matching_region(regions, path)
        table.add_row(path, region or "[dim]-[/dim]")
    console.print(table)


@app.command("show-config")
def show_config(ctx: typer.Context):
    """Show the effective configuration."""
    config = get_config(ctx)

    table = Table("Setting", "Value")
    table.add_row("included regions", "\n".join(config.regions) or "[dim](none)[/dim]")
    table.add_row("excluded branch", config.excluded_branch or "[dim](disabled)[/dim]")
    table.add_row("fail policy", config.fail_policy)
    table.add_row("cache capacity", str(config.cache.capacity))
    table.add_row("cache ttl (s)", str(config.cache.ttl_sec) if config.cache.ttl_sec else "-")
    table.add_row("repository", str(config.repo.path))
    table.add_row("remote", config.repo.remote or "[dim](first remote)[/dim]")
    console.print(table)


if __name__ == "__main__":
    app()
