"""release command — walk one release commit and reconcile its Jira fix version."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.table import Table

from issuelink_cli.commands.common import require_github_token
from issuelink_core.gh.pull_request import get_client, get_repo
from issuelink_core.release import run_release

console = Console()


@click.command("release")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--ref", required=True, help="Release commit SHA, tag or branch.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the walk result without touching Jira.",
)
@click.pass_context
def release_cmd(ctx, repo: str, ref: str, shadow: bool):
    """Tag every issue referenced since the previous release with a fix version.

    Walks first parents back from REF until the previous release commit,
    then finds or creates the Jira version and sets it on each issue.
    """
    config = ctx.obj["config"]
    tracker = ctx.obj.get("tracker")
    token = require_github_token(config)
    if tracker is None and not shadow:
        raise click.UsageError("JIRA_TOKEN environment variable is not set.")

    this_repo = get_repo(repo, client=get_client(token))
    results = asyncio.run(run_release(this_repo, ref, config, tracker, shadow=shadow))
    if shadow:
        return
    if not results:
        console.print("[yellow]No issue keys found since the previous release. Nothing to do.[/yellow]")
        return

    table = Table(title=f"Fix versions — {repo}", show_header=True, header_style="bold cyan")
    table.add_column("Project", style="bold")
    table.add_column("Version")
    table.add_column("Tagged", justify="right")
    table.add_column("Failed", justify="right")
    for r in results:
        failed = len(r.failed)
        table.add_row(
            r.version.project_key or r.version.project_id,
            r.version.name,
            str(len(r.tagged)),
            f"[red]{failed}[/red]" if failed else "0",
        )
    console.print(table)

    for r in results:
        for key, error in r.failed.items():
            console.print(f"  [red]{key}[/red]: {error}")
    if any(r.failed for r in results):
        ctx.exit(1)
