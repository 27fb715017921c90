"""check command — scan one pull request and reconcile its status comment."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console

from issuelink_cli.commands.common import ensure_bot_user_id, require_github_token
from issuelink_core.gh.pull_request import get_client, get_repo
from issuelink_core.scanner import check_pull_request

console = Console()


@click.command("check")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the status report without posting it to GitHub.",
)
@click.pass_context
def check_cmd(ctx, repo: str, pr_number: int, shadow: bool):
    """Check a pull request's commits for Jira issue keys.

    Posts (or updates) the bot's single status comment listing commits that
    reference no issue and links to every referenced issue.
    """
    config = ctx.obj["config"]
    token = require_github_token(config)
    client = get_client(token)
    if not shadow:
        ensure_bot_user_id(config, client)

    this_repo = get_repo(repo, client=client)
    try:
        result = asyncio.run(check_pull_request(this_repo, pr_number, config, shadow=shadow))
    except ValueError as e:
        raise click.UsageError(str(e))

    if not shadow:
        console.print(
            f"[green]Status comment reconciled on {repo}#{pr_number}: "
            f"{len(result.missing_commits)} commit(s) missing keys, "
            f"{len(result.referenced_keys)} issue(s) referenced.[/green]"
        )
