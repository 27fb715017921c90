"""CLI entry point for issuelink.

Commands:
  serve    — run the GitHub webhook receiver
  check    — scan one pull request and reconcile its status comment
  release  — walk one release commit and reconcile its Jira fix version
"""

from __future__ import annotations

import importlib.metadata

import click
from rich.console import Console

from issuelink_cli.commands.check import check_cmd
from issuelink_cli.commands.release import release_cmd
from issuelink_cli.commands.serve import serve_cmd

console = Console()


def _build_tracker(config: dict):
    """Instantiate the Jira tracker, or None when no Jira token is configured.

    Without a tracker, release pushes are ignored; PR checks still run.
    """
    token = config.get("jira_token")
    if not token:
        console.print("[yellow]JIRA_TOKEN is not set. Release fix-version reconciliation is disabled.[/yellow]")
        return None

    from issuelink_tracker.jira import JiraTracker

    return JiraTracker(base_url=config["tracker_url"], token=token)


def _close_tracker(ctx: click.Context) -> None:
    tracker = ctx.obj.get("tracker")
    if tracker is not None:
        tracker.close()


@click.group()
@click.version_option(
    version=importlib.metadata.version("issuelink"),
    prog_name="issuelink",
)
@click.option(
    "--config",
    "config_path",
    default=".issuelink.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="ISSUELINK_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """Link GitHub commits to Jira issues and fix versions."""
    from issuelink_cli.auth import resolve_github_token
    from issuelink_core.config import load_config

    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config
    ctx.obj["tracker"] = _build_tracker(config)
    ctx.call_on_close(lambda: _close_tracker(ctx))


main.add_command(serve_cmd)
main.add_command(check_cmd)
main.add_command(release_cmd)
