"""serve command — run the GitHub webhook receiver."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from issuelink_cli.commands.common import ensure_bot_user_id, require_github_token

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@click.command("serve")
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind.")
@click.option("--port", default=3000, show_default=True, type=int, help="Port to listen on.")
@click.option(
    "--log-level",
    default="info",
    show_default=True,
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level for issuelink and the web server.",
)
@click.pass_context
def serve_cmd(ctx, host: str, port: int, log_level: str):
    """Receive GitHub webhooks and keep PR comments and Jira fix versions in sync.

    Point the GitHub App (or repository webhook) at http://HOST:PORT/webhook
    with content type application/json, subscribed to issues, pull_request
    and push events.

    \b
    Required environment variables:
      GITHUB_TOKEN   GitHub token for the bot account (or use gh CLI)
      JIRA_TOKEN     Jira bearer token; without it release pushes are ignored
    """
    import uvicorn

    from issuelink_cli.app import create_app
    from issuelink_core.events import EventRouter
    from issuelink_core.gh.pull_request import get_client

    config = ctx.obj["config"]
    token = require_github_token(config)
    configure_logging(log_level)

    client = get_client(token)
    bot_user_id = ensure_bot_user_id(config, client)
    console.print(f"[cyan]Maintaining status comments as GitHub user id {bot_user_id}.[/cyan]")

    router = EventRouter(client, config, ctx.obj.get("tracker"))
    uvicorn.run(create_app(router), host=host, port=port, log_level=log_level, log_config=None)
