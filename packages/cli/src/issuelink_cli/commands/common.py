"""Helpers shared by the CLI commands."""

from __future__ import annotations

import click


def require_github_token(config: dict) -> str:
    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    return token


def ensure_bot_user_id(config: dict, client) -> int:
    """Fill in bot_user_id from the authenticated GitHub user when not configured."""
    from issuelink_core.gh.pull_request import get_authenticated_user_id

    if config.get("bot_user_id") is None:
        config["bot_user_id"] = get_authenticated_user_id(client)
    return int(config["bot_user_id"])
