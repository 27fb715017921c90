"""Pull-request commit scanning and the bot's status comment."""

from __future__ import annotations

import asyncio
import logging
import re

from github import GithubException
from rich.console import Console

from issuelink_core.config import browse_url
from issuelink_core.gh.pull_request import find_bot_comment, get_issue_comments, get_pull, get_pull_commits
from issuelink_core.keys import compile_key_pattern, extract_issue_keys
from issuelink_core.models import Commit, ScanResult

console = Console()
logger = logging.getLogger(__name__)

MISSING_HEADER = "Commits missing Jira IDs:"
REFERENCED_HEADER = "Referenced Jiras:"


def scan_commits(commits: list[Commit], pattern: re.Pattern) -> ScanResult:
    """Partition commits into those without an issue key and the keys referenced by the rest."""
    missing: dict[str, None] = {}
    referenced: dict[str, None] = {}
    for commit in commits:
        keys = extract_issue_keys(commit.message, pattern)
        if not keys:
            missing[commit.sha] = None
            continue
        for key in keys:
            referenced[key] = None
    return ScanResult(missing_commits=tuple(missing), referenced_keys=tuple(referenced))


def build_report(result: ScanResult, issue_browse_url: str) -> str:
    """Render the status comment body.

    Each section is left out when it has nothing to list, so an all-clear
    scan renders an empty string. That empty body is still posted: it clears
    whatever the previous scan reported.
    """
    body = ""
    if result.missing_commits:
        body += MISSING_HEADER + "\n"
        for sha in result.missing_commits:
            body += sha + "\n"
    if result.referenced_keys:
        body += REFERENCED_HEADER + "\n"
        base = issue_browse_url.rstrip("/")
        for key in result.referenced_keys:
            body += f"{base}/{key}\n"
    return body


async def reconcile_status_comment(pr, body: str, bot_user_id: int) -> str:
    """Create or update the single bot comment on a PR.

    Returns ``"updated"`` when an existing bot comment was edited in place and
    ``"created"`` otherwise. Exactly one write is made; GitHub errors propagate.
    """
    comments = await asyncio.to_thread(get_issue_comments, pr)
    existing = find_bot_comment(comments, bot_user_id)
    if existing is not None:
        await asyncio.to_thread(existing.edit, body)
        logger.info("Updated status comment %s on PR #%s", existing.id, pr.number)
        return "updated"
    created = await asyncio.to_thread(pr.create_issue_comment, body)
    logger.info("Created status comment %s on PR #%s", getattr(created, "id", "?"), pr.number)
    return "created"


def print_shadow_report(pr_number: int, result: ScanResult, body: str) -> None:
    """Print the report to the terminal without posting it to GitHub."""
    console.print(
        f"\n[bold]Shadow check — PR #{pr_number}: {len(result.missing_commits)} commit(s) missing keys, "
        f"{len(result.referenced_keys)} issue(s) referenced (not posted)[/bold]\n"
    )
    if body:
        console.print(body, markup=False, highlight=False)
    else:
        console.print("[green]Empty report: any previous status comment would be cleared.[/green]")


async def check_pull_request(repo, pr_number: int, config: dict, shadow: bool = False) -> ScanResult:
    """Scan one PR's commits and reconcile the bot's status comment."""
    try:
        pr = await asyncio.to_thread(get_pull, repo, pr_number)
    except GithubException as e:
        if e.status != 404:
            raise
        raise ValueError(f"PR #{pr_number} not found in {repo.full_name}.") from e

    commits = await asyncio.to_thread(get_pull_commits, pr)
    result = scan_commits(commits, compile_key_pattern(config))
    body = build_report(result, browse_url(config))
    logger.debug(
        "PR #%s: %d commit(s), %d missing keys, keys=%s",
        pr_number,
        len(commits),
        len(result.missing_commits),
        ",".join(result.referenced_keys),
    )

    if shadow:
        print_shadow_report(pr_number, result, body)
        return result

    bot_user_id = config.get("bot_user_id")
    if bot_user_id is None:
        raise ValueError("bot_user_id is not configured; cannot identify the bot's own comment.")
    await reconcile_status_comment(pr, body, int(bot_user_id))
    return result
