"""Release fix-version reconciliation.

A push whose head commit is authored by the release automation marks a new
release. The walker follows first parents back to the previous release commit,
collecting every issue key on the way; the reconciler then makes sure a Jira
version named after the release exists and tags every collected issue with it.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import re

from rich.console import Console

from issuelink_core.gh.commits import get_commit
from issuelink_core.keys import compile_key_pattern, extract_issue_keys
from issuelink_core.models import StopReason, TagResult, VersionNaming, WalkResult
from issuelink_tracker.base import BaseTracker, TrackerError
from issuelink_tracker.models import ReleaseVersion, TrackerIssue

console = Console()
logger = logging.getLogger(__name__)


def is_release_push(payload: dict, release_author: str) -> bool:
    """Return True when a push event was produced by the release automation."""
    if payload.get("deleted"):
        return False
    head_commit = payload.get("head_commit")
    if not head_commit:
        return False
    author = head_commit.get("author") or {}
    return author.get("name") == release_author


def release_label_from(message: str) -> str:
    """The release label is the first line of the release commit's message."""
    lines = (message or "").strip().splitlines()
    return lines[0].strip() if lines else ""


async def walk_release(
    repo,
    head_ref: str,
    pattern: re.Pattern,
    release_author: str,
    max_depth: int = 500,
) -> WalkResult:
    """Collect issue keys from the commits between this release and the previous one.

    Starts at the parent of the release commit and follows first parents only,
    so branches merged into the release line are not walked. The previous
    release commit is scanned before the walk stops there; a root commit ends
    the walk without being scanned. At most ``max_depth`` commits
    are fetched. Commits are fetched strictly one after another; any fetch
    error propagates.
    """
    head = await asyncio.to_thread(get_commit, repo, head_ref)
    label = release_label_from(head.message)
    keys: dict[str, None] = {}
    cursor = head.first_parent
    visited = 0

    if cursor is None:
        logger.info("Release commit %s has no parent; nothing to walk.", head.sha[:7])
        return WalkResult(release_label=label, issue_keys=(), stop_reason=StopReason.ROOT, visited=0)

    while True:
        if visited >= max_depth:
            logger.warning(
                "Stopped walking release %s after %d commit(s) without reaching the previous release (at %s).",
                label,
                visited,
                cursor[:7],
            )
            reason = StopReason.DEPTH_LIMIT
            break

        commit = await asyncio.to_thread(get_commit, repo, cursor)
        visited += 1
        if commit.first_parent is None:
            logger.warning("Reached root commit %s without finding the previous release.", commit.sha[:7])
            reason = StopReason.ROOT
            break

        for key in extract_issue_keys(commit.message, pattern):
            keys[key] = None
        if commit.author_name == release_author:
            reason = StopReason.SENTINEL
            break
        cursor = commit.first_parent

    logger.info(
        "Release %s: walked %d commit(s), stopped at %s, found %d issue key(s).",
        label,
        visited,
        reason.value,
        len(keys),
    )
    return WalkResult(release_label=label, issue_keys=tuple(keys), stop_reason=reason, visited=visited)


class VersionReconciler:
    """Find-or-create a Jira fix version for a release and tag issues with it.

    Keys are grouped by the project that owns them and every project gets its
    own version. Tagging is best-effort per issue and never rolled back.
    """

    def __init__(self, tracker: BaseTracker, naming: VersionNaming):
        self.tracker = tracker
        self.naming = naming

    async def group_by_project(self, keys: list[str] | tuple[str, ...]) -> dict[str, list[TrackerIssue]]:
        groups: dict[str, list[TrackerIssue]] = {}
        for key in keys:
            issue = await asyncio.to_thread(self.tracker.get_issue, key)
            groups.setdefault(issue.project_id, []).append(issue)
        if len(groups) > 1:
            logger.info("Issue keys span %d projects; reconciling each separately.", len(groups))
        return groups

    def version_name_for(self, repository: str | None, release_label: str, issue: TrackerIssue) -> str:
        prefix = self.naming.prefix_for(repository, issue.components)
        return self.naming.version_name(release_label, prefix)

    async def find_or_create_version(
        self, project_id: str, project_key: str, name: str, keys: list[str]
    ) -> ReleaseVersion:
        versions = await asyncio.to_thread(self.tracker.list_versions, project_id)
        for version in versions:
            if version.name == name:
                logger.info("Reusing Jira version %r (id=%s) in %s", name, version.id, project_key or project_id)
                return dataclasses.replace(version, project_key=project_key)

        created = await asyncio.to_thread(self.tracker.create_version, project_id, name, " ".join(keys))
        return dataclasses.replace(created, project_key=project_key)

    async def tag_issues(self, version: ReleaseVersion, keys: list[str]) -> TagResult:
        result = TagResult(version=version)
        for key in keys:
            try:
                await asyncio.to_thread(self.tracker.set_fix_version, key, version.id)
            except TrackerError as e:
                logger.warning("Could not set fix version %r on %s: %s", version.name, key, e)
                result.failed[key] = str(e)
                continue
            result.tagged.append(key)
        return result

    async def reconcile(
        self, repository: str | None, release_label: str, keys: list[str] | tuple[str, ...]
    ) -> list[TagResult]:
        if not keys:
            raise ValueError("Cannot reconcile a release version without issue keys.")

        results: list[TagResult] = []
        groups = await self.group_by_project(keys)
        for project_id, issues in groups.items():
            project_keys = [issue.key for issue in issues]
            name = self.version_name_for(repository, release_label, issues[0])
            version = await self.find_or_create_version(project_id, issues[0].project_key, name, project_keys)
            result = await self.tag_issues(version, project_keys)
            logger.info(
                "Version %r: tagged %d issue(s), %d failed.",
                version.name,
                len(result.tagged),
                len(result.failed),
            )
            results.append(result)
        return results


def print_shadow_release(walk: WalkResult, repository: str | None, naming: VersionNaming) -> None:
    """Print what a release reconciliation would do without touching Jira."""
    console.print(
        f"\n[bold]Shadow release — {walk.release_label!r}: {walk.visited} commit(s) walked, "
        f"stopped at {walk.stop_reason.value}[/bold]"
    )
    if not walk.issue_keys:
        console.print("[yellow]No issue keys found. No version would be created.[/yellow]")
        return
    repo_prefix = naming.repository_prefixes.get(repository or "")
    if repo_prefix:
        console.print(f"  Version name: [cyan]{naming.version_name(walk.release_label, repo_prefix)}[/cyan]")
    else:
        console.print(
            f"  Version name: [cyan]{naming.version_name(walk.release_label, None)}[/cyan] "
            "(prefixed per project when an issue's component resolves one)"
        )
    for key in walk.issue_keys:
        console.print(f"  {key}")


async def run_release(
    repo,
    head_ref: str,
    config: dict,
    tracker: BaseTracker | None,
    shadow: bool = False,
) -> list[TagResult]:
    """Walk a release and reconcile its Jira fix version.

    Returns one TagResult per project, or an empty list when the walk found no
    issue keys (nothing to reconcile) or in shadow mode.
    """
    naming = VersionNaming.from_config(config)
    walk = await walk_release(
        repo,
        head_ref,
        compile_key_pattern(config),
        config["release_author"],
        max_depth=int(config.get("max_walk_depth") or 500),
    )

    if shadow:
        print_shadow_release(walk, repo.name, naming)
        return []

    if not walk.issue_keys:
        logger.info("Release %s references no issues; skipping version reconciliation.", walk.release_label)
        return []
    if tracker is None:
        raise ValueError("No tracker configured; set JIRA_TOKEN to reconcile fix versions.")

    return await VersionReconciler(tracker, naming).reconcile(repo.name, walk.release_label, walk.issue_keys)
