"""Routing of GitHub webhook events to the scanner and the release reconciler.

One call to EventRouter.dispatch() handles one delivery. Handlers only read
the payload and talk to GitHub and Jira; the router itself holds no state
that changes between events, so deliveries can be dispatched concurrently.
"""

from __future__ import annotations

import asyncio
import logging

from github import Github

from issuelink_core.release import is_release_push, run_release
from issuelink_core.scanner import check_pull_request
from issuelink_tracker.base import BaseTracker

logger = logging.getLogger(__name__)

PULL_REQUEST_ACTIONS = ("opened", "synchronize", "reopened")


class EventRouter:
    def __init__(self, github: Github, config: dict, tracker: BaseTracker | None = None):
        self.github = github
        self.config = config
        self.tracker = tracker

    async def dispatch(self, event: str, payload: dict) -> str:
        """Handle one webhook delivery and return a short status string.

        Remote failures propagate to the caller.
        """
        action = payload.get("action")
        if event == "issues" and action == "opened":
            return await self.on_issue_opened(payload)
        if event == "pull_request" and action in PULL_REQUEST_ACTIONS:
            return await self.on_pull_request(payload)
        if event == "push":
            return await self.on_push(payload)
        logger.debug("Ignoring %s event (action=%s)", event, action)
        return "ignored"

    async def _repo(self, payload: dict):
        full_name = payload["repository"]["full_name"]
        return await asyncio.to_thread(self.github.get_repo, full_name)

    async def on_issue_opened(self, payload: dict) -> str:
        repo = await self._repo(payload)
        number = payload["issue"]["number"]
        issue = await asyncio.to_thread(repo.get_issue, number)
        await asyncio.to_thread(issue.create_comment, self.config["greeting"])
        logger.info("Greeted new issue %s#%s", repo.full_name, number)
        return "greeted"

    async def on_pull_request(self, payload: dict) -> str:
        repo = await self._repo(payload)
        number = payload["pull_request"]["number"]
        result = await check_pull_request(repo, number, self.config)
        logger.info(
            "Checked %s#%s: %d commit(s) missing keys, %d issue(s) referenced",
            repo.full_name,
            number,
            len(result.missing_commits),
            len(result.referenced_keys),
        )
        return "checked"

    async def on_push(self, payload: dict) -> str:
        if not is_release_push(payload, self.config["release_author"]):
            return "ignored"
        if self.tracker is None:
            logger.info("Release push received but no Jira token is configured; skipping.")
            return "skipped"

        repo = await self._repo(payload)
        head_sha = payload["head_commit"]["id"]
        results = await run_release(repo, head_sha, self.config, self.tracker)
        if not results:
            return "no-issues"
        failed = sum(len(r.failed) for r in results)
        return "reconciled" if not failed else "partially-reconciled"
