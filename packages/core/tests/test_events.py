"""Tests for webhook event routing."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from issuelink_core.events import EventRouter
from issuelink_core.models import ScanResult, TagResult
from issuelink_tracker.base import BaseTracker
from issuelink_tracker.models import ReleaseVersion

RELEASE_AUTHOR = "semantic-release"


def _config():
    return {
        "greeting": "Thanks for opening this issue!",
        "release_author": RELEASE_AUTHOR,
        "bot_user_id": 4242,
    }


def _router(tracker=None):
    github = MagicMock()
    repo = MagicMock()
    repo.full_name = "owner/repo"
    github.get_repo.return_value = repo
    return EventRouter(github, _config(), tracker), github, repo


def _push(author=RELEASE_AUTHOR):
    return {
        "ref": "refs/heads/master",
        "repository": {"full_name": "owner/repo"},
        "head_commit": {"id": "a" * 40, "message": "2.3.0", "author": {"name": author}},
    }


class TestIssueOpened:
    @pytest.mark.asyncio
    async def test_greets_new_issue(self):
        router, github, repo = _router()
        payload = {"action": "opened", "issue": {"number": 3}, "repository": {"full_name": "owner/repo"}}

        status = await router.dispatch("issues", payload)

        assert status == "greeted"
        github.get_repo.assert_called_once_with("owner/repo")
        repo.get_issue.assert_called_once_with(3)
        repo.get_issue.return_value.create_comment.assert_called_once_with("Thanks for opening this issue!")

    @pytest.mark.asyncio
    async def test_other_issue_actions_ignored(self):
        router, github, _ = _router()
        assert await router.dispatch("issues", {"action": "closed"}) == "ignored"
        github.get_repo.assert_not_called()


class TestPullRequest:
    @pytest.mark.parametrize("action", ["opened", "synchronize", "reopened"])
    @pytest.mark.asyncio
    async def test_checks_pull_request(self, mocker, action):
        router, _, repo = _router()
        check = mocker.patch("issuelink_core.events.check_pull_request", new=AsyncMock(return_value=ScanResult()))
        payload = {"action": action, "pull_request": {"number": 12}, "repository": {"full_name": "owner/repo"}}

        assert await router.dispatch("pull_request", payload) == "checked"
        check.assert_awaited_once_with(repo, 12, router.config)

    @pytest.mark.asyncio
    async def test_closed_pull_request_ignored(self, mocker):
        router, _, _ = _router()
        check = mocker.patch("issuelink_core.events.check_pull_request", new=AsyncMock())
        assert await router.dispatch("pull_request", {"action": "closed"}) == "ignored"
        check.assert_not_awaited()


class TestPush:
    @pytest.mark.asyncio
    async def test_non_release_push_ignored(self, mocker):
        router, github, _ = _router(tracker=MagicMock(spec=BaseTracker))
        run = mocker.patch("issuelink_core.events.run_release", new=AsyncMock())
        assert await router.dispatch("push", _push(author="alice")) == "ignored"
        run.assert_not_awaited()
        github.get_repo.assert_not_called()

    @pytest.mark.asyncio
    async def test_release_push_without_tracker_skipped(self, mocker):
        router, github, _ = _router(tracker=None)
        run = mocker.patch("issuelink_core.events.run_release", new=AsyncMock())
        assert await router.dispatch("push", _push()) == "skipped"
        run.assert_not_awaited()
        github.get_repo.assert_not_called()

    @pytest.mark.asyncio
    async def test_release_push_reconciled(self, mocker):
        tracker = MagicMock(spec=BaseTracker)
        router, _, repo = _router(tracker=tracker)
        version = ReleaseVersion(id="1", name="vuln_2.3.0", project_id="10")
        run = mocker.patch(
            "issuelink_core.events.run_release",
            new=AsyncMock(return_value=[TagResult(version=version, tagged=["VULN-1"])]),
        )

        assert await router.dispatch("push", _push()) == "reconciled"
        run.assert_awaited_once_with(repo, "a" * 40, router.config, tracker)

    @pytest.mark.asyncio
    async def test_partial_failure_reported(self, mocker):
        router, _, _ = _router(tracker=MagicMock(spec=BaseTracker))
        version = ReleaseVersion(id="1", name="2.3.0", project_id="10")
        mocker.patch(
            "issuelink_core.events.run_release",
            new=AsyncMock(return_value=[TagResult(version=version, tagged=["VULN-1"], failed={"VULN-2": "403"})]),
        )
        assert await router.dispatch("push", _push()) == "partially-reconciled"

    @pytest.mark.asyncio
    async def test_release_without_issues(self, mocker):
        router, _, _ = _router(tracker=MagicMock(spec=BaseTracker))
        mocker.patch("issuelink_core.events.run_release", new=AsyncMock(return_value=[]))
        assert await router.dispatch("push", _push()) == "no-issues"


@pytest.mark.asyncio
async def test_unknown_event_ignored():
    router, _, _ = _router()
    assert await router.dispatch("star", {"action": "created"}) == "ignored"
