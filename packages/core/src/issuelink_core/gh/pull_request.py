from __future__ import annotations

from github import Auth, Github

from issuelink_core.gh.commits import to_commit
from issuelink_core.models import Commit


def get_client(token: str) -> Github:
    return Github(auth=Auth.Token(token))


def get_repo(repo_name: str, token: str | None = None, client: Github | None = None):
    gh = client if client is not None else get_client(token)
    return gh.get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_pull_commits(pr) -> list[Commit]:
    """Return every commit of the PR, oldest first, fetched fresh from GitHub."""
    return [to_commit(c) for c in pr.get_commits()]


def get_issue_comments(pr) -> list:
    return list(pr.get_issue_comments())


def find_bot_comment(comments, bot_user_id: int):
    """Return the most recent comment authored by the bot, or None.

    Comments are scanned newest first, so if more than one bot comment exists
    the latest one (in GitHub's listing order) is the one maintained.
    """
    for comment in reversed(list(comments)):
        user = comment.user
        if user is not None and user.id == bot_user_id:
            return comment
    return None


def get_authenticated_user_id(client: Github) -> int:
    return client.get_user().id
