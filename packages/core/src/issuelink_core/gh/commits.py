from __future__ import annotations

from issuelink_core.models import Commit


def to_commit(gh_commit) -> Commit:
    """Convert a PyGithub ``Commit`` into our immutable ``Commit``."""
    git_commit = gh_commit.commit
    author = git_commit.author
    return Commit(
        sha=gh_commit.sha,
        message=git_commit.message or "",
        author_name=(author.name if author is not None else "") or "",
        parent_shas=tuple(p.sha for p in gh_commit.parents),
    )


def get_commit(repo, ref: str) -> Commit:
    """Fetch a single commit (by SHA, branch or tag) from the repository."""
    return to_commit(repo.get_commit(ref))
