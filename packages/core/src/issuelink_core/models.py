"""Value types shared by the PR scanner and the release walker.

All of these are rebuilt from GitHub and Jira on every event; nothing here is
ever persisted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from issuelink_tracker.models import ReleaseVersion


@dataclass(frozen=True)
class Commit:
    """A commit as seen by the scanner and the walker."""

    sha: str
    message: str
    author_name: str
    parent_shas: tuple[str, ...] = ()

    @property
    def first_parent(self) -> str | None:
        return self.parent_shas[0] if self.parent_shas else None


@dataclass(frozen=True)
class ScanResult:
    """Commits of one PR partitioned by whether they reference an issue.

    Both fields keep first-seen order so the rendered report is stable.
    """

    missing_commits: tuple[str, ...] = ()
    referenced_keys: tuple[str, ...] = ()


class StopReason(enum.Enum):
    SENTINEL = "sentinel"  # previous release commit reached
    ROOT = "root"  # commit without parents reached
    DEPTH_LIMIT = "depth_limit"  # max_walk_depth commits fetched without a boundary


@dataclass(frozen=True)
class WalkResult:
    release_label: str
    issue_keys: tuple[str, ...]
    stop_reason: StopReason
    visited: int = 0


@dataclass
class TagResult:
    """Outcome of tagging one project's issues with a fix version.

    Tagging is best-effort: ``failed`` maps each key whose update failed to
    the error message. Nothing is rolled back.
    """

    version: ReleaseVersion
    tagged: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class VersionNaming:
    """Lookup tables used to prefix release labels with a product name.

    Injected into the version reconciler so callers (and tests) can swap
    mappings without touching process-wide state.
    """

    component_short_names: dict[str, str] = field(default_factory=dict)
    repository_prefixes: dict[str, str] = field(default_factory=dict)

    def prefix_for(self, repository: str | None, components: tuple[str, ...] | list[str]) -> str | None:
        """Return the version-name prefix for an issue, or None.

        The issue's first component is mapped through ``component_short_names``
        (falling back to its lowercase name). A repository listed in
        ``repository_prefixes`` overrides whatever the component gave.
        """
        prefix = None
        if components:
            component = components[0].lower()
            prefix = self.component_short_names.get(component, component)
        if repository and repository in self.repository_prefixes:
            prefix = self.repository_prefixes[repository]
        return prefix or None

    @staticmethod
    def version_name(release_label: str, prefix: str | None) -> str:
        if prefix:
            return f"{prefix}_{release_label}"
        return release_label

    @classmethod
    def from_config(cls, config: dict) -> VersionNaming:
        return cls(
            component_short_names={
                str(k).lower(): str(v) for k, v in (config.get("component_short_names") or {}).items()
            },
            repository_prefixes={str(k): str(v) for k, v in (config.get("repository_prefixes") or {}).items()},
        )
