"""Abstract tracker interface.

The release reconciler depends on BaseTracker, not on Jira, so a different
tracker (or a fake in tests) can be plugged in without touching the core.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from issuelink_tracker.models import ReleaseVersion, TrackerIssue


class TrackerError(RuntimeError):
    """A tracker call failed or returned something unusable."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BaseTracker(ABC):
    """Remote issue tracker holding issues and their fix versions.

    Every method is a blocking remote call and raises TrackerError on failure.
    Nothing is cached: state is re-read from the tracker on every call.
    """

    @abstractmethod
    def get_issue(self, key: str) -> TrackerIssue:
        """Fetch an issue by key, including its project and component names."""

    @abstractmethod
    def list_versions(self, project_id: str) -> list[ReleaseVersion]:
        """Return every version defined for a project."""

    @abstractmethod
    def create_version(self, project_id: str, name: str, description: str = "") -> ReleaseVersion:
        """Create an unreleased, unarchived version and return it."""

    @abstractmethod
    def set_fix_version(self, key: str, version_id: str) -> None:
        """Set the issue's fix version to exactly the given version."""

    def close(self) -> None:
        """Release any resources held by the tracker client.

        Optional — subclasses that need cleanup should override this.
        """
