"""Tracker data models.

Decoupled from issuelink_core so the tracker layer can be used on its own
and the core has no knowledge of any particular tracker's wire format.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TrackerIssue:
    """The parts of a tracker issue needed to pick a fix version."""

    key: str
    project_id: str
    project_key: str
    components: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReleaseVersion:
    """A fix version of one tracker project.

    Names are unique within a project; lookups always go by exact name.
    """

    id: str
    name: str
    project_id: str
    project_key: str = ""
    description: str = ""
    released: bool = False
    archived: bool = False
