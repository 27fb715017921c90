"""JiraTracker — Jira Server / Data Center REST v2 with a bearer token.

Only the four calls the release reconciler needs are implemented: read an
issue, list a project's versions, create a version, and set an issue's fix
version. Any transport error or non-2xx response becomes a TrackerError;
there is no retry here.
"""

from __future__ import annotations

import logging
import urllib.parse

import requests

from issuelink_tracker.base import BaseTracker, TrackerError
from issuelink_tracker.models import ReleaseVersion, TrackerIssue

logger = logging.getLogger(__name__)

_API_PREFIX = "/rest/api/2"
_TIMEOUT_SECONDS = 30


class JiraTracker(BaseTracker):
    def __init__(self, base_url: str, token: str, session: requests.Session | None = None):
        if not token:
            raise ValueError("A Jira bearer token is required.")
        self._base_api = base_url.rstrip("/") + _API_PREFIX
        self._session = session if session is not None else requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": "issuelink",
            }
        )

    # ----- Helpers -----
    def _request(self, method: str, path: str, **kwargs):
        url = self._base_api + path
        try:
            response = self._session.request(method, url, timeout=_TIMEOUT_SECONDS, **kwargs)
        except requests.exceptions.RequestException as e:
            raise TrackerError(f"Jira {method} {path} failed: {e}") from e

        if not response.ok:
            raise TrackerError(
                f"Jira {method} {path} returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TrackerError(f"Jira {method} {path} returned invalid JSON") from e

    @staticmethod
    def _quote(value: str) -> str:
        return urllib.parse.quote(str(value), safe="")

    @staticmethod
    def _to_version(data: dict, project_key: str = "") -> ReleaseVersion:
        return ReleaseVersion(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            project_id=str(data.get("projectId", "")),
            project_key=project_key,
            description=data.get("description", "") or "",
            released=bool(data.get("released", False)),
            archived=bool(data.get("archived", False)),
        )

    # ----- Public APIs -----
    def get_issue(self, key: str) -> TrackerIssue:
        data = self._request("GET", f"/issue/{self._quote(key)}", params={"fields": "project,components"})
        fields = data.get("fields") or {}
        project = fields.get("project") or {}
        if not project.get("id"):
            raise TrackerError(f"Jira issue {key} has no project")
        return TrackerIssue(
            key=data.get("key", key),
            project_id=str(project["id"]),
            project_key=project.get("key", ""),
            components=tuple(c.get("name", "") for c in fields.get("components") or [] if c.get("name")),
        )

    def list_versions(self, project_id: str) -> list[ReleaseVersion]:
        data = self._request("GET", f"/project/{self._quote(project_id)}/versions")
        if not isinstance(data, list):
            raise TrackerError(f"Unexpected Jira response for project {project_id} versions: expected a list")
        return [self._to_version(v) for v in data]

    def create_version(self, project_id: str, name: str, description: str = "") -> ReleaseVersion:
        payload = {
            "name": name,
            "description": description,
            "projectId": int(project_id) if str(project_id).isdigit() else project_id,
            "released": False,
            "archived": False,
        }
        data = self._request("POST", "/version", json=payload)
        logger.info("Created Jira version %r (id=%s) in project %s", name, data.get("id"), project_id)
        return self._to_version(data)

    def set_fix_version(self, key: str, version_id: str) -> None:
        self._request("PUT", f"/issue/{self._quote(key)}", json={"fields": {"fixVersions": [{"id": str(version_id)}]}})

    def close(self) -> None:
        self._session.close()
