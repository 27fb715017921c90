"""GitHub token resolution for the bot account.

Resolution order (stops at first success):
  1. GITHUB_TOKEN environment variable (deployments)
  2. GH_TOKEN environment variable (the variable the gh CLI itself honours)
  3. `gh auth token` (a logged-in GitHub CLI session, for one-off local runs)
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def _token_from_gh_cli() -> str | None:
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no source provides one.

    Never raises; commands that need a token turn None into a UsageError.
    """
    for name in _ENV_VARS:
        token = os.environ.get(name)
        if token:
            return token

    token = _token_from_gh_cli()
    if token:
        logger.debug("Resolved GitHub token via gh CLI session.")
    return token
