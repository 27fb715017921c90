"""Issue-key extraction from commit messages."""

from __future__ import annotations

import re


def build_key_pattern(projects: list[str]) -> re.Pattern:
    """Compile ``(?:P1|P2|...)-[0-9]+`` for the given Jira project keys."""
    if not projects:
        raise ValueError("At least one issue key project is required.")
    alternatives = "|".join(re.escape(p) for p in projects)
    return re.compile(f"(?:{alternatives})-[0-9]+")


def compile_key_pattern(config: dict) -> re.Pattern:
    """Return the configured key pattern; ``issue_key_pattern`` wins over the project list."""
    override = config.get("issue_key_pattern")
    if override:
        return re.compile(override)
    return build_key_pattern(config["issue_key_projects"])


def extract_issue_keys(message: str | None, pattern: re.Pattern) -> list[str]:
    """Return every issue key in *message*, deduplicated in first-seen order.

    Matching is case-sensitive and global. The whole match is used even when
    a custom pattern contains groups.
    """
    if not message:
        return []
    return list(dict.fromkeys(m.group(0) for m in pattern.finditer(message)))
