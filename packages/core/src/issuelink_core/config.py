import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "issue_key_projects": ["VULN", "RHINENG"],
    "issue_key_pattern": None,  # None = build from issue_key_projects; set a regex string to override
    "bot_user_id": None,  # None = resolve from the authenticated GitHub user at startup
    "tracker_url": "https://issues.redhat.com",
    "release_author": "semantic-release",
    "max_walk_depth": 500,
    "greeting": "Thanks for opening this issue!",
    "component_short_names": {
        "vulnerability-engine": "vuln",
        "vulnerability-ui": "vuln-ui",
        "vmaas": "vmaas",
    },
    "repository_prefixes": {
        "vmaas": "vmaas",
        "vulnerability-engine": "vuln",
        "vulnerability-ui": "vuln-ui",
    },
}

_MAPPING_KEYS = ("component_short_names", "repository_prefixes")


def load_config(config_path: str = ".issuelink.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .issuelink.yml in the current directory
      3. CLI argument overrides
    """
    config = {
        **DEFAULT_CONFIG,
        "issue_key_projects": list(DEFAULT_CONFIG["issue_key_projects"]),
        **{key: dict(DEFAULT_CONFIG[key]) for key in _MAPPING_KEYS},
    }

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        for key in _MAPPING_KEYS:
            # Mapping tables from the file replace the built-in tables wholesale.
            if key in file_config and file_config[key] is None:
                file_config[key] = {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["jira_token"] = os.environ.get("JIRA_TOKEN")

    return config


def browse_url(config: dict) -> str:
    """Base URL for issue deep links, e.g. https://issues.redhat.com/browse."""
    return config["tracker_url"].rstrip("/") + "/browse"
