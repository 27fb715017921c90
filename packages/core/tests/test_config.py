"""Tests for configuration loading."""

from issuelink_core.config import browse_url, load_config
from issuelink_core.models import VersionNaming


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["issue_key_projects"] == ["VULN", "RHINENG"]
    assert config["issue_key_pattern"] is None
    assert config["bot_user_id"] is None
    assert config["tracker_url"] == "https://issues.redhat.com"
    assert config["release_author"] == "semantic-release"
    assert config["repository_prefixes"]["vmaas"] == "vmaas"


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".issuelink.yml"
    cfg.write_text("bot_user_id: 1234\nrelease_author: release-bot\nissue_key_projects: [ABC]\n")
    config = load_config(config_path=str(cfg))
    assert config["bot_user_id"] == 1234
    assert config["release_author"] == "release-bot"
    assert config["issue_key_projects"] == ["ABC"]


def test_mapping_table_replaced_not_merged(tmp_path):
    cfg = tmp_path / ".issuelink.yml"
    cfg.write_text("repository_prefixes:\n  my-repo: mine\n")
    config = load_config(config_path=str(cfg))
    assert config["repository_prefixes"] == {"my-repo": "mine"}


def test_null_mapping_table_becomes_empty(tmp_path):
    cfg = tmp_path / ".issuelink.yml"
    cfg.write_text("component_short_names:\n")
    config = load_config(config_path=str(cfg))
    assert config["component_short_names"] == {}


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".issuelink.yml"
    cfg.write_text("max_walk_depth: 10\n")
    config = load_config(config_path=str(cfg), cli_overrides={"max_walk_depth": 20})
    assert config["max_walk_depth"] == 20


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".issuelink.yml"
    cfg.write_text("max_walk_depth: 10\n")
    config = load_config(config_path=str(cfg), cli_overrides={"max_walk_depth": None})
    assert config["max_walk_depth"] == 10


def test_env_vars_loaded(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    monkeypatch.setenv("JIRA_TOKEN", "jira-token")
    config = load_config(config_path="nonexistent.yml")
    assert config["github_token"] == "gh-token"
    assert config["jira_token"] == "jira-token"


def test_missing_jira_token_is_none(monkeypatch):
    monkeypatch.delenv("JIRA_TOKEN", raising=False)
    config = load_config(config_path="nonexistent.yml")
    assert config["jira_token"] is None


def test_mutable_defaults_not_shared(tmp_path):
    """Mutating one config's tables must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["repository_prefixes"]["new"] = "x"
    config_a["issue_key_projects"].append("NEW")
    assert "new" not in config_b["repository_prefixes"]
    assert "NEW" not in config_b["issue_key_projects"]


def test_browse_url_strips_trailing_slash():
    assert browse_url({"tracker_url": "https://jira.example.com/"}) == "https://jira.example.com/browse"


def test_version_naming_from_config_lowercases_components():
    naming = VersionNaming.from_config(
        {"component_short_names": {"Vulnerability-Engine": "vuln"}, "repository_prefixes": {"vmaas": "vmaas"}}
    )
    assert naming.component_short_names == {"vulnerability-engine": "vuln"}
    assert naming.repository_prefixes == {"vmaas": "vmaas"}
