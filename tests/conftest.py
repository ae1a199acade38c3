"""Pytest configuration for branch-pr tests."""

from copy import deepcopy
from pathlib import Path

import pytest

from branch_pr.config import Config

TEMPLATE = "## Changes\n\n{LIST_COMMITS}\n\n## Checklist\n"

SAMPLE_CONFIG = {
    "draft": False,
    "dry_run": False,
    "branches": {
        "default": "develop",
        "includes": {"hotfix": "main", "release": "main"},
    },
    "title": {
        "jira_prefixes": {"htp20": "[HTP20-{ticket_number}] {ticket_name}"},
        "prefixes": {"hotfix": "HOTFIX:"},
    },
    "template": {"path": ".github/PULL_REQUEST_TEMPLATE.md"},
    "labels": {
        "default": ["needs review"],
        "includes": {"hotfix": ["urgent"], "fix": ["bug"]},
    },
    "commits": {
        "prefixes": {"feat": "", "fix": "Fix", "docs": "Docs:"},
    },
}


@pytest.fixture
def config_data() -> dict:
    """A fresh copy of the sample config document."""
    return deepcopy(SAMPLE_CONFIG)


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """A directory holding the PR template at its configured path."""
    template = tmp_path / ".github" / "PULL_REQUEST_TEMPLATE.md"
    template.parent.mkdir(parents=True)
    template.write_text(TEMPLATE)
    return tmp_path


@pytest.fixture
def config(config_data: dict) -> Config:
    """Sample config with a repository-relative template path."""
    return Config.from_dict(config_data)
