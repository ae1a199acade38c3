"""Configuration loading for branch-pr.

The configuration is a TOML document. It is searched for once at startup
(see ``find_config_path``) and the resulting path is passed around
explicitly.

Example ``.branch-pr.toml``::

    draft = false
    dry_run = false

    [branches]
    default = "develop"
    includes = { hotfix = "main" }

    [title]
    jira_prefixes = { htp20 = "[HTP20-{ticket_number}] {ticket_name}" }
    prefixes = { hotfix = "HOTFIX:" }

    [template]
    path = ".github/PULL_REQUEST_TEMPLATE.md"

    [labels]
    default = ["needs review"]
    includes = { hotfix = ["urgent"] }

    [commits]
    prefixes = { feat = "", fix = "Fix" }

Rule tables are matched in the order their keys appear in the document.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# tomli-w for writing (tomllib is read-only)
import tomli_w

# tomllib is stdlib in 3.11+, use tomli as fallback for 3.10
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found,no-redef]

from branch_pr.errors import ConfigError, ConfigParseError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BRANCH_PR_CONFIG"
REPO_CONFIG_NAME = ".branch-pr.toml"

# Ordered (key, value) pairs; first match wins where only one is used
StringRules = tuple[tuple[str, str], ...]
LabelRules = tuple[tuple[str, tuple[str, ...]], ...]


@dataclass(frozen=True)
class BranchSettings:
    """Target-branch routing."""

    default: str
    includes: StringRules = ()


@dataclass(frozen=True)
class TitleSettings:
    """Branch prefix tables used to derive the PR title."""

    jira_prefixes: StringRules = ()
    prefixes: StringRules = ()


@dataclass(frozen=True)
class LabelSettings:
    """Labels always applied plus labels applied per branch substring."""

    default: tuple[str, ...] = ()
    includes: LabelRules = ()


@dataclass(frozen=True)
class CommitSettings:
    """Commit prefix -> display text used in the PR body."""

    prefixes: StringRules = ()


@dataclass(frozen=True)
class Config:
    """Full branch-pr configuration for one run."""

    branches: BranchSettings
    title: TitleSettings
    template_path: str
    labels: LabelSettings
    commits: CommitSettings
    draft: bool = False
    dry_run: bool = False

    # File this config was read from (not persisted)
    path: Path | None = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            "draft": self.draft,
            "dry_run": self.dry_run,
            "branches": {
                "default": self.branches.default,
                "includes": dict(self.branches.includes),
            },
            "title": {
                "jira_prefixes": dict(self.title.jira_prefixes),
                "prefixes": dict(self.title.prefixes),
            },
            "template": {"path": self.template_path},
            "labels": {
                "default": list(self.labels.default),
                "includes": {key: list(value) for key, value in self.labels.includes},
            },
            "commits": {"prefixes": dict(self.commits.prefixes)},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> Config:
        """Create config from a parsed TOML document.

        Raises:
            ConfigParseError: If a required key is missing or has the wrong type.
        """
        source = str(path) if path else "<config>"

        def section(name: str) -> dict[str, Any]:
            value = data.get(name)
            if not isinstance(value, dict):
                raise ConfigParseError(f"{source}: missing table [{name}]")
            return value

        def string(table: dict[str, Any], dotted: str) -> str:
            key = dotted.rsplit(".", 1)[-1]
            value = table.get(key)
            if not isinstance(value, str):
                raise ConfigParseError(f"{source}: '{dotted}' must be a string")
            return value

        def string_rules(table: dict[str, Any], dotted: str) -> StringRules:
            key = dotted.rsplit(".", 1)[-1]
            value = table.get(key)
            if not isinstance(value, dict):
                raise ConfigParseError(f"{source}: '{dotted}' must be a table")
            rules = []
            for rule_key, rule_value in value.items():
                if not isinstance(rule_value, str):
                    raise ConfigParseError(
                        f"{source}: '{dotted}.{rule_key}' must be a string"
                    )
                rules.append((rule_key, rule_value))
            return tuple(rules)

        def string_list(value: Any, dotted: str) -> tuple[str, ...]:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigParseError(f"{source}: '{dotted}' must be a list of strings")
            return tuple(value)

        def flag(key: str) -> bool:
            value = data.get(key)
            if not isinstance(value, bool):
                raise ConfigParseError(f"{source}: '{key}' must be true or false")
            return value

        branches = section("branches")
        title = section("title")
        template = section("template")
        labels = section("labels")
        commits = section("commits")

        label_includes = labels.get("includes")
        if not isinstance(label_includes, dict):
            raise ConfigParseError(f"{source}: 'labels.includes' must be a table")

        return cls(
            branches=BranchSettings(
                default=string(branches, "branches.default"),
                includes=string_rules(branches, "branches.includes"),
            ),
            title=TitleSettings(
                jira_prefixes=string_rules(title, "title.jira_prefixes"),
                prefixes=string_rules(title, "title.prefixes"),
            ),
            template_path=string(template, "template.path"),
            labels=LabelSettings(
                default=string_list(labels.get("default"), "labels.default"),
                includes=tuple(
                    (key, string_list(value, f"labels.includes.{key}"))
                    for key, value in label_includes.items()
                ),
            ),
            commits=CommitSettings(prefixes=string_rules(commits, "commits.prefixes")),
            draft=flag("draft"),
            dry_run=flag("dry_run"),
            path=path,
        )


# Written by `branch-pr --init`
DEFAULT_CONFIG: dict[str, Any] = {
    "draft": False,
    "dry_run": False,
    "branches": {
        "default": "develop",
        "includes": {"hotfix": "main", "release": "main"},
    },
    "title": {
        "jira_prefixes": {"proj": "[PROJ-{ticket_number}] {ticket_name}"},
        "prefixes": {"hotfix": "HOTFIX:"},
    },
    "template": {"path": ".github/PULL_REQUEST_TEMPLATE.md"},
    "labels": {
        "default": ["needs review"],
        "includes": {"hotfix": ["urgent"], "fix": ["bug"], "feat": ["enhancement"]},
    },
    "commits": {
        "prefixes": {
            "feat": "",
            "fix": "Fix",
            "perf": "Improve performance:",
            "refactor": "Refactor:",
            "docs": "Docs:",
        }
    },
}

DEFAULT_TEMPLATE = """## Describe your changes

{LIST_COMMITS}

## Screenshots (if appropriate)

## Checklist

- [ ] Moved the ticket to Code Review
- [ ] Uploaded screenshots (if appropriate)
- [ ] Run linter rules
- [ ] Run tests (and fix them if needed)
"""


def user_config_path() -> Path:
    """Get the per-user config file path, respecting XDG_CONFIG_HOME."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / "branch-pr" / "config.toml"


def candidate_paths(explicit: Path | None = None, repo_root: Path | None = None) -> list[Path]:
    """Return config locations in the order they are searched."""
    if explicit is not None:
        return [explicit]

    candidates: list[Path] = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser())
    if repo_root is not None:
        candidates.append(repo_root / REPO_CONFIG_NAME)
    candidates.append(user_config_path())
    return candidates


def find_config_path(explicit: Path | None = None, repo_root: Path | None = None) -> Path:
    """Locate the configuration file.

    Args:
        explicit: Path given on the command line; used as-is when set.
        repo_root: Repository root to look for ``.branch-pr.toml`` in.

    Returns:
        The first existing candidate path.

    Raises:
        ConfigError: If no candidate exists.
    """
    candidates = candidate_paths(explicit, repo_root)
    for candidate in candidates:
        if candidate.is_file():
            logger.debug("Using config file %s", candidate)
            return candidate

    searched = ", ".join(str(c) for c in candidates)
    raise ConfigError(
        f"No config file found (searched: {searched}). Run 'branch-pr --init' to create one."
    )


def load_config(path: Path) -> Config:
    """Load configuration from file.

    Raises:
        ConfigError: If the file cannot be read.
        ConfigParseError: If the file is not valid TOML or misses keys.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"{path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    return Config.from_dict(data, path=path)


def save_config(config: Config | dict[str, Any], path: Path) -> None:
    """Write configuration to file, creating parent directories."""
    data = config.to_dict() if isinstance(config, Config) else config
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        tomli_w.dump(data, f)


def write_starter_files(config_path: Path, repo_root: Path, force: bool = False) -> list[Path]:
    """Write DEFAULT_CONFIG and, if missing, DEFAULT_TEMPLATE.

    Returns:
        The paths that were written.

    Raises:
        ConfigError: If config_path exists and force is not set.
    """
    if config_path.exists() and not force:
        raise ConfigError(f"{config_path} already exists (use --force to overwrite)")

    written = [config_path]
    save_config(DEFAULT_CONFIG, config_path)

    template_path = repo_root / DEFAULT_CONFIG["template"]["path"]
    if not template_path.exists():
        template_path.parent.mkdir(parents=True, exist_ok=True)
        template_path.write_text(DEFAULT_TEMPLATE, encoding="utf-8")
        written.append(template_path)
    return written
