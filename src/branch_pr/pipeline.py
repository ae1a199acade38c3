"""Derive every pull request field for the current branch.

load config -> current branch -> title -> target -> body -> labels
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from branch_pr import git
from branch_pr.commits import build_commit_body
from branch_pr.config import Config, find_config_path, load_config
from branch_pr.gh import PullRequest
from branch_pr.routing import resolve_target_branch, select_labels
from branch_pr.titles import derive_title

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Command-line overrides for a single run.

    ``None`` means "use the config file value".
    """

    config_path: Path | None = None
    base: str | None = None
    draft: bool | None = None
    dry_run: bool | None = None
    extra_args: list[str] = field(default_factory=list)


def load_run_config(options: RunOptions, repo_root: Path | None) -> Config:
    """Locate and load the config once for this run."""
    return load_config(find_config_path(options.config_path, repo_root))


def build_pull_request(
    config: Config,
    branch_name: str,
    options: RunOptions | None = None,
    repo_root: Path | None = None,
) -> PullRequest:
    """Compute title, target, body and labels for ``branch_name``."""
    options = options or RunOptions()

    title = derive_title(branch_name, config)
    base = options.base or resolve_target_branch(branch_name, config)
    logger.info("Branch %r -> title %r, target %r", branch_name, title, base)

    body = build_commit_body(config, base, repo_root=repo_root)
    labels = select_labels(config, branch_name)

    return PullRequest(
        head=branch_name,
        title=title,
        base=base,
        body=body,
        labels=labels,
        draft=config.draft if options.draft is None else options.draft,
        dry_run=config.dry_run if options.dry_run is None else options.dry_run,
        extra_args=list(options.extra_args),
    )


def prepare_pull_request(options: RunOptions, cwd: Path | None = None) -> PullRequest:
    """Run the whole derivation against the repository containing ``cwd``."""
    repo_root = git.get_repo_root(cwd)
    config = load_run_config(options, repo_root)
    branch_name = git.get_current_branch(repo_root).lower()
    return build_pull_request(config, branch_name, options, repo_root=repo_root)
