"""Queries against the local git repository."""

from __future__ import annotations

import logging
from pathlib import Path

from branch_pr.errors import CommandError
from branch_pr.process import run

logger = logging.getLogger(__name__)


def _git(args: list[str], cwd: Path | None = None) -> str:
    cmd = ["git", *args]
    code, stdout, stderr = run(cmd, cwd=cwd)
    if code != 0:
        raise CommandError(
            f"git {args[0]} failed: {stderr or f'exit code {code}'}",
            command=cmd,
            returncode=code,
            stderr=stderr,
        )
    return stdout


def get_repo_root(cwd: Path | None = None) -> Path:
    """Return the top-level directory of the working tree."""
    try:
        return Path(_git(["rev-parse", "--show-toplevel"], cwd=cwd))
    except CommandError as e:
        if e.returncode is None:
            raise
        raise CommandError(
            "Not a git repository",
            command=e.command,
            returncode=e.returncode,
            stderr=e.stderr,
        ) from e


def get_current_branch(cwd: Path | None = None) -> str:
    """Get the checked-out branch name (empty on a detached HEAD)."""
    branch = _git(["branch", "--show-current"], cwd=cwd)
    if not branch:
        logger.warning("HEAD is detached; using an empty branch name")
    return branch


def get_commit_log(target_branch: str, cwd: Path | None = None) -> str:
    """One-line log of commits reachable from HEAD but not from target_branch.

    Most recent commit first, each line ``<short hash> <subject>``.
    """
    return _git(["log", "--oneline", "--no-color", f"{target_branch}..HEAD"], cwd=cwd)
