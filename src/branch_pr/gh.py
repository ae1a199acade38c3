"""Create pull requests through the GitHub CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from branch_pr.errors import CommandError
from branch_pr.process import run

logger = logging.getLogger(__name__)


@dataclass
class PullRequest:
    """Everything needed to call ``gh pr create``."""

    head: str
    title: str
    base: str
    body: str
    labels: list[str] = field(default_factory=list)
    draft: bool = False
    dry_run: bool = False
    extra_args: list[str] = field(default_factory=list)


def build_create_command(pr: PullRequest) -> list[str]:
    """Build the ``gh pr create`` argument list for a pull request."""
    cmd = ["gh", "pr", "create", "-a", "@me", "-t", pr.title, "--body", pr.body, "-B", pr.base]

    if pr.labels:
        cmd.extend(["-l", ",".join(pr.labels)])
    if pr.draft:
        cmd.append("--draft")
    if pr.dry_run:
        cmd.append("--dry-run")

    cmd.extend(pr.extra_args)
    return cmd


def create_pr(pr: PullRequest, cwd: Path | None = None) -> str:
    """Run ``gh pr create`` and return its output (the PR URL).

    Raises:
        CommandError: If gh exits non-zero; the message carries gh's stderr.
    """
    cmd = build_create_command(pr)
    code, stdout, stderr = run(cmd, cwd=cwd)

    if code != 0:
        raise CommandError(
            f"Error creating PR: {stderr or f'gh exited with code {code}'}",
            command=cmd,
            returncode=code,
            stderr=stderr,
        )

    logger.info("gh pr create succeeded for %s -> %s", pr.head, pr.base)
    return stdout
