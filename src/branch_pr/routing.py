"""Target branch and label selection by branch-name substring."""

from __future__ import annotations

from branch_pr.config import Config


def _contains(branch_name: str, key: str) -> bool:
    return key.lower() in branch_name.lower()


def resolve_target_branch(branch_name: str, config: Config) -> str:
    """Return the branch the PR should target.

    Rules in ``branches.includes`` are checked in document order and the
    first key found in the branch name (case-insensitive) wins. Falls back
    to ``branches.default``.
    """
    for key, target in config.branches.includes:
        if _contains(branch_name, key):
            return target
    return config.branches.default


def select_labels(config: Config, branch_name: str) -> list[str]:
    """Return default labels plus those of every matching include rule.

    Duplicates are kept.
    """
    labels = list(config.labels.default)
    for key, extra in config.labels.includes:
        if _contains(branch_name, key):
            labels.extend(extra)
    return labels
