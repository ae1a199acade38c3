"""Build the PR body from a template and the branch's commit log.

Commit subjects that start with a configured prefix (conventional-commit
style, ``type(scope): description``) are kept, sorted by prefix and
rendered as a bulleted list in place of ``{LIST_COMMITS}``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from branch_pr import git
from branch_pr.config import Config
from branch_pr.errors import TemplateError
from branch_pr.titles import capitalize_word

logger = logging.getLogger(__name__)

PLACEHOLDER = "{LIST_COMMITS}"

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")


@dataclass(frozen=True)
class CommitEntry:
    """A commit subject reduced to its prefix and message."""

    prefix: str
    message: str


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences (colors, cursor movement)."""
    return ANSI_ESCAPE_RE.sub("", text)


def build_prefix_pattern(prefixes: Sequence[str]) -> re.Pattern[str] | None:
    """Compile ``prefix(scope)?:`` for all prefixes, or None if there are none.

    Longer prefixes are tried first so ``fixup`` is not read as ``fix``.
    """
    if not prefixes:
        return None
    alternatives = "|".join(re.escape(p) for p in sorted(prefixes, key=len, reverse=True))
    return re.compile(rf"(?P<prefix>{alternatives})(?:\([^)]*\))?:")


def normalize_commits(log: str, prefixes: Sequence[str]) -> list[CommitEntry]:
    """Turn ``git log --oneline`` output into sorted prefix/message entries.

    Lines are put in chronological order, blank and non-matching lines are
    dropped, scopes are removed and the result is stably sorted by prefix.
    """
    pattern = build_prefix_pattern(prefixes)
    if pattern is None:
        return []

    entries: list[CommitEntry] = []
    for line in reversed(log.splitlines()):
        line = strip_ansi(line)
        if not line.strip():
            continue
        match = pattern.search(line)
        if match is None:
            logger.debug("Skipping commit without known prefix: %s", line)
            continue
        entries.append(
            CommitEntry(prefix=match.group("prefix"), message=line[match.end() :].strip())
        )

    entries.sort(key=lambda entry: entry.prefix)
    return entries


def format_commit_line(entry: CommitEntry, display: str) -> str:
    """Render one bullet: ``fix: crash on empty input`` with ``Fix`` gives
    ``- Fix crash on empty input``. Only the first character is upper-cased.
    """
    text = f"{display.strip()} {entry.message}".strip()
    return f"- {capitalize_word(text)}"


def format_commit_list(entries: Sequence[CommitEntry], config: Config) -> str:
    """Render entries as newline-joined bullets using the configured display text."""
    display_text = dict(config.commits.prefixes)
    return "\n".join(format_commit_line(e, display_text[e.prefix]) for e in entries)


def resolve_template_path(config: Config, repo_root: Path | None = None) -> Path:
    """Relative template paths are taken from the repository root."""
    path = Path(config.template_path).expanduser()
    if not path.is_absolute() and repo_root is not None:
        path = repo_root / path
    return path


def read_template(path: Path) -> str:
    """Read the template as UTF-8 and check it carries the placeholder.

    Raises:
        TemplateError: If the file is unreadable, not UTF-8, or has no placeholder.
    """
    try:
        template = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise TemplateError(f"Failed to parse template file '{path}': {e}") from e
    except OSError as e:
        raise TemplateError(f"Could not read template file '{path}': {e}") from e

    if PLACEHOLDER not in template:
        raise TemplateError(f"Template '{path}' does not contain {PLACEHOLDER}")
    return template


def render_body(template: str, commit_list: str) -> str:
    """Substitute the commit list for the placeholder.

    The template is expected to come from ``read_template``, which has
    already checked the placeholder.
    """
    return template.replace(PLACEHOLDER, commit_list)


def build_commit_body(config: Config, target_branch: str, repo_root: Path | None = None) -> str:
    """Build the PR body for commits on HEAD that are not on target_branch."""
    template = read_template(resolve_template_path(config, repo_root))

    log = git.get_commit_log(target_branch, cwd=repo_root)
    prefixes = [prefix for prefix, _ in config.commits.prefixes]
    entries = normalize_commits(log, prefixes)
    logger.info("%d of %d commits matched a known prefix", len(entries), len(log.splitlines()))

    return render_body(template, format_commit_list(entries, config))
