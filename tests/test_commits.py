"""Tests for commit normalization and PR body assembly."""

from pathlib import Path
from unittest.mock import patch

import pytest

from branch_pr.commits import (
    CommitEntry,
    build_commit_body,
    format_commit_line,
    format_commit_list,
    normalize_commits,
    read_template,
    render_body,
    resolve_template_path,
    strip_ansi,
)
from branch_pr.config import Config
from branch_pr.errors import ConfigError, TemplateError

PREFIXES = ["feat", "fix", "docs"]

# git log --oneline order: newest first
LOG = """\
c3c3c3c fix(api): handle null response
b2b2b2b Merge branch 'develop'

a1a1a1a feat: add login page
9f9f9f9 chore: bump deps
8e8e8e8 feat(ui): dark mode
"""


class TestStripAnsi:
    def test_removes_color_codes(self):
        assert strip_ansi("\x1b[33mabc1234\x1b[m feat: x") == "abc1234 feat: x"

    def test_plain_text_unchanged(self):
        assert strip_ansi("fix: nothing to strip") == "fix: nothing to strip"


class TestNormalizeCommits:
    """Tests for normalize_commits."""

    def test_filters_sorts_and_strips_scope(self):
        entries = normalize_commits(LOG, PREFIXES)
        assert entries == [
            CommitEntry("feat", "dark mode"),
            CommitEntry("feat", "add login page"),
            CommitEntry("fix", "handle null response"),
        ]

    def test_same_prefix_keeps_chronological_order(self):
        log = "3 feat: third\n2 feat: second\n1 feat: first\n"
        messages = [e.message for e in normalize_commits(log, ["feat"])]
        assert messages == ["first", "second", "third"]

    def test_ansi_sequences_removed(self):
        log = "\x1b[33mabc1234\x1b[m feat: add \x1b[1mbold\x1b[0m thing"
        assert normalize_commits(log, ["feat"]) == [CommitEntry("feat", "add bold thing")]

    def test_no_prefixes_configured(self):
        assert normalize_commits(LOG, []) == []

    def test_empty_log(self):
        assert normalize_commits("", PREFIXES) == []

    def test_longer_prefix_wins(self):
        entries = normalize_commits("abc fixup: tweak", ["fix", "fixup"])
        assert entries == [CommitEntry("fixup", "tweak")]

    def test_prefix_may_end_a_longer_word(self):
        assert normalize_commits("abc1234 hotfix: crash", ["fix"]) == [CommitEntry("fix", "crash")]

    def test_prefix_with_regex_characters(self):
        entries = normalize_commits("abc [wip]: half done", ["[wip]"])
        assert entries == [CommitEntry("[wip]", "half done")]

    def test_prefix_without_colon_is_ignored(self):
        assert normalize_commits("abc feat add thing", ["feat"]) == []


class TestFormatCommitLine:
    def test_empty_display_text(self):
        assert format_commit_line(CommitEntry("feat", "add login"), "") == "- Add login"

    def test_display_text_is_prepended(self):
        line = format_commit_line(CommitEntry("fix", "handle null"), "Fix")
        assert line == "- Fix handle null"

    def test_display_text_whitespace_is_trimmed(self):
        line = format_commit_line(CommitEntry("docs", "readme"), "docs: ")
        assert line == "- Docs: readme"

    def test_message_case_is_preserved(self):
        line = format_commit_line(CommitEntry("fix", "Handle NULL in API"), "Fix")
        assert line == "- Fix Handle NULL in API"

    def test_empty_message(self):
        assert format_commit_line(CommitEntry("fix", ""), "Fix") == "- Fix"

    def test_format_commit_list(self, config: Config):
        entries = [CommitEntry("docs", "update readme"), CommitEntry("feat", "add login")]
        assert format_commit_list(entries, config) == "- Docs: update readme\n- Add login"


class TestTemplate:
    def test_missing_template(self, tmp_path: Path):
        with pytest.raises(TemplateError, match="Could not read template"):
            read_template(tmp_path / "missing.md")

    def test_template_error_is_config_error(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            read_template(tmp_path / "missing.md")

    def test_invalid_encoding(self, tmp_path: Path):
        path = tmp_path / "template.md"
        path.write_bytes(b"\xff\xfe{LIST_COMMITS}\x80")
        with pytest.raises(TemplateError, match="Failed to parse"):
            read_template(path)

    def test_missing_placeholder(self, tmp_path: Path):
        path = tmp_path / "template.md"
        path.write_text("## Changes\n")
        with pytest.raises(TemplateError, match="LIST_COMMITS"):
            read_template(path)

    def test_render_body_replaces_placeholder(self):
        assert render_body("a\n{LIST_COMMITS}\nb", "- X") == "a\n- X\nb"

    def test_render_body_with_empty_list(self):
        assert render_body("a\n{LIST_COMMITS}\nb", "") == "a\n\nb"

    def test_relative_path_resolved_against_repo_root(self, config: Config, tmp_path: Path):
        path = resolve_template_path(config, tmp_path)
        assert path == tmp_path / ".github" / "PULL_REQUEST_TEMPLATE.md"

    def test_absolute_path_kept(self, config_data, tmp_path: Path):
        config_data["template"]["path"] = str(tmp_path / "t.md")
        config = Config.from_dict(config_data)
        assert resolve_template_path(config, Path("/elsewhere")) == tmp_path / "t.md"


class TestBuildCommitBody:
    """Tests for build_commit_body."""

    @patch("branch_pr.commits.git.get_commit_log")
    def test_builds_bulleted_body(self, mock_log, config: Config, repo_root: Path):
        mock_log.return_value = LOG

        body = build_commit_body(config, "develop", repo_root=repo_root)

        mock_log.assert_called_once_with("develop", cwd=repo_root)
        assert body == (
            "## Changes\n\n"
            "- Dark mode\n"
            "- Add login page\n"
            "- Fix handle null response\n\n"
            "## Checklist\n"
        )

    @patch("branch_pr.commits.git.get_commit_log")
    def test_no_matching_commits(self, mock_log, config: Config, repo_root: Path):
        mock_log.return_value = "abc1234 Merge branch 'develop'\n"

        body = build_commit_body(config, "develop", repo_root=repo_root)

        assert body == "## Changes\n\n\n\n## Checklist\n"

    @patch("branch_pr.commits.git.get_commit_log")
    def test_missing_placeholder_fails_before_git(
        self, mock_log, config: Config, repo_root: Path
    ):
        (repo_root / ".github" / "PULL_REQUEST_TEMPLATE.md").write_text("no list here\n")

        with pytest.raises(TemplateError):
            build_commit_body(config, "develop", repo_root=repo_root)
        mock_log.assert_not_called()

    @patch("branch_pr.commits.git.get_commit_log")
    def test_ansi_never_reaches_body(self, mock_log, config: Config, repo_root: Path):
        mock_log.return_value = "\x1b[33ma1\x1b[m \x1b[32mfix\x1b[0m: \x1b[1mcrash\x1b[0m\n"

        body = build_commit_body(config, "develop", repo_root=repo_root)

        assert "\x1b" not in body
        assert "- Fix crash" in body
