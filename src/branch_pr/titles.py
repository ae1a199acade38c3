"""Derive a pull request title from a branch name."""

from __future__ import annotations

from branch_pr.config import Config

TICKET_NUMBER = "{ticket_number}"
TICKET_NAME = "{ticket_name}"


def capitalize_word(word: str) -> str:
    """Upper-case the first character, leave the rest unchanged."""
    return word[:1].upper() + word[1:]


def derive_title(branch_name: str, config: Config) -> str:
    """Map a branch name to a PR title.

    ``htp20-123-add-login`` with ``htp20 = "[HTP20-{ticket_number}] {ticket_name}"``
    becomes ``[HTP20-123] add login``. ``hotfix-broken-build`` with
    ``hotfix = "HOTFIX:"`` becomes ``HOTFIX: broken build``. Anything else is
    title-cased segment by segment: ``random-branch`` -> ``Random Branch``.
    """
    parts = branch_name.split("-")
    prefix = parts[0]

    ticket_templates = dict(config.title.jira_prefixes)
    replacements = dict(config.title.prefixes)

    if prefix in ticket_templates:
        if len(parts) > 1:
            ticket_number = parts[1]
            ticket_name = " ".join(parts[2:])
            return (
                ticket_templates[prefix]
                .replace(TICKET_NUMBER, ticket_number)
                .replace(TICKET_NAME, ticket_name)
            )
    elif prefix in replacements:
        return branch_name.replace(prefix, replacements[prefix], 1).replace("-", " ")

    return " ".join(capitalize_word(part) for part in parts)
