"""Error types raised by branch-pr.

Every failure is terminal for the run. Modules raise one of these and
the CLI turns it into a message on stderr and a non-zero exit code.
"""

from __future__ import annotations


class BranchPrError(Exception):
    """Base class for all branch-pr errors."""


class ConfigError(BranchPrError):
    """Raised when the configuration cannot be located or read."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML or misses keys."""


class TemplateError(ConfigError):
    """Raised when the PR body template is unreadable or lacks its placeholder."""


class CommandError(BranchPrError):
    """Raised when an external command (git, gh) fails."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr
