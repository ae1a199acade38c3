"""Version and build information for branch-pr."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

__all__ = ["VERSION", "get_version_info", "VersionInfo"]

VERSION = "0.1.0"


@dataclass
class VersionInfo:
    """Version plus the commit it was run from, when installed from a checkout."""

    version: str
    git_commit: str | None

    @property
    def short_commit(self) -> str:
        """Return short git commit hash."""
        if self.git_commit:
            return self.git_commit[:7]
        return "unknown"

    def format_full(self) -> str:
        """Format as full version string."""
        parts = [f"branch-pr v{self.version}"]
        if self.git_commit:
            parts.append(f"({self.short_commit})")
        return " ".join(parts)


def _source_commit() -> str | None:
    """Commit of the checkout this package lives in, or None."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            timeout=2,
            cwd=Path(__file__).parent,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (subprocess.SubprocessError, OSError):
        pass
    return None


@lru_cache(maxsize=1)
def get_version_info() -> VersionInfo:
    """Get version information including git metadata.

    Results are cached for the lifetime of the process.
    """
    return VersionInfo(version=VERSION, git_commit=_source_commit())
