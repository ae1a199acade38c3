"""branch-pr: open a pull request for the current git branch."""

from branch_pr.version import VERSION, VersionInfo, get_version_info

__version__ = VERSION
__all__ = ["__version__", "VERSION", "VersionInfo", "get_version_info"]
