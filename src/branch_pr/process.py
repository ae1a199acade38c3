"""Subprocess helper shared by the git and gh wrappers."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from branch_pr.errors import CommandError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120


def run(
    cmd: list[str], cwd: Path | None = None, timeout: int = DEFAULT_TIMEOUT
) -> tuple[int, str, str]:
    """Run a command and return (returncode, stdout, stderr).

    A non-zero exit is returned to the caller. Failing to start the
    command, or a timeout, raises CommandError.
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, cwd=cwd, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise CommandError(f"{cmd[0]} timed out after {timeout}s", command=cmd) from e
    except FileNotFoundError as e:
        raise CommandError(f"Command not found: {cmd[0]}", command=cmd) from e
    except OSError as e:
        raise CommandError(f"Failed to run {cmd[0]}: {e}", command=cmd) from e

    if result.returncode != 0:
        logger.debug("%s exited %d: %s", cmd[0], result.returncode, result.stderr.strip())
    return result.returncode, result.stdout.strip(), result.stderr.strip()
