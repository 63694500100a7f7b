"""Git metadata for upload requests.

CI environment variables take precedence; otherwise the local checkout is
queried with ``git rev-parse``. Every lookup degrades to None.
"""

import logging
import os
import subprocess
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 10


def _run_git(args: list[str], cwd: Path | None = None) -> str | None:
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        logger.debug(f"git {' '.join(args)} failed: {e}")
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def _first_env(env: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def get_commit_id(cwd: Path | None = None, env: Mapping[str, str] | None = None) -> str | None:
    """Get the current commit SHA.

    Uses GITHUB_SHA when set, then ``git rev-parse HEAD``.

    Returns:
        Commit SHA if available, None otherwise
    """
    env = os.environ if env is None else env
    return _first_env(env, "GITHUB_SHA") or _run_git(["rev-parse", "HEAD"], cwd)


def get_branch(cwd: Path | None = None, env: Mapping[str, str] | None = None) -> str | None:
    """Get the current branch name.

    Uses GITHUB_REF_NAME, then GITHUB_HEAD_REF, then
    ``git rev-parse --abbrev-ref HEAD``.

    Returns:
        Branch name if available, None otherwise
    """
    env = os.environ if env is None else env
    return _first_env(env, "GITHUB_REF_NAME", "GITHUB_HEAD_REF") or _run_git(
        ["rev-parse", "--abbrev-ref", "HEAD"], cwd
    )
