"""Build metadata reported by the health endpoint.

APP_VERSION comes from the environment in CI and otherwise from the installed
distribution. GIT_COMMIT comes from the environment or, in a checkout, git.
"""

import os
import subprocess
from importlib import metadata

DISTRIBUTION_NAME = "artillery-duel"


def _installed_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "dev"


def _git_short_sha() -> str:
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            text=True,
            stderr=subprocess.DEVNULL,
        ).strip()
    except (FileNotFoundError, subprocess.CalledProcessError):
        return "unknown"


APP_VERSION: str = os.environ.get("APP_VERSION") or _installed_version()
GIT_COMMIT: str = os.environ.get("GIT_COMMIT") or _git_short_sha()
