"""Determine the supported wire-format version string."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path

__all__ = ["wire_version", "detect_version"]

_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$"
)


def wire_version(git_hash: str | None, package_version: str) -> str:
    """The wire version: the git hash if known, else the breaking part of the semver.

    With major version 0 the minor version is breaking, so ``0.2.1`` gives ``0.2``;
    otherwise only the major version counts.
    """
    if git_hash is not None:
        return git_hash.strip()
    match = _SEMVER_RE.match(package_version.strip())
    if match is None:
        raise ValueError(f"invalid semantic version {package_version!r}")
    major, minor = int(match.group(1)), int(match.group(2))
    if major == 0:
        return f"{major}.{minor}"
    return str(major)


def _git_head(repo_dir: Path) -> str | None:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=repo_dir,
            capture_output=True,
            check=False,
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError:
        return None


def detect_version(repo_dir: str | Path, package_version: str) -> str:
    """Find the wire version for a checkout at ``repo_dir``.

    Raises ``RuntimeError`` when the directory is a git checkout but ``git``
    cannot be run.
    """
    repo_dir = Path(repo_dir)
    git_hash = _git_head(repo_dir)
    if git_hash is None and (repo_dir / ".git").exists():
        raise RuntimeError(
            "you need to install the `git` command line tool to use the git version"
        )
    return wire_version(git_hash, package_version)