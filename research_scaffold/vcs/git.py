from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from research_scaffold.config import git_author_env
from research_scaffold.scaffold.types import GIT_DIR

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)


class CommandRunner(Protocol):
    def run(
        self,
        args: list[str],
        *,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess[str]: ...


@dataclass
class SubprocessRunner:
    def run(
        self,
        args: list[str],
        *,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            args,
            cwd=cwd,
            env=env,
            text=True,
            capture_output=True,
            check=check,
        )


@dataclass(frozen=True)
class GitOutcome:
    ok: bool
    detail: str = ""


def git_available() -> bool:
    return shutil.which("git") is not None


def has_repository(root: Path) -> bool:
    return (root / GIT_DIR).is_dir()


def _git_env() -> dict[str, str] | None:
    overrides = git_author_env()
    if not overrides:
        return None
    env = os.environ.copy()
    env.update(overrides)
    return env


def _run_steps(runner: CommandRunner, root: Path, steps: Sequence[list[str]]) -> GitOutcome:
    env = _git_env()
    for args in steps:
        try:
            cp = runner.run(["git", *args], cwd=str(root), env=env, check=False)
        except OSError as exc:
            logger.warning("git %s could not be started: %s", args[0], exc)
            return GitOutcome(False, f"git {args[0]} could not be started: {exc}")
        if cp.returncode != 0:
            out = (cp.stderr or cp.stdout or "").strip()
            logger.warning("git %s failed (exit %s): %s", args[0], cp.returncode, out)
            return GitOutcome(False, f"git {args[0]} failed: {out or cp.returncode}")
    return GitOutcome(True)


def init_repository(root: Path, *, message: str, runner: CommandRunner | None = None) -> GitOutcome:
    """git init, stage everything, and make the initial commit."""
    r = runner or SubprocessRunner()
    return _run_steps(r, root, [["init"], ["add", "."], ["commit", "-m", message]])


def stage_and_commit(
    root: Path,
    paths: Sequence[str],
    *,
    message: str,
    runner: CommandRunner | None = None,
) -> GitOutcome:
    r = runner or SubprocessRunner()
    steps = [["add", p] for p in paths]
    steps.append(["commit", "-m", message])
    return _run_steps(r, root, steps)
