import shutil
import subprocess

import pytest

from research_scaffold.scaffold.orchestrator import add_study, init_project
from research_scaffold.vcs.git import has_repository, init_repository, stage_and_commit


class _Runner:
    def __init__(self, *, exc: OSError | None = None):
        self.calls = []
        self.envs = []
        self.exc = exc

    def run(self, args, *, cwd=None, env=None, check=True):
        self.calls.append((list(args), cwd))
        self.envs.append(env)
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(args, 0, "", "")


def _git(args: list[str], *, cwd: str) -> str:
    cp = subprocess.run(
        ["git", *args], cwd=cwd, text=True, capture_output=True, check=True
    )
    return (cp.stdout or "").strip()


def test_stage_and_commit_runs_in_project_root(tmp_path):
    r = _Runner()
    out = stage_and_commit(tmp_path, ["studies/a", "README.md"], message="Add a", runner=r)
    assert out.ok
    assert [c[0] for c in r.calls] == [
        ["git", "add", "studies/a"],
        ["git", "add", "README.md"],
        ["git", "commit", "-m", "Add a"],
    ]
    assert {c[1] for c in r.calls} == {str(tmp_path)}
    assert r.envs == [None, None, None]


def test_missing_git_binary_is_reported_not_raised(tmp_path):
    r = _Runner(exc=FileNotFoundError("git"))
    out = init_repository(tmp_path, message="x", runner=r)
    assert not out.ok
    assert "could not be started" in out.detail
    assert len(r.calls) == 1


def test_author_identity_from_config(monkeypatch, tmp_path):
    monkeypatch.setenv("RESEARCH_SCAFFOLD_GIT_AUTHOR_NAME", "Ada")
    monkeypatch.setenv("RESEARCH_SCAFFOLD_GIT_AUTHOR_EMAIL", "ada@example.org")
    r = _Runner()
    init_repository(tmp_path, message="x", runner=r)
    env = r.envs[0]
    assert env["GIT_AUTHOR_NAME"] == "Ada"
    assert env["GIT_COMMITTER_EMAIL"] == "ada@example.org"
    assert "PATH" in env


def test_has_repository(tmp_path):
    assert not has_repository(tmp_path)
    (tmp_path / ".git").mkdir()
    assert has_repository(tmp_path)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_real_git_init_then_add_study(monkeypatch, tmp_path):
    monkeypatch.setenv("RESEARCH_SCAFFOLD_GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("RESEARCH_SCAFFOLD_GIT_AUTHOR_EMAIL", "test@example.org")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")

    report = init_project("demo", study_name="pilot", git_init=True, cwd=tmp_path)
    assert report.git_committed is True
    root = tmp_path / "demo"
    assert _git(["log", "--format=%s"], cwd=str(root)) == "Initial project setup: demo with pilot"

    add_study("followup", path=root)
    subjects = _git(["log", "--format=%s"], cwd=str(root)).splitlines()
    assert subjects[0] == "Add followup"
    assert _git(["status", "--porcelain"], cwd=str(root)) == ""
    tracked = _git(["ls-files"], cwd=str(root)).splitlines()
    assert "studies/followup/code/01-processing.qmd" in tracked
