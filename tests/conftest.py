import sys
from pathlib import Path

import pytest

# Ensure the repo root is on sys.path so tests can import `research_scaffold` uninstalled.
ROOT = str(Path(__file__).resolve().parents[1])
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture(autouse=True)
def _clean_scaffold_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Developer shells may carry overrides; tests start from the documented defaults.
    for name in (
        "RESEARCH_SCAFFOLD_DEFAULT_MODE",
        "RESEARCH_SCAFFOLD_IGNORE_LARGE_OUTPUTS",
        "RESEARCH_SCAFFOLD_GIT_ADD",
        "RESEARCH_SCAFFOLD_GIT_AUTHOR_NAME",
        "RESEARCH_SCAFFOLD_GIT_AUTHOR_EMAIL",
        "RESEARCH_SCAFFOLD_PACKAGE_DATE",
        "RESEARCH_SCAFFOLD_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def _snapshot_tree(root: Path) -> dict[str, bytes | None]:
    out: dict[str, bytes | None] = {}
    for p in sorted(root.rglob("*")):
        rel = p.relative_to(root).as_posix()
        out[rel] = None if p.is_dir() else p.read_bytes()
    return out


@pytest.fixture
def snapshot():
    """Relative path -> file bytes (None for directories) of a whole tree."""
    return _snapshot_tree
