from __future__ import annotations

import logging
import os

_MODES = ("literate", "scripted")


def _env_str(name: str) -> str:
    return str(os.environ.get(name) or "").strip()


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    return default


def default_mode() -> str:
    # Used when a caller does not pick a mode and detection finds no signal.
    v = _env_str("RESEARCH_SCAFFOLD_DEFAULT_MODE").lower()
    return v if v in _MODES else "literate"


def ignore_large_outputs() -> bool:
    return _env_bool("RESEARCH_SCAFFOLD_IGNORE_LARGE_OUTPUTS", default=True)


def git_add_default() -> bool:
    return _env_bool("RESEARCH_SCAFFOLD_GIT_ADD", default=True)


def git_author_env() -> dict[str, str]:
    """Return GIT_AUTHOR_*/GIT_COMMITTER_* overrides, empty when unset."""
    out: dict[str, str] = {}
    name = _env_str("RESEARCH_SCAFFOLD_GIT_AUTHOR_NAME")
    email = _env_str("RESEARCH_SCAFFOLD_GIT_AUTHOR_EMAIL")
    if name:
        out["GIT_AUTHOR_NAME"] = name
        out["GIT_COMMITTER_NAME"] = name
    if email:
        out["GIT_AUTHOR_EMAIL"] = email
        out["GIT_COMMITTER_EMAIL"] = email
    return out


def package_snapshot_date() -> str:
    return _env_str("RESEARCH_SCAFFOLD_PACKAGE_DATE") or "2025-01-01"


def log_level() -> int:
    raw = _env_str("RESEARCH_SCAFFOLD_LOG_LEVEL").upper() or "INFO"
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO
