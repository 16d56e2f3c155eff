from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from research_scaffold.scaffold.paths import list_study_names
from research_scaffold.scaffold.types import (
    LITERATE_EXT,
    RESERVED_NAMES,
    SCRIPT_EXT,
    STUDIES_DIR,
    DetectedMode,
)

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Iterable, Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)

LITERATE_SUFFIXES = (LITERATE_EXT, ".Rmd")
SCRIPT_SUFFIXES = (SCRIPT_EXT,)


def classify_code_files(filenames: Iterable[str]) -> DetectedMode:
    """Literate wins when a folder holds both formats."""
    names = list(filenames)
    if any(n.endswith(LITERATE_SUFFIXES) for n in names):
        return "literate"
    if any(n.endswith(SCRIPT_SUFFIXES) for n in names):
        return "scripted"
    return "unknown"


def detect(
    existing_studies: Sequence[str],
    *,
    code_listing: Callable[[str], Iterable[str]],
) -> DetectedMode:
    """Infer the authoring mode from the first non-reserved study.

    Only that study is inspected; later studies never change the answer.
    `code_listing` returns the file names in a study's code folder and may
    return an empty list when the folder is missing.
    """
    candidates = [s for s in existing_studies if s not in RESERVED_NAMES]
    if not candidates:
        return "unknown"
    return classify_code_files(code_listing(candidates[0]))


def _code_listing_for(project_root: Path) -> Callable[[str], list[str]]:
    def _list(study: str) -> list[str]:
        code_dir = project_root / STUDIES_DIR / study / "code"
        try:
            return sorted(p.name for p in code_dir.iterdir() if p.is_file())
        except OSError:
            return []

    return _list


def detect_project_mode(project_root: Path, *, exclude: str | None = None) -> DetectedMode:
    """Detect the mode on disk, ignoring `exclude` (a study being re-created)."""
    try:
        studies = [s for s in list_study_names(project_root) if s != exclude]
    except OSError as exc:
        logger.warning("Could not list studies in %s: %s", project_root, exc)
        return "unknown"
    mode = detect(studies, code_listing=_code_listing_for(project_root))
    if mode != "unknown":
        logger.info("Auto-detected %s mode from study '%s'", mode, studies[0])
    return mode
