from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from research_scaffold.errors import AlreadyExists, InvalidName, NoProjectMarker
from research_scaffold.scaffold.types import (
    PROJECT_FILE_EXT,
    RESERVED_NAMES,
    STUDIES_DIR,
)

logger = logging.getLogger(__name__)

_CURRENT_DIR = ("", ".")


@dataclass(frozen=True)
class ProjectLocation:
    root: Path
    name: str
    existed: bool


@dataclass(frozen=True)
class StudyLocation:
    root: Path
    relative_root: PurePosixPath
    existed: bool


def validate_name(name: str, *, what: str = "study") -> str:
    """Return the stripped name, or raise InvalidName.

    A name must be a single path segment: no separators, no traversal, and not
    one of the reserved top-level folders.
    """
    v = (name or "").strip()
    if not v:
        raise InvalidName(f"{what} name must not be empty")
    if "\x00" in v:
        raise InvalidName(f"invalid {what} name")
    if "/" in v or "\\" in v:
        raise InvalidName(f"{what} name '{v}' must not contain path separators")
    if v in (".", ".."):
        raise InvalidName(f"{what} name '{v}' is not allowed")
    if what == "study" and v in RESERVED_NAMES:
        raise InvalidName(f"'{v}' is a reserved folder name")
    return v


def resolve_project_location(
    path: str | Path = ".",
    project_name: str | None = None,
    *,
    cwd: Path | None = None,
) -> ProjectLocation:
    base = cwd or Path.cwd()
    raw = str(path).strip()
    in_place = raw in _CURRENT_DIR
    given = base if in_place else (base / Path(raw).expanduser())

    name = (project_name or "").strip()
    if name:
        name = validate_name(name, what="project")
        root = given if in_place else given / name
    else:
        root = given
        name = root.resolve().name or "project"

    root = root.resolve()
    return ProjectLocation(root=root, name=name, existed=root.is_dir())


def find_project_file(root: Path) -> Path:
    """Return the project descriptor in root; raise NoProjectMarker if absent."""
    candidates = sorted(p for p in root.glob(f"*{PROJECT_FILE_EXT}") if p.is_file())
    if not candidates:
        raise NoProjectMarker(str(root), reason=f"No {PROJECT_FILE_EXT} file found")
    if len(candidates) > 1:
        logger.warning(
            "Multiple project files in %s, using %s", root, candidates[0].name
        )
    if not (root / STUDIES_DIR).is_dir():
        raise NoProjectMarker(str(root), reason=f"No '{STUDIES_DIR}/' folder found")
    return candidates[0]


def resolve_study_location(
    root: Path, name: str, *, overwrite: bool, resume: bool = False
) -> StudyLocation:
    """Locate studies/<name>.

    An existing folder is a conflict unless the caller overwrites it or
    resumes an interrupted run.
    """
    study = validate_name(name)
    rel = PurePosixPath(STUDIES_DIR) / study
    target = root.joinpath(*rel.parts)
    existed = target.exists()
    if existed and not (overwrite or resume):
        raise AlreadyExists(study)
    return StudyLocation(root=target, relative_root=rel, existed=existed)


def list_study_names(root: Path) -> list[str]:
    """Study folder names under studies/, sorted, reserved names excluded."""
    studies = root / STUDIES_DIR
    if not studies.is_dir():
        return []
    return sorted(
        p.name for p in studies.iterdir() if p.is_dir() and p.name not in RESERVED_NAMES
    )
