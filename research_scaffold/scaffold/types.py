from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Literal

AuthoringMode = Literal["literate", "scripted"]
DetectedMode = Literal["literate", "scripted", "unknown"]
OverwritePolicy = Literal["keep_existing", "overwrite"]
ArtifactKind = Literal["directory", "text_file"]
ArtifactAction = Literal["written", "skipped"]

LITERATE_EXT = ".qmd"
SCRIPT_EXT = ".R"
PROJECT_FILE_EXT = ".Rproj"

STUDIES_DIR = "studies"
WRITEUP_DIR = "writeup"
LITERATURE_DIR = "literature"
GIT_DIR = ".git"

# Top-level names that never denote a study.
RESERVED_NAMES = frozenset({WRITEUP_DIR, LITERATURE_DIR, GIT_DIR, STUDIES_DIR})

PROCESSING_STEM = "01-processing"
ANALYSIS_STEM = "02-analysis"
RUN_ALL_STEM = "00-run-all"


def parse_mode(raw: Any) -> AuthoringMode | None:
    v = str(raw or "").strip().lower()
    if v in ("literate", "scripted"):
        return v  # type: ignore[return-value]
    return None


def parse_overwrite_policy(raw: Any) -> OverwritePolicy | None:
    if isinstance(raw, bool):
        return "overwrite" if raw else "keep_existing"
    v = str(raw or "").strip().lower().replace("-", "_")
    if v in ("keep_existing", "overwrite"):
        return v  # type: ignore[return-value]
    return None


def code_ext_for(mode: AuthoringMode) -> str:
    return LITERATE_EXT if mode == "literate" else SCRIPT_EXT


@dataclass(frozen=True)
class StudyLayout:
    """Every directory and file of one study, as project-relative segments."""

    root: PurePosixPath

    @property
    def code(self) -> PurePosixPath:
        return self.root / "code"

    @property
    def data(self) -> PurePosixPath:
        return self.root / "data"

    @property
    def outputs(self) -> PurePosixPath:
        return self.root / "outputs"

    @property
    def data_readme(self) -> PurePosixPath:
        return self.data / "README.md"

    def code_file(self, stem: str, ext: str) -> PurePosixPath:
        return self.code / f"{stem}{ext}"

    def directories(self) -> list[PurePosixPath]:
        return [
            self.root,
            self.root / "materials",
            self.code,
            self.data,
            self.data / "raw",
            self.data / "processed",
            self.outputs,
            self.outputs / "plots",
            self.outputs / "fitted_models",
            self.outputs / "results",
            self.root / "preregistration",
        ]


@dataclass(frozen=True)
class ProjectConfig:
    root_path: Path
    project_name: str
    authoring_mode: AuthoringMode = "literate"
    overwrite_policy: OverwritePolicy = "keep_existing"
    ignore_large_outputs: bool = True

    @property
    def project_file(self) -> PurePosixPath:
        return PurePosixPath(f"{self.project_name}{PROJECT_FILE_EXT}")


@dataclass(frozen=True)
class StudyUnit:
    name: str
    authoring_mode: AuthoringMode = "literate"

    @property
    def relative_root(self) -> PurePosixPath:
        return PurePosixPath(STUDIES_DIR) / self.name

    @property
    def layout(self) -> StudyLayout:
        return StudyLayout(root=self.relative_root)

    @property
    def code_ext(self) -> str:
        return code_ext_for(self.authoring_mode)


@dataclass(frozen=True)
class Artifact:
    relative_path: PurePosixPath
    kind: ArtifactKind
    content: str | None = None

    @classmethod
    def directory(cls, relative_path: PurePosixPath) -> Artifact:
        return cls(relative_path=relative_path, kind="directory")

    @classmethod
    def text_file(cls, relative_path: PurePosixPath, content: str) -> Artifact:
        return cls(relative_path=relative_path, kind="text_file", content=content)


@dataclass(frozen=True)
class ArtifactResult:
    relative_path: PurePosixPath
    kind: ArtifactKind
    action: ArtifactAction


@dataclass
class ScaffoldReport:
    project_root: Path
    project_name: str
    study: StudyUnit
    results: list[ArtifactResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    states: list[str] = field(default_factory=list)
    git_committed: bool | None = None
    project_file: Path | None = None

    @property
    def all_skipped(self) -> bool:
        return all(r.action == "skipped" for r in self.results)

    def written(self) -> list[ArtifactResult]:
        return [r for r in self.results if r.action == "written"]

    def rows(self) -> list[dict[str, str]]:
        return [
            {"path": str(r.relative_path), "kind": r.kind, "action": r.action}
            for r in self.results
        ]
