from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from research_scaffold import config
from research_scaffold.errors import IOFailure, PartialFailure
from research_scaffold.launcher import DesktopOpener
from research_scaffold.markdown.sections import patch_section
from research_scaffold.scaffold.materialize import materialize, materialize_all
from research_scaffold.scaffold.mode import detect_project_mode
from research_scaffold.scaffold.paths import (
    find_project_file,
    list_study_names,
    resolve_project_location,
    resolve_study_location,
    validate_name,
)
from research_scaffold.scaffold.templates import (
    README_PATH,
    REPRODUCIBILITY_HEADING,
    project_artifacts,
    render_reproducibility_body,
    study_artifacts,
)
from research_scaffold.scaffold.types import (
    Artifact,
    ArtifactResult,
    AuthoringMode,
    OverwritePolicy,
    ProjectConfig,
    ScaffoldReport,
    StudyUnit,
    parse_mode,
    parse_overwrite_policy,
)
from research_scaffold.vcs.git import (
    git_available,
    has_repository,
    init_repository,
    stage_and_commit,
)

if TYPE_CHECKING:  # pragma: no cover
    from research_scaffold.launcher import ProjectOpener
    from research_scaffold.vcs.git import CommandRunner

logger = logging.getLogger(__name__)


def _policy(overwrite: bool) -> OverwritePolicy:
    return parse_overwrite_policy(overwrite) or "keep_existing"


def _require_mode(raw: str) -> AuthoringMode:
    mode = parse_mode(raw)
    if mode is None:
        raise ValueError(f"unknown authoring mode: {raw!r}")
    return mode


def _warn(report: ScaffoldReport, msg: str) -> None:
    logger.warning("%s", msg)
    report.warnings.append(msg)


def _git_ready(report: ScaffoldReport, runner: CommandRunner | None) -> bool:
    # An injected runner is trusted; the default one needs the git binary.
    if runner is None and not git_available():
        _warn(report, "Git not found on system. Skipping git operations.")
        return False
    return True


def init_project(
    path: str | Path = ".",
    *,
    project_name: str | None = None,
    study_name: str = "study-1",
    overwrite: bool = False,
    mode: str = "literate",
    git_init: bool = False,
    open_session: bool = False,
    ignore_large_outputs: bool | None = None,
    runner: CommandRunner | None = None,
    opener: ProjectOpener | None = None,
    cwd: Path | None = None,
) -> ScaffoldReport:
    """Materialize a project skeleton with one study.

    Safe to re-run: with overwrite off, a second call with the same arguments
    reports every artifact as skipped and changes nothing on disk.
    """
    study = StudyUnit(name=validate_name(study_name), authoring_mode=_require_mode(mode))
    loc = resolve_project_location(path, project_name, cwd=cwd)
    cfg = ProjectConfig(
        root_path=loc.root,
        project_name=loc.name,
        authoring_mode=study.authoring_mode,
        overwrite_policy=_policy(overwrite),
        ignore_large_outputs=(
            config.ignore_large_outputs() if ignore_large_outputs is None else ignore_large_outputs
        ),
    )
    report = ScaffoldReport(
        project_root=cfg.root_path,
        project_name=cfg.project_name,
        study=study,
        states=["validating"],
        project_file=cfg.root_path / cfg.project_file,
    )

    if loc.existed:
        logger.info("Working in existing directory: %s", cfg.root_path)
    else:
        try:
            cfg.root_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailure(str(cfg.root_path), operation="mkdir", cause=exc) from exc
        logger.info("Created new project directory: %s", cfg.root_path)

    artifacts = project_artifacts(cfg, study, package_date=config.package_snapshot_date())
    report.results = materialize_all(cfg.root_path, artifacts, cfg.overwrite_policy)
    report.states += ["directories_created", "files_rendered"]
    logger.info(
        "Project '%s' ready with study '%s' (%d written, %d skipped)",
        cfg.project_name,
        study.name,
        len(report.written()),
        len(report.results) - len(report.written()),
    )

    if git_init and _git_ready(report, runner):
        outcome = init_repository(
            cfg.root_path,
            message=f"Initial project setup: {cfg.project_name} with {study.name}",
            runner=runner,
        )
        report.git_committed = outcome.ok
        if outcome.ok:
            report.states.append("git_staged")
            logger.info("Git repository initialized with initial commit")
        else:
            _warn(report, f"Failed to initialize git repository: {outcome.detail}")

    if open_session:
        op = opener or DesktopOpener()
        if not op.open(report.project_file):
            _warn(report, f"Could not open {report.project_file.name} automatically")

    report.states.append("done")
    return report


def _materialize_continuing(
    root: Path,
    artifacts: list[Artifact],
    policy: OverwritePolicy,
    *,
    prior: list[ArtifactResult],
    hint: str,
) -> list[ArtifactResult]:
    try:
        return prior + materialize_all(root, artifacts, policy)
    except PartialFailure as exc:
        raise PartialFailure(exc.failure, results=prior + exc.results, hint=hint) from exc.failure


def _update_index(report: ScaffoldReport, root: Path, *, hint: str) -> bool:
    """Refresh the README study index; False when it was left alone."""
    readme = root.joinpath(*README_PATH.parts)
    if not readme.is_file():
        _warn(report, f"No {README_PATH} found; study index not updated")
        return False

    studies = list_study_names(root)
    if len(studies) < 2:
        logger.info("Single study project; %s left as-is", README_PATH)
        return False

    try:
        with readme.open("r", encoding="utf-8", newline="") as f:
            current = f.read()
    except OSError as exc:
        failure = IOFailure(str(README_PATH), operation="read", cause=exc)
        raise PartialFailure(failure, results=report.results, hint=hint) from exc

    body = render_reproducibility_body(studies, report.study.authoring_mode)
    patched = patch_section(current, REPRODUCIBILITY_HEADING, body)
    if not patched.found:
        _warn(report, f"Section '{REPRODUCIBILITY_HEADING}' not found in {README_PATH}; left unchanged")
        return False
    if patched.text == current:
        report.results.append(ArtifactResult(README_PATH, "text_file", "skipped"))
        return True

    try:
        res = materialize(root, Artifact.text_file(README_PATH, patched.text), "overwrite")
    except IOFailure as exc:
        raise PartialFailure(exc, results=report.results, hint=hint) from exc
    report.results.append(res)
    logger.info("Updated %s with %d studies", README_PATH, len(studies))
    return True


def add_study(
    study_name: str,
    *,
    path: str | Path = ".",
    mode: str | None = None,
    git_add: bool | None = None,
    overwrite: bool = False,
    resume: bool = False,
    runner: CommandRunner | None = None,
    cwd: Path | None = None,
) -> ScaffoldReport:
    """Add a study to an existing project and refresh the README index.

    Validation (project marker, name collisions) happens before anything is
    written. When `mode` is omitted it is inferred from the first existing
    study, falling back to the configured default.

    `resume` accepts an existing study folder left by an interrupted run and
    fills in what is missing without touching files already written;
    `overwrite` replaces them instead.
    """
    base = cwd or Path.cwd()
    root = (base / Path(str(path)).expanduser()).resolve()

    project_file = find_project_file(root)
    loc = resolve_study_location(root, study_name, overwrite=overwrite, resume=resume)
    states = ["validating"]
    if loc.existed:
        logger.info(
            "Study folder %s exists; %s", loc.relative_root, "overwriting" if overwrite else "resuming"
        )

    warnings: list[str] = []
    resolved = _require_mode(mode) if mode is not None else None
    if resolved is None:
        detected = detect_project_mode(root, exclude=loc.relative_root.name)
        if detected == "unknown":
            resolved = _require_mode(config.default_mode())
            msg = f"Could not auto-detect mode, defaulting to {resolved}"
            logger.warning("%s", msg)
            warnings.append(msg)
        else:
            resolved = detected
    states.append("mode_resolved")

    study = StudyUnit(name=loc.relative_root.name, authoring_mode=resolved)
    report = ScaffoldReport(
        project_root=root,
        project_name=project_file.stem,
        study=study,
        warnings=warnings,
        states=states,
        project_file=project_file,
    )
    policy = _policy(overwrite)
    hint = f"re-run add-study '{study.name}' with resume to complete"

    items = study_artifacts(study, package_date=config.package_snapshot_date())
    dirs = [a for a in items if a.kind == "directory"]
    files = [a for a in items if a.kind == "text_file"]

    report.results = _materialize_continuing(root, dirs, policy, prior=[], hint=hint)
    states.append("directories_created")
    report.results = _materialize_continuing(root, files, policy, prior=report.results, hint=hint)
    states.append("files_rendered")

    states.append("index_patched" if _update_index(report, root, hint=hint) else "index_skipped")

    use_git = config.git_add_default() if git_add is None else git_add
    if use_git and has_repository(root):
        if _git_ready(report, runner):
            paths = [str(study.relative_root)]
            if (root / README_PATH).is_file():
                paths.append(str(README_PATH))
            outcome = stage_and_commit(root, paths, message=f"Add {study.name}", runner=runner)
            report.git_committed = outcome.ok
            if outcome.ok:
                states.append("git_staged")
                logger.info("Added to git with commit: Add %s", study.name)
            else:
                _warn(report, f"Git staging failed: {outcome.detail}")
    elif use_git:
        logger.info("No git repository in %s; skipping git staging", root)

    states.append("done")
    logger.info("Study '%s' added in %s mode", study.name, study.authoring_mode)
    return report
