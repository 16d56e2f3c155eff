"""Create-if-absent writes of scaffold artifacts.

Existing files are never read or modified under the keep-existing policy; this
is what makes every scaffolding command safe to re-run over a project the
user has already edited.
"""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import suppress
from typing import TYPE_CHECKING

from research_scaffold.errors import IOFailure, PartialFailure
from research_scaffold.scaffold.types import Artifact, ArtifactResult, OverwritePolicy

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)


def _atomic_write_text(path: Path, content: str) -> None:
    # Temp file lives beside the target so os.replace stays on one filesystem.
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, str(path))
    except BaseException:
        with suppress(OSError):
            os.unlink(tmp_path)
        raise


def materialize(root: Path, artifact: Artifact, policy: OverwritePolicy) -> ArtifactResult:
    target = root.joinpath(*artifact.relative_path.parts)

    if artifact.kind == "directory":
        if target.is_dir():
            return ArtifactResult(artifact.relative_path, "directory", "skipped")
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailure(str(artifact.relative_path), operation="mkdir", cause=exc) from exc
        return ArtifactResult(artifact.relative_path, "directory", "written")

    if policy == "keep_existing" and (target.exists() or target.is_symlink()):
        return ArtifactResult(artifact.relative_path, "text_file", "skipped")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write_text(target, artifact.content or "")
    except OSError as exc:
        raise IOFailure(str(artifact.relative_path), operation="write", cause=exc) from exc
    return ArtifactResult(artifact.relative_path, "text_file", "written")


def materialize_all(
    root: Path, artifacts: Iterable[Artifact], policy: OverwritePolicy
) -> list[ArtifactResult]:
    """Materialize artifacts in order.

    Stops at the first failure and raises PartialFailure carrying the results
    of everything handled before it.
    """
    results: list[ArtifactResult] = []
    for artifact in artifacts:
        try:
            res = materialize(root, artifact, policy)
        except IOFailure as exc:
            logger.error("Scaffolding stopped at %s: %s", artifact.relative_path, exc)
            raise PartialFailure(exc, results=results) from exc
        if res.action == "written":
            logger.debug("wrote %s %s", res.kind, res.relative_path)
        results.append(res)
    return results
