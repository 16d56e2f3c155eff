from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from research_scaffold.scaffold.types import ArtifactResult


class ScaffoldError(RuntimeError):
    """Base class for failures that abort a scaffolding operation."""


class InvalidName(ScaffoldError):
    pass


class AlreadyExists(ScaffoldError):
    def __init__(self, path: str, *, what: str = "study") -> None:
        super().__init__(
            f"{what.capitalize()} '{path}' already exists. Use overwrite to replace "
            "or resume to complete an interrupted run."
        )
        self.path = path
        self.what = what


class NoProjectMarker(ScaffoldError):
    def __init__(self, root: str, *, reason: str) -> None:
        super().__init__(f"{reason} in '{root}'. Is this a scaffolded project?")
        self.root = root
        self.reason = reason


class IOFailure(ScaffoldError):
    """A single directory or file could not be created."""

    def __init__(self, path: str, *, operation: str, cause: OSError) -> None:
        super().__init__(f"{operation} failed for '{path}': {cause.strerror or cause}")
        self.path = path
        self.operation = operation
        self.cause = cause


class PartialFailure(ScaffoldError):
    """An artifact failed after earlier ones were written.

    `results` holds every artifact handled before the failure. Re-running with
    the keep-existing policy completes the job; `hint` names how.
    """

    def __init__(
        self,
        failure: IOFailure,
        *,
        results: list[ArtifactResult],
        hint: str = "re-run to complete",
    ) -> None:
        super().__init__(
            f"{failure} ({len(results)} artifact(s) handled before the failure; {hint})"
        )
        self.failure = failure
        self.results = list(results)
        self.hint = hint
