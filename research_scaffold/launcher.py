from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from pathlib import Path

logger = logging.getLogger(__name__)


class ProjectOpener(Protocol):
    def open(self, project_file: Path) -> bool: ...


def _open_command(project_file: Path) -> list[str] | None:
    if shutil.which("rstudio"):
        return ["rstudio", str(project_file)]
    if sys.platform == "darwin":
        return ["open", str(project_file)]
    if sys.platform.startswith("win"):
        return ["cmd", "/c", "start", "", str(project_file)]
    if shutil.which("xdg-open"):
        return ["xdg-open", str(project_file)]
    return None


@dataclass
class DesktopOpener:
    """Hands the project file to the IDE or desktop and returns immediately."""

    def open(self, project_file: Path) -> bool:
        cmd = _open_command(project_file)
        if cmd is None:
            logger.warning("No IDE or desktop opener found for %s", project_file)
            return False
        try:
            subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.warning("Could not open %s: %s", project_file, exc)
            return False
        return True
