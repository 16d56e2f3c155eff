"""Targeted replacement of one markdown section.

Documents are handled as line sequences with their original line endings.
Only the body of the matched section changes; every byte before its heading
and from the next boundary heading onward is kept as-is.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^(?P<marks>#{1,6})(?:[ \t]+(?P<text>.*?))?[ \t]*$")
_CODE_FENCE_RE = re.compile(r"^ {0,3}(```|~~~)")


@dataclass(frozen=True)
class Section:
    heading_text: str
    # 0 for the preamble before the first heading.
    heading_level: int
    start: int
    end: int
    body_lines: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PatchResult:
    text: str
    found: bool
    # Half-open line range [start, end) of the replaced section, heading included.
    span: tuple[int, int] | None = None


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _eol_of(line: str) -> str:
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith("\n"):
        return "\n"
    if line.endswith("\r"):
        return "\r"
    return ""


def _heading_levels(lines: list[str]) -> list[int]:
    """Heading level per line, 0 for non-headings and lines inside code fences."""
    out: list[int] = []
    in_fence = False
    for line in lines:
        raw = _strip_eol(line)
        if _CODE_FENCE_RE.match(raw):
            in_fence = not in_fence
            out.append(0)
            continue
        if in_fence:
            out.append(0)
            continue
        m = _HEADING_RE.match(raw)
        out.append(len(m.group("marks")) if m else 0)
    return out


def _split_sections(lines: list[str]) -> list[Section]:
    levels = _heading_levels(lines)
    starts = [i for i, lvl in enumerate(levels) if lvl]
    if not starts or starts[0] != 0:
        starts.insert(0, 0)

    sections: list[Section] = []
    for idx, start in enumerate(starts):
        end = starts[idx + 1] if idx + 1 < len(starts) else len(lines)
        if start >= end:
            continue
        level = levels[start]
        if level:
            m = _HEADING_RE.match(_strip_eol(lines[start]))
            heading = (m.group("text") or "") if m else ""
            body = lines[start + 1 : end]
        else:
            heading = ""
            body = lines[start:end]
        sections.append(
            Section(heading_text=heading, heading_level=level, start=start, end=end, body_lines=list(body))
        )
    return sections


def parse_sections(text: str) -> list[Section]:
    """Split a document into contiguous, non-overlapping sections.

    A new section starts at every heading regardless of level. Lines before
    the first heading form a level-0 preamble (omitted when empty).
    """
    return _split_sections(text.splitlines(keepends=True))


def _heading_matcher(heading: str | re.Pattern[str]) -> tuple[re.Pattern[str], int]:
    if isinstance(heading, re.Pattern):
        m = re.match(r"\^?(#{1,6})", heading.pattern)
        if not m:
            raise ValueError("heading pattern must start with a markdown heading marker")
        return heading, len(m.group(1))
    h = (heading or "").strip()
    m = _HEADING_RE.match(h)
    if not m or not (m.group("text") or "").strip():
        raise ValueError(f"not a markdown heading: {heading!r}")
    return re.compile("^" + re.escape(h) + r"(?=[ \t]|$)"), len(m.group("marks"))


def find_section_span(lines: list[str], heading: str | re.Pattern[str]) -> tuple[int, int] | None:
    """Return [start, end) of the first section whose heading matches.

    The span ends at the next heading of the same or a higher level (fewer
    '#'), or at the end of the document. Deeper sub-headings stay inside.
    """
    pattern, level = _heading_matcher(heading)
    sections = _split_sections(lines)

    for idx, section in enumerate(sections):
        if not section.heading_level or not pattern.match(_strip_eol(lines[section.start])):
            continue
        for nxt in sections[idx + 1 :]:
            if nxt.heading_level <= level:
                return section.start, nxt.start
        return section.start, len(lines)
    return None


def patch_section(document: str, heading: str | re.Pattern[str], new_body: str) -> PatchResult:
    """Replace the body of the first section matching `heading`.

    When no heading matches, the document is returned unchanged with
    `found=False`; callers treat that as a warning, not an error.
    """
    lines = document.splitlines(keepends=True)
    span = find_section_span(lines, heading)
    if span is None:
        logger.debug("Section %r not found; leaving document unchanged", heading)
        return PatchResult(text=document, found=False)

    start, end = span
    heading_line = lines[start]
    eol = _eol_of(heading_line)
    if not eol:
        # Heading was the last line without a terminator.
        eol = "\n"
        heading_line = heading_line + eol

    body = new_body or ""
    if eol != "\n":
        body = body.replace("\r\n", "\n").replace("\n", eol)
    if body and not body.endswith(eol):
        body += eol

    out = "".join(lines[:start]) + heading_line + body + "".join(lines[end:])
    return PatchResult(text=out, found=True, span=span)
