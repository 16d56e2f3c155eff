from research_scaffold.markdown.sections import (
    PatchResult,
    Section,
    find_section_span,
    parse_sections,
    patch_section,
)

__all__ = [
    "PatchResult",
    "Section",
    "find_section_span",
    "parse_sections",
    "patch_section",
]
