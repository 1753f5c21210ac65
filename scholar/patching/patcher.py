"""
Locating and applying edits to section text.

All functions here are pure: they return new strings or new section lists and
report "snippet not found" through a boolean instead of raising. Offsets are
trusted; callers recompute them against the current content (see
``clamp_offsets``) before splicing.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from ..models.section import Section
from ..sectioning.markdown import join_as_markdown
from ..sectioning.sectionizer import Sectionizer

logger = logging.getLogger(__name__)

def clamp_offsets(body: str, start: int, end: int) -> Tuple[int, int]:
    """Clamp a (start, end) pair so that 0 <= start <= end <= len(body)."""
    length = len(body)
    start = min(max(start, 0), length)
    end = min(max(end, start), length)
    return start, end

def splice_at_offsets(body: str, start: int, end: int, replacement: str) -> str:
    """Replace ``body[start:end]`` with ``replacement``.

    ``start == end`` is a pure insertion.
    """
    return body[:start] + replacement + body[end:]

def locate_snippet(body: str, snippet: Optional[str]) -> Optional[Tuple[int, int]]:
    """Find the first literal occurrence of a snippet.

    Args:
        body: Text to search
        snippet: Case-sensitive literal to look for

    Returns:
        (start, end) span of the lowest-offset match, or None if the snippet
        is empty or absent
    """
    if not snippet:
        return None
    start = body.find(snippet)
    if start == -1:
        return None
    return start, start + len(snippet)

def apply_snippet_fix(body: str, snippet: Optional[str], replacement: str) -> Tuple[str, bool]:
    """Replace the first occurrence of a snippet.

    The replaced span is exactly the one ``locate_snippet`` previews.

    Args:
        body: Text to edit
        snippet: Literal text to replace
        replacement: Text to put in its place

    Returns:
        Tuple of (new body, applied). ``applied`` is False when the snippet is
        empty or no longer present, in which case the body is returned as is.
    """
    span = locate_snippet(body, snippet)
    if span is None:
        return body, False
    return splice_at_offsets(body, span[0], span[1], replacement), True

def find_section_for_snippet(sections: List[Section], snippet: Optional[str]) -> Optional[Section]:
    """Return the first section, in document order, containing the snippet."""
    if not snippet:
        return None
    for section in sections:
        if snippet in section.content:
            return section
    return None

def apply_fix_to_sections(
    sections: List[Section],
    snippet: Optional[str],
    replacement: str
) -> Tuple[List[Section], bool]:
    """Apply a snippet fix to the first section that contains the snippet.

    Each section is searched on its own, so a snippet spanning a section
    boundary is never matched.

    Args:
        sections: Current sections
        snippet: Literal text to replace
        replacement: Text to put in its place

    Returns:
        Tuple of (new section list, applied)
    """
    target = find_section_for_snippet(sections, snippet)
    if target is None:
        logger.info("Snippet not found in any section, fix not applied")
        return list(sections), False

    updated = []
    for section in sections:
        if section is target:
            content, _ = apply_snippet_fix(section.content, snippet, replacement)
            section = replace(section, content=content)
        updated.append(section)

    logger.debug(f"Applied fix to section {target.id}")
    return updated, True

def splice_document(
    sections: List[Section],
    start: int,
    end: int,
    replacement: str,
    section_id: Optional[str] = None,
    sectionizer: Optional[Sectionizer] = None
) -> List[Section]:
    """Splice text into one section or into the full-document view.

    With ``section_id`` only that section's content changes; its id and title
    are kept. Without it the offsets address ``join_as_markdown(sections)``
    and the spliced text is sectionized again, since the edit may have added
    or removed heading lines.

    Args:
        sections: Current sections
        start: Start offset
        end: End offset
        replacement: Text to insert
        section_id: Section the offsets belong to, or None for the full view
        sectionizer: Sectionizer used for the reflow (default heading rules if omitted)

    Returns:
        New section list
    """
    if section_id is None:
        sectionizer = sectionizer or Sectionizer()
        full_text = join_as_markdown(sections)
        return sectionizer.split(splice_at_offsets(full_text, start, end, replacement))

    updated = []
    for section in sections:
        if section.id == section_id:
            section = replace(section, content=splice_at_offsets(section.content, start, end, replacement))
        updated.append(section)
    return updated
