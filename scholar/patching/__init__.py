"""Patching package for locating and applying text edits."""

from .patcher import (
    clamp_offsets,
    splice_at_offsets,
    locate_snippet,
    apply_snippet_fix,
    find_section_for_snippet,
    apply_fix_to_sections,
    splice_document
)

__all__ = [
    'clamp_offsets',
    'splice_at_offsets',
    'locate_snippet',
    'apply_snippet_fix',
    'find_section_for_snippet',
    'apply_fix_to_sections',
    'splice_document'
]
