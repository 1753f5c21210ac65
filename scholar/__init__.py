"""
Scholar editor document engine.
"""

from .models import Section, Selection, Issue
from .sectioning import Sectionizer, sectionize, join_as_markdown, DocumentLoader
from .patching import splice_at_offsets, apply_snippet_fix, apply_fix_to_sections, splice_document
from .session import DocumentSession

__all__ = [
    'Section',
    'Selection',
    'Issue',
    'Sectionizer',
    'sectionize',
    'join_as_markdown',
    'DocumentLoader',
    'splice_at_offsets',
    'apply_snippet_fix',
    'apply_fix_to_sections',
    'splice_document',
    'DocumentSession'
]
