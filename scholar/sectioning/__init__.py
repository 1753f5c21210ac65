"""Sectioning package for splitting, loading and exporting documents."""

from .sectionizer import Sectionizer, sectionize, default_sections, DEFAULT_SECTIONS
from .markdown import join_as_markdown, section_to_markdown, export_markdown
from .loader import DocumentLoader

__all__ = [
    'Sectionizer',
    'sectionize',
    'default_sections',
    'DEFAULT_SECTIONS',
    'join_as_markdown',
    'section_to_markdown',
    'export_markdown',
    'DocumentLoader'
]
