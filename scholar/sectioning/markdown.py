"""Markdown framing for the full-document view and export."""

import logging
from pathlib import Path
from typing import List, Union

from ..config import DEFAULT_EXPORT_FILENAME
from ..models.section import Section

logger = logging.getLogger(__name__)

def section_to_markdown(section: Section) -> str:
    return f"# {section.title}\n\n{section.content}"

def join_as_markdown(sections: List[Section]) -> str:
    """Concatenate sections into the full-document view.

    Each section becomes a ``# title`` block and blocks are separated by a
    blank line, which the sectionizer reads back as headings on re-import.
    """
    return '\n\n'.join(section_to_markdown(section) for section in sections)

def export_markdown(sections: List[Section], file_path: Union[str, Path] = DEFAULT_EXPORT_FILENAME) -> Path:
    """Write the sections to a markdown file.

    Args:
        sections: Sections to export
        file_path: Destination path

    Returns:
        Path of the written file
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(join_as_markdown(sections))
    logger.info(f"Exported {len(sections)} sections to {file_path}")
    return file_path
