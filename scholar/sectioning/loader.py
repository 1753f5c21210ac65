"""Document loading for plain text, markdown and Word files."""

import logging
from pathlib import Path
from typing import List, Optional, Union

import docx
from docx.text.paragraph import Paragraph

from ..config import SUPPORTED_SUFFIXES
from ..exceptions import DocumentLoadError
from ..models.section import Section
from .sectionizer import Sectionizer

logger = logging.getLogger(__name__)

class DocumentLoader:
    """Loads documents from disk as raw text ready for sectioning."""

    def __init__(self, heading_styles: tuple = ("Title", "Heading")):
        """Initialize the loader.

        Args:
            heading_styles: Word paragraph style name prefixes that mark a heading
        """
        self.heading_styles = heading_styles

    def _is_heading(self, paragraph: Paragraph) -> bool:
        """Check if a Word paragraph uses one of the heading styles."""
        style = paragraph.style
        if style is None or not style.name:
            return False
        return style.name.startswith(self.heading_styles)

    def _paragraph_to_line(self, paragraph: Paragraph) -> str:
        text = paragraph.text.strip()
        if text and self._is_heading(paragraph):
            return f"# {text}"
        return paragraph.text

    def load(self, file_path: Union[str, Path]) -> str:
        """Load a document and extract its text content.

        Word headings are rewritten as ``# title`` lines so they survive
        sectioning.

        Args:
            file_path: Path to the document file

        Returns:
            Extracted text content

        Raises:
            DocumentLoadError: If the file type is not supported or the file cannot be read
        """
        file_path = Path(file_path)
        suffix = file_path.suffix.lower()

        if suffix not in SUPPORTED_SUFFIXES:
            raise DocumentLoadError(f"Unsupported file type: {file_path.suffix}")

        try:
            if suffix == '.docx':
                document = docx.Document(str(file_path))
                text = '\n'.join(self._paragraph_to_line(para) for para in document.paragraphs)
            else:
                with open(file_path, 'r', encoding='utf-8') as f:
                    text = f.read()
        except Exception as e:
            logger.error(f"Failed to load {file_path}: {str(e)}")
            raise DocumentLoadError(f"Failed to load {file_path}: {str(e)}")

        logger.info(f"Loaded {len(text)} characters from {file_path.name}")
        return text

    def load_sections(self, file_path: Union[str, Path], sectionizer: Optional[Sectionizer] = None) -> List[Section]:
        """Load a document and split it into sections."""
        sectionizer = sectionizer or Sectionizer()
        return sectionizer.split(self.load(file_path))
