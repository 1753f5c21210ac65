"""Heading-based sectionizer for imported document text."""

import copy
import re
import time
import logging
from typing import List, Optional

from ..config import (
    DETECT_UPPERCASE_HEADINGS,
    FRONT_MATTER_TITLE,
    MIN_UPPERCASE_HEADING_LENGTH,
    UNTITLED_DOCUMENT_TITLE
)
from ..models.section import Section

logger = logging.getLogger(__name__)

# Seed document used whenever sectioning yields nothing renderable
DEFAULT_SECTIONS: List[Section] = [
    Section(
        id="abstract",
        title="Abstract",
        content=(
            "Artificial Intelligence (AI) has rapidly evolved, becoming a tapestry of innovation "
            "in various fields. It is paramount to underscore the significance of Large Language "
            "Models (LLMs) in this landscape."
        ),
    ),
    Section(
        id="intro",
        title="Introduction",
        content=(
            "The rapid proliferation of digital technologies has ushered in a new era of "
            "information dissemination. It is important to note that the data landscape is shifting."
        ),
    ),
    Section(
        id="methods",
        title="Methods",
        content="We utilize a novel framework to assess the performance of transformers in zero-shot environments.",
    ),
    Section(id="refs", title="References", content=""),
]

def default_sections() -> List[Section]:
    """Return a fresh copy of the seed sections."""
    return copy.deepcopy(DEFAULT_SECTIONS)

class Sectionizer:
    """Splits flat text into titled sections at heading-like lines."""

    # "# Title", "## Title", ... with non-empty text after the hashes
    MARKDOWN_HEADING = re.compile(r'^\s*#+(?!#)\s*(\S.*?)\s*$')

    def __init__(
        self,
        min_uppercase_heading_length: int = MIN_UPPERCASE_HEADING_LENGTH,
        detect_uppercase_headings: bool = DETECT_UPPERCASE_HEADINGS
    ):
        """Initialize the sectionizer.

        The ALL CAPS rule is a loose heuristic and will also fire on shouted
        prose lines such as "SEE NOTE"; raise the minimum length or switch it
        off for documents that only use markdown headings.

        Args:
            min_uppercase_heading_length: Shortest trimmed ALL CAPS line treated as a heading (default: 4)
            detect_uppercase_headings: Whether ALL CAPS lines count as headings at all (default: True)
        """
        self.min_uppercase_heading_length = min_uppercase_heading_length
        self.detect_uppercase_headings = detect_uppercase_headings
        self.uppercase_heading = re.compile(r'^[A-Z ]+$')

    def heading_title(self, line: str) -> Optional[str]:
        """Return the heading text if ``line`` is a heading line, else None."""
        match = self.MARKDOWN_HEADING.match(line)
        if match:
            return match.group(1)

        if self.detect_uppercase_headings:
            stripped = line.strip()
            if len(stripped) >= self.min_uppercase_heading_length and self.uppercase_heading.match(stripped):
                return stripped

        return None

    def split(self, text: str) -> List[Section]:
        """Split text into ordered sections.

        Args:
            text: Raw imported text

        Returns:
            Ordered list of sections; the default seed sections when the text
            holds nothing but whitespace
        """
        created = int(time.time() * 1000)
        sections: List[Section] = []
        current_title: Optional[str] = None
        buffer: List[str] = []

        def is_open() -> bool:
            return current_title is not None or any(line.strip() for line in buffer)

        def emit(fallback_title: str) -> None:
            sections.append(Section(
                id=f"sec-{len(sections)}-{created}",
                title=current_title if current_title is not None else fallback_title,
                content='\n'.join(buffer).strip()
            ))

        for line in re.split(r'\r?\n', text):
            title = self.heading_title(line)
            if title is None:
                buffer.append(line)
                continue

            if is_open():
                emit(FRONT_MATTER_TITLE)
            current_title = title
            buffer = []

        if is_open():
            # Only reachable without a title when no heading was ever seen
            emit(UNTITLED_DOCUMENT_TITLE)

        if not sections:
            logger.info("No content found while sectioning, using default sections")
            return default_sections()

        logger.debug(f"Split text into {len(sections)} sections")
        return sections

def sectionize(text: str) -> List[Section]:
    """Split text into sections using the default heading rules."""
    return Sectionizer().split(text)
