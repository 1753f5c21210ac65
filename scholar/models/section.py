"""Document section and selection data structures."""

from dataclasses import dataclass
from typing import Optional

@dataclass
class Section:
    """Represents one titled block of a document."""
    id: str
    title: str
    content: str = ""

    @property
    def word_count(self) -> int:
        return len(self.content.split())

@dataclass
class Selection:
    """A highlighted span of text awaiting a single follow-up edit.

    ``start`` and ``end`` are offsets into the content of ``section_id`` when
    it is set, otherwise into the full-document view.
    """
    text: str
    start: int
    end: int
    section_id: Optional[str] = None
