"""Editor state for one open document."""

from dataclasses import replace
from datetime import datetime
from typing import List, Dict, Any, Optional, Tuple
import logging

from ..config import MIN_SELECTION_CHARS, REFERENCES_SECTION_ID, REFERENCES_TITLE
from ..exceptions import SelectionError
from ..models.message import Message
from ..models.proposals import AgentReply, AnalysisResult, CitationPlacement, CitationSuggestion, Issue, RelatedPaper
from ..models.section import Section, Selection
from ..patching.patcher import (
    apply_fix_to_sections,
    clamp_offsets,
    find_section_for_snippet,
    locate_snippet,
    splice_document
)
from ..sectioning.markdown import join_as_markdown
from ..sectioning.sectionizer import Sectionizer, default_sections

logger = logging.getLogger(__name__)

class DocumentSession:
    """Holds the sections, selection and pending issues of one document.

    The session owns no text-processing logic of its own: every edit goes
    through the pure sectioning and patching functions and the result replaces
    ``self.sections`` in one assignment.
    """

    def __init__(
        self,
        sections: Optional[List[Section]] = None,
        sectionizer: Optional[Sectionizer] = None,
        max_transcript_messages: int = 50
    ):
        """Initialize the session.

        Args:
            sections: Initial sections (default seed sections if omitted)
            sectionizer: Sectionizer used for imports and full-document reflows
            max_transcript_messages: Maximum number of transcript messages to keep
        """
        self.sectionizer = sectionizer or Sectionizer()
        self.sections: List[Section] = list(sections) if sections else default_sections()
        self.active_section_id: str = self.sections[0].id
        self.full_document_mode: bool = False
        self.selection: Optional[Selection] = None
        self.issues: List[Issue] = []
        self.previewing_issue: Optional[Issue] = None
        self.general_feedback: str = ""
        self.discovery: List[RelatedPaper] = []
        self.max_transcript_messages = max_transcript_messages
        self.transcript: List[Message] = []

    # Views

    @property
    def active_section(self) -> Section:
        for section in self.sections:
            if section.id == self.active_section_id:
                return section
        return self.sections[0]

    @property
    def full_text(self) -> str:
        return join_as_markdown(self.sections)

    def current_view(self) -> str:
        """Text currently shown in the editor."""
        return self.full_text if self.full_document_mode else self.active_section.content

    def get_section(self, section_id: str) -> Optional[Section]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def set_active_section(self, section_id: str) -> None:
        if self.get_section(section_id) is None:
            raise ValueError(f"Unknown section: {section_id}")
        self.active_section_id = section_id

    def stats(self) -> Dict[str, Any]:
        """Get word, character and section counts for the document."""
        return {
            "section_count": len(self.sections),
            "word_count": sum(section.word_count for section in self.sections),
            "char_count": sum(len(section.content) for section in self.sections),
            "pending_issues": len(self.issues)
        }

    # Document replacement

    def _set_sections(self, sections: List[Section]) -> None:
        self.sections = sections
        if self.get_section(self.active_section_id) is None:
            self.active_section_id = sections[0].id

    def import_text(self, text: str) -> bool:
        """Replace the document with freshly sectioned text.

        Args:
            text: Raw imported text

        Returns:
            False if the text was blank and nothing was imported
        """
        if not text.strip():
            return False
        sections = self.sectionizer.split(text)
        self.sections = sections
        self.active_section_id = sections[0].id
        self.selection = None
        logger.info(f"Imported document with {len(sections)} sections")
        return True

    def replace_active_content(self, text: str) -> None:
        """Replace the active section's content, e.g. with a humanized rewrite."""
        target_id = self.active_section.id
        self._set_sections([
            replace(section, content=text) if section.id == target_id else section
            for section in self.sections
        ])

    def replace_document(self, text: str) -> None:
        """Replace the current view with rewritten text.

        In full-document mode the text is sectioned again; otherwise only the
        active section changes.
        """
        if self.full_document_mode:
            self._set_sections(self.sectionizer.split(text))
        else:
            self.replace_active_content(text)

    def reset(self) -> None:
        """Restore the seed document and drop all transient state."""
        self.sections = default_sections()
        self.active_section_id = self.sections[0].id
        self.selection = None
        self.issues = []
        self.previewing_issue = None
        self.general_feedback = ""
        self.discovery = []

    # Selection

    def select(self, start: int, end: int, section_id: Optional[str] = None) -> Optional[Selection]:
        """Record a user selection.

        Args:
            start: Start offset
            end: End offset
            section_id: Section the offsets belong to; None means the current view

        Returns:
            The new selection, or None if the selection is too small to act on
        """
        if section_id is not None:
            section = self.get_section(section_id)
            if section is None:
                self.selection = None
                return None
            body = section.content
        else:
            body = self.current_view()

        start, end = clamp_offsets(body, start, end)
        text = body[start:end]
        if len(''.join(text.split())) < MIN_SELECTION_CHARS:
            self.selection = None
            return None

        self.selection = Selection(text=text, start=start, end=end, section_id=section_id)
        return self.selection

    def clear_selection(self) -> None:
        self.selection = None

    def update_at_selection(self, new_segment: str, keep_selection: bool = False) -> None:
        """Replace the selected text with a new segment.

        Args:
            new_segment: Replacement text (micro-edit result, text plus citation marker, ...)
            keep_selection: Keep the selection live, now covering the new segment

        Raises:
            SelectionError: If there is no active selection
        """
        selection = self.selection
        if selection is None:
            raise SelectionError("No text selected")

        if self.full_document_mode and selection.section_id is None:
            self._set_sections(splice_document(
                self.sections, selection.start, selection.end, new_segment,
                sectionizer=self.sectionizer
            ))
            target_id = None
        else:
            target_id = selection.section_id or self.active_section.id
            self._set_sections(splice_document(
                self.sections, selection.start, selection.end, new_segment, section_id=target_id
            ))

        if not keep_selection:
            self.selection = None
        elif target_id is None:
            self.selection = self._relocate(new_segment, selection.start)
        else:
            self.selection = Selection(
                text=new_segment,
                start=selection.start,
                end=selection.start + len(new_segment),
                section_id=selection.section_id
            )
        logger.debug(f"Updated selection in {target_id or 'full document'}")

    def _relocate(self, segment: str, near: int) -> Optional[Selection]:
        # A reflow trims section bodies and may turn lines into headings
        text = segment.strip()
        if not text:
            return None
        full_text = self.full_text
        starts = []
        index = full_text.find(text)
        while index != -1:
            starts.append(index)
            index = full_text.find(text, index + 1)
        if not starts:
            logger.debug("Selection lost after full-document reflow")
            return None
        start = min(starts, key=lambda i: abs(i - near))
        return Selection(text=text, start=start, end=start + len(text), section_id=None)

    def cite_at_selection(self, marker: str) -> None:
        """Append a citation marker to the selected text, keeping the selection."""
        if self.selection is None:
            raise SelectionError("Select a sentence before inserting a citation")
        self.update_at_selection(f"{self.selection.text} {marker}", keep_selection=True)

    def apply_citation_suggestion(self, suggestion: CitationSuggestion) -> None:
        """Cite the selection and add the suggested references to the reference list."""
        if self.selection is None:
            raise SelectionError("Select a sentence before inserting a citation")
        self.update_at_selection(f"{self.selection.text} {suggestion.citation_marker}", keep_selection=True)
        for reference in suggestion.references:
            self.add_reference(reference)
        if suggestion.related_papers:
            self.discovery = list(suggestion.related_papers)
        self.selection = None

    def attach_placements(self, paper_id: str, placements: List[CitationPlacement]) -> RelatedPaper:
        """Store suggested citation placements on a discovered paper.

        Placements without a section id are assigned the first section whose
        content contains their snippet.

        Args:
            paper_id: Id of a paper in ``self.discovery``
            placements: Placements returned for that paper

        Returns:
            The updated paper

        Raises:
            ValueError: If no discovered paper has that id
        """
        for index, paper in enumerate(self.discovery):
            if paper.id == paper_id:
                break
        else:
            raise ValueError(f"Unknown paper: {paper_id}")

        resolved = []
        for placement in placements:
            if placement.section_id is None:
                section = find_section_for_snippet(self.sections, placement.snippet)
                if section is not None:
                    placement = placement.model_copy(update={"section_id": section.id})
            resolved.append(placement)

        paper = paper.model_copy(update={"suggested_placements": resolved})
        self.discovery[index] = paper
        return paper

    def add_reference(self, reference: str) -> Section:
        """Append an entry to the reference list, creating the section if needed.

        Returns:
            The updated references section
        """
        sections = list(self.sections)
        index = next(
            (i for i, section in enumerate(sections) if 'reference' in section.title.lower()),
            None
        )
        if index is None:
            sections.append(Section(id=REFERENCES_SECTION_ID, title=REFERENCES_TITLE, content=""))
            index = len(sections) - 1

        current = sections[index].content.strip()
        separator = '\n' if current else ''
        sections[index] = replace(sections[index], content=current + separator + reference)
        self.sections = sections
        return sections[index]

    # Issues

    def set_issues(self, issues: List[Issue]) -> None:
        self.issues = list(issues)
        self.previewing_issue = None

    def load_analysis(self, result: AnalysisResult) -> None:
        self.set_issues(result.issues)
        self.general_feedback = result.general_feedback
        if result.discovery is not None:
            self.discovery = list(result.discovery)

    def preview_fix(self, issue: Issue) -> bool:
        """Start previewing an issue's fix.

        Returns:
            False if the issue has no snippet or the snippet is no longer in the document
        """
        if locate_snippet(self.full_text, issue.snippet) is None:
            return False
        self.previewing_issue = issue
        return True

    def cancel_preview(self) -> None:
        self.previewing_issue = None

    def preview_span(self) -> Optional[Tuple[int, int]]:
        """Span of the previewed snippet within the current view, if visible."""
        if self.previewing_issue is None:
            return None
        return locate_snippet(self.current_view(), self.previewing_issue.snippet)

    def confirm_fix(self, issue: Issue) -> bool:
        """Apply an issue's fix to the first section containing its snippet.

        Returns:
            True if the fix was applied and the issue removed; False if the
            issue has no edit or its snippet is stale, in which case the issue
            stays pending
        """
        self.previewing_issue = None
        if not issue.is_actionable:
            return False

        sections, applied = apply_fix_to_sections(self.sections, issue.snippet, issue.replacement)
        if not applied:
            logger.warning(f"Issue {issue.id} is stale against the current document")
            return False

        self._set_sections(sections)
        self.issues = [i for i in self.issues if i.id != issue.id]
        logger.info(f"Applied fix for issue {issue.id}")
        return True

    # Transcript

    def record_message(self, role: str, content: str, proposals: Optional[List[Issue]] = None) -> Message:
        """Append a message to the transcript, trimming old messages."""
        message = Message(role=role, content=content, timestamp=datetime.now(), proposals=proposals)
        self.transcript.append(message)
        if len(self.transcript) > self.max_transcript_messages:
            self.transcript = self.transcript[-self.max_transcript_messages:]
        return message

    def record_agent_reply(self, reply: AgentReply) -> Message:
        return self.record_message("assistant", reply.content, proposals=reply.proposals or None)
