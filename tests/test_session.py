"""Tests for scholar.session.DocumentSession."""
import pytest

from scholar.exceptions import SelectionError
from scholar.models import (
    AgentReply,
    AnalysisResult,
    CitationSuggestion,
    Issue,
    RelatedPaper,
    Section,
    parse_citation_placements,
)
from scholar.session import DocumentSession


def _paper(paper_id: str = "1") -> RelatedPaper:
    return RelatedPaper(
        id=paper_id,
        title="Cats",
        authors="Smith, J.",
        year="2020",
        relevance="Counts cats.",
        full_reference="Smith, J. (2020). Cats.",
        citation_marker="(Smith, 2020)",
    )


def _session() -> DocumentSession:
    return DocumentSession(sections=[
        Section(id="s1", title="Abstract", content="The cat sat on the mat."),
        Section(id="s2", title="Methods", content="We counted cats."),
        Section(id="s3", title="References", content=""),
    ])


class TestViews:
    def test_default_session_uses_seed(self) -> None:
        session = DocumentSession()
        assert session.active_section.id == "abstract"
        assert len(session.sections) == 4

    def test_full_text(self) -> None:
        session = _session()
        assert session.full_text.startswith("# Abstract\n\nThe cat sat on the mat.\n\n# Methods")

    def test_current_view_follows_mode(self) -> None:
        session = _session()
        assert session.current_view() == "The cat sat on the mat."
        session.full_document_mode = True
        assert session.current_view() == session.full_text

    def test_set_active_section(self) -> None:
        session = _session()
        session.set_active_section("s2")
        assert session.active_section.title == "Methods"
        with pytest.raises(ValueError):
            session.set_active_section("missing")

    def test_stats(self) -> None:
        stats = _session().stats()
        assert stats["section_count"] == 3
        assert stats["word_count"] == 9
        assert stats["pending_issues"] == 0


class TestImport:
    def test_blank_import_ignored(self) -> None:
        session = _session()
        assert session.import_text("   \n ") is False
        assert [s.id for s in session.sections] == ["s1", "s2", "s3"]

    def test_import_activates_first_section(self) -> None:
        session = _session()
        session.set_active_section("s2")
        assert session.import_text("# Intro\nHello\n# Data\nRows")
        assert session.active_section.title == "Intro"
        assert [s.title for s in session.sections] == ["Intro", "Data"]


class TestSelection:
    def test_select_in_section(self) -> None:
        session = _session()
        selection = session.select(4, 7, section_id="s1")
        assert selection.text == "cat"
        assert selection.section_id == "s1"

    def test_small_selection_cleared(self) -> None:
        session = _session()
        session.select(4, 7, section_id="s1")
        assert session.select(3, 5, section_id="s1") is None
        assert session.selection is None

    def test_offsets_clamped(self) -> None:
        session = _session()
        selection = session.select(-5, 500, section_id="s2")
        assert selection.text == "We counted cats."

    def test_unknown_section(self) -> None:
        assert _session().select(0, 3, section_id="nope") is None

    def test_update_without_selection(self) -> None:
        with pytest.raises(SelectionError):
            _session().update_at_selection("x")

    def test_update_section_selection(self) -> None:
        session = _session()
        session.select(4, 7, section_id="s1")
        session.update_at_selection("dog")
        assert session.get_section("s1").content == "The dog sat on the mat."
        assert session.get_section("s1").title == "Abstract"
        assert session.selection is None

    def test_update_active_section_view(self) -> None:
        session = _session()
        session.set_active_section("s2")
        session.select(0, 2)
        session.update_at_selection("They")
        assert session.get_section("s2").content == "They counted cats."

    def test_update_full_document_reflows(self) -> None:
        session = _session()
        session.full_document_mode = True
        end = session.full_text.index("The cat sat on the mat.") + len("The cat sat on the mat.")
        session.select(end - 4, end)
        session.update_at_selection("mat.\n\n# Background\n\nPrior work.")
        assert [s.title for s in session.sections] == ["Abstract", "Background", "Methods", "References"]
        assert session.sections[1].content == "Prior work."
        assert session.active_section.title == "Abstract"


    def test_full_document_selection_follows_trimmed_segment(self) -> None:
        session = _session()
        session.full_document_mode = True
        start = session.full_text.index("The cat sat on the mat.")
        session.select(start, start + len("The cat sat on the mat."))
        session.update_at_selection("\n\nThe cat sat on the rug.", keep_selection=True)
        selection = session.selection
        assert selection.text == "The cat sat on the rug."
        assert session.full_text[selection.start:selection.end] == selection.text

    def test_full_document_selection_lost_when_segment_reflowed(self) -> None:
        session = _session()
        session.full_document_mode = True
        end = session.full_text.index("The cat sat on the mat.") + len("The cat sat on the mat.")
        session.select(end - 4, end)
        session.update_at_selection("mat.\n\nRESULTS\nData.", keep_selection=True)
        assert [s.title for s in session.sections][:2] == ["Abstract", "RESULTS"]
        assert session.selection is None

class TestCitations:
    def test_cite_keeps_selection(self) -> None:
        session = _session()
        session.select(0, 23, section_id="s1")
        session.cite_at_selection("(Smith, 2020)")
        assert session.get_section("s1").content == "The cat sat on the mat. (Smith, 2020)"
        assert session.selection.text == "The cat sat on the mat. (Smith, 2020)"
        assert session.selection.end == len("The cat sat on the mat. (Smith, 2020)")

    def test_cite_in_full_document_mode(self) -> None:
        session = _session()
        session.full_document_mode = True
        start = session.full_text.index("We counted cats.")
        session.select(start, start + len("We counted cats."))
        session.cite_at_selection("(Smith, 2020)")
        selection = session.selection
        assert selection.text == "We counted cats. (Smith, 2020)"
        assert session.full_text[selection.start:selection.end] == selection.text

    def test_cite_without_selection(self) -> None:
        with pytest.raises(SelectionError):
            _session().cite_at_selection("(Smith, 2020)")

    def test_add_reference_appends(self) -> None:
        session = _session()
        session.add_reference("Smith, J. (2020). Cats.")
        section = session.add_reference("Doe, J. (2021). Mats.")
        assert section.id == "s3"
        assert section.content == "Smith, J. (2020). Cats.\nDoe, J. (2021). Mats."

    def test_add_reference_creates_section(self) -> None:
        session = DocumentSession(sections=[Section(id="x", title="Body", content="text")])
        section = session.add_reference("Smith, J. (2020). Cats.")
        assert (section.id, section.title) == ("refs-auto", "References")
        assert session.sections[-1] is section

    def test_apply_citation_suggestion(self) -> None:
        session = _session()
        session.select(0, 23, section_id="s1")
        session.apply_citation_suggestion(CitationSuggestion(
            citation_marker="(Smith, 2020)",
            references=["Smith, J. (2020). Cats."],
        ))
        assert session.get_section("s1").content.endswith("(Smith, 2020)")
        assert session.get_section("s3").content == "Smith, J. (2020). Cats."
        assert session.selection is None

    def test_related_papers_kept_for_discovery(self) -> None:
        session = _session()
        session.select(0, 23, section_id="s1")
        session.apply_citation_suggestion(CitationSuggestion(
            citation_marker="(Smith, 2020)",
            references=[],
            related_papers=[_paper("p1"), _paper("p2")],
        ))
        assert [p.id for p in session.discovery] == ["p1", "p2"]
        assert session.get_section("s3").content == ""

    def test_attach_placements_resolves_sections(self) -> None:
        session = _session()
        session.discovery = [_paper("p1")]
        placements = parse_citation_placements([
            {"snippet": "We counted cats.", "explanation": "Method source."},
            {"snippet": "The cat sat", "explanation": "Claim.", "sectionId": "s1"},
            {"snippet": "no such sentence", "explanation": "Gone."},
        ])
        paper = session.attach_placements("p1", placements)
        assert [p.section_id for p in paper.suggested_placements] == ["s2", "s1", None]
        assert session.discovery[0] is paper

    def test_attach_placements_unknown_paper(self) -> None:
        with pytest.raises(ValueError):
            _session().attach_placements("missing", [])


class TestIssues:
    def test_preview_requires_snippet_in_document(self) -> None:
        session = _session()
        assert session.preview_fix(Issue(title="t", snippet="counted", replacement="tallied"))
        assert not session.preview_fix(Issue(title="t", snippet="horse", replacement="pony"))
        assert not session.preview_fix(Issue(title="t"))

    def test_preview_span_in_current_view(self) -> None:
        session = _session()
        session.preview_fix(Issue(title="t", snippet="cat", replacement="dog"))
        assert session.preview_span() == (4, 7)
        session.full_document_mode = True
        assert session.preview_span() == (session.full_text.index("cat"), session.full_text.index("cat") + 3)
        session.cancel_preview()
        assert session.preview_span() is None

    def test_preview_span_outside_active_section(self) -> None:
        session = _session()
        session.preview_fix(Issue(title="t", snippet="counted", replacement="tallied"))
        assert session.preview_span() is None

    def test_confirm_fix_removes_issue(self) -> None:
        session = _session()
        issue = Issue(id="i1", title="t", snippet="cat", replacement="dog")
        other = Issue(id="i2", title="u")
        session.set_issues([issue, other])
        session.preview_fix(issue)
        assert session.confirm_fix(issue)
        assert session.get_section("s1").content == "The dog sat on the mat."
        assert session.get_section("s2").content == "We counted cats."
        assert [i.id for i in session.issues] == ["i2"]
        assert session.previewing_issue is None

    def test_stale_fix_keeps_issue(self) -> None:
        session = _session()
        issue = Issue(id="i1", title="t", snippet="horse", replacement="pony")
        session.set_issues([issue])
        assert not session.confirm_fix(issue)
        assert [i.id for i in session.issues] == ["i1"]

    def test_fix_without_edit(self) -> None:
        session = _session()
        assert not session.confirm_fix(Issue(title="General remark"))

    def test_load_analysis(self) -> None:
        session = _session()
        session.load_analysis(AnalysisResult(issues=[Issue(title="t")], general_feedback="Fine."))
        assert len(session.issues) == 1
        assert session.general_feedback == "Fine."

    def test_load_analysis_discovery(self) -> None:
        session = _session()
        session.load_analysis(AnalysisResult(discovery=[_paper()]))
        assert [p.title for p in session.discovery] == ["Cats"]
        session.load_analysis(AnalysisResult())
        assert len(session.discovery) == 1


class TestRewrites:
    def test_replace_active_content(self) -> None:
        session = _session()
        session.replace_active_content("A humanized abstract.")
        assert session.get_section("s1").content == "A humanized abstract."
        assert session.get_section("s1").id == "s1"

    def test_replace_document_in_full_mode(self) -> None:
        session = _session()
        session.full_document_mode = True
        session.replace_document("# Anonymized\n\nBody.")
        assert [s.title for s in session.sections] == ["Anonymized"]
        assert session.active_section_id == session.sections[0].id

    def test_replace_document_in_section_mode(self) -> None:
        session = _session()
        session.replace_document("Anonymized.")
        assert session.get_section("s1").content == "Anonymized."
        assert len(session.sections) == 3

    def test_reset(self) -> None:
        session = _session()
        session.set_issues([Issue(title="t")])
        session.discovery = [_paper()]
        session.reset()
        assert session.active_section_id == "abstract"
        assert session.issues == []
        assert session.discovery == []


class TestTranscript:
    def test_trims_history(self) -> None:
        session = DocumentSession(max_transcript_messages=3)
        for i in range(5):
            session.record_message("user", f"message {i}")
        assert [m.content for m in session.transcript] == ["message 2", "message 3", "message 4"]

    def test_agent_reply(self) -> None:
        session = DocumentSession()
        message = session.record_agent_reply(AgentReply(content="Done.", proposals=[Issue(title="t")]))
        assert message.role == "assistant"
        assert len(message.proposals) == 1
        assert session.record_agent_reply(AgentReply(content="Hi.")).proposals is None
