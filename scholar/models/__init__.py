"""Models package for shared data structures."""

from .section import Section, Selection
from .proposals import (
    Issue,
    PaperStats,
    AnalysisResult,
    CitationPlacement,
    RelatedPaper,
    CitationSuggestion,
    AgentReply,
    decode_payload,
    parse_issues,
    parse_analysis_result,
    parse_citation_suggestion,
    parse_citation_placements,
    parse_agent_reply
)
from .message import Message

__all__ = [
    'Section',
    'Selection',
    'Message',
    'Issue',
    'PaperStats',
    'AnalysisResult',
    'CitationPlacement',
    'RelatedPaper',
    'CitationSuggestion',
    'AgentReply',
    'decode_payload',
    'parse_issues',
    'parse_analysis_result',
    'parse_citation_suggestion',
    'parse_citation_placements',
    'parse_agent_reply'
]
