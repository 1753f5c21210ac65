"""
Schemas for the JSON returned by the model-call layer.

Every payload is validated here before any of it reaches the patcher, so a
malformed response fails as an ``InvalidProposalError`` instead of editing
the document.
"""

import json
import re
import logging
from typing import Any, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..exceptions import InvalidProposalError

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r'^```[a-zA-Z]*\s*(.*?)\s*```$', re.DOTALL)

IssueKind = Literal["warning", "error", "info", "success"]

def _new_issue_id() -> str:
    return f"issue-{uuid4().hex[:8]}"

class Issue(BaseModel):
    """A unit of feedback, optionally carrying a snippet -> replacement edit."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_issue_id)
    kind: IssueKind = Field(default="info", alias="type")
    title: str
    description: str = ""
    suggestion: Optional[str] = None
    snippet: Optional[str] = None
    replacement: Optional[str] = None
    location: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def is_actionable(self) -> bool:
        """True when the issue proposes a concrete edit."""
        return bool(self.snippet) and self.replacement is not None

class PaperStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    word_count: int = Field(default=0, alias="wordCount")
    ai_probability_score: float = Field(default=0, alias="aiProbabilityScore", ge=0, le=100)
    readability_score: float = Field(default=0, alias="readabilityScore")

class CitationPlacement(BaseModel):
    """A sentence in the document where a paper could be cited."""
    model_config = ConfigDict(populate_by_name=True)

    snippet: str
    explanation: str
    section_id: Optional[str] = Field(default=None, alias="sectionId")

class RelatedPaper(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    authors: str
    year: str
    relevance: str
    full_reference: str = Field(alias="fullReference")
    citation_marker: str = Field(alias="citationMarker")
    suggested_placements: Optional[List[CitationPlacement]] = Field(default=None, alias="suggestedPlacements")

    @field_validator("id", "year", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # Models regularly return years and ids as bare numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

class CitationSuggestion(BaseModel):
    """Citation marker, reference entries and related papers for a selection."""
    model_config = ConfigDict(populate_by_name=True)

    citation_marker: str = Field(default="", alias="citationMarker")
    references: List[str] = Field(default_factory=list)
    related_papers: List[RelatedPaper] = Field(default_factory=list, alias="relatedPapers")

class AnalysisResult(BaseModel):
    """Result of a whole-document analysis (AI detection, review, formatting)."""
    model_config = ConfigDict(populate_by_name=True)

    stats: PaperStats = Field(default_factory=PaperStats)
    issues: List[Issue] = Field(default_factory=list)
    discovery: Optional[List[RelatedPaper]] = None
    general_feedback: str = Field(
        default="",
        validation_alias=AliasChoices("generalFeedback", "feedback", "general_feedback"),
    )

class AgentReply(BaseModel):
    """A chat answer from the writing agent with optional edit proposals."""
    content: str = ""
    proposals: List[Issue] = Field(default_factory=list)

_ISSUE_LIST = TypeAdapter(List[Issue])
_PLACEMENT_LIST = TypeAdapter(List[CitationPlacement])

def decode_payload(raw: Union[str, bytes, dict, list]) -> Any:
    """Decode a raw model response into plain JSON data.

    Args:
        raw: Response text (optionally wrapped in markdown code fences) or
            already decoded JSON data

    Returns:
        Decoded JSON data

    Raises:
        InvalidProposalError: If the text is not valid UTF-8 or not valid JSON
    """
    if isinstance(raw, (dict, list)):
        return raw
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"Model response is not valid UTF-8: {str(e)}")
            raise InvalidProposalError(f"Model response is not valid UTF-8: {str(e)}")

    text = raw.strip()
    fenced = _FENCE_PATTERN.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Model response is not valid JSON: {str(e)}")
        raise InvalidProposalError(f"Model response is not valid JSON: {str(e)}")

def _validate(adapter_or_model, data: Any, label: str):
    try:
        if isinstance(adapter_or_model, TypeAdapter):
            return adapter_or_model.validate_python(data)
        return adapter_or_model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid {label}: {e.error_count()} validation error(s)")
        raise InvalidProposalError(f"Invalid {label}: {str(e)}")

def _unique_ids(issues: List[Issue]) -> List[Issue]:
    """Give every issue after the first with a repeated id a fresh one."""
    seen = set()
    result = []
    for issue in issues:
        if issue.id in seen:
            fresh = _new_issue_id()
            logger.warning(f"Duplicate issue id '{issue.id}' renamed to '{fresh}'")
            issue = issue.model_copy(update={"id": fresh})
        seen.add(issue.id)
        result.append(issue)
    return result

def parse_issues(raw: Union[str, bytes, dict, list]) -> List[Issue]:
    """Parse an issue list.

    Accepts a bare JSON array, or an object holding it under ``issues`` or
    ``proposals``.
    """
    data = decode_payload(raw)
    if isinstance(data, dict):
        if "issues" in data:
            data = data["issues"]
        elif "proposals" in data:
            data = data["proposals"]
        else:
            raise InvalidProposalError("Invalid issue list: object has no 'issues' or 'proposals' key")
    return _unique_ids(_validate(_ISSUE_LIST, data, "issue list"))

def parse_analysis_result(raw: Union[str, bytes, dict, list]) -> AnalysisResult:
    result = _validate(AnalysisResult, decode_payload(raw), "analysis result")
    result.issues = _unique_ids(result.issues)
    return result

def parse_citation_suggestion(raw: Union[str, bytes, dict, list]) -> CitationSuggestion:
    return _validate(CitationSuggestion, decode_payload(raw), "citation suggestion")

def parse_citation_placements(raw: Union[str, bytes, dict, list]) -> List[CitationPlacement]:
    return _validate(_PLACEMENT_LIST, decode_payload(raw), "citation placement list")

def parse_agent_reply(raw: Union[str, bytes, dict, list]) -> AgentReply:
    reply = _validate(AgentReply, decode_payload(raw), "agent reply")
    reply.proposals = _unique_ids(reply.proposals)
    return reply
