"""Custom exceptions for the document engine."""

class ScholarError(Exception):
    """Base exception for document engine errors."""
    pass

class InvalidProposalError(ScholarError):
    """Exception for model output that does not match the expected schema."""
    pass

class DocumentLoadError(ScholarError):
    """Exception for documents that cannot be read or imported."""
    pass

class SelectionError(ScholarError):
    """Exception for selection-based edits made without an active selection."""
    pass
