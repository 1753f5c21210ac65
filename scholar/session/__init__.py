"""Session package for caller-owned editor state."""

from .session import DocumentSession

__all__ = ['DocumentSession']
