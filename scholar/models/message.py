"""Message model for the assistant transcript."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .proposals import Issue

@dataclass
class Message:
    """Represents a transcript message with any edit proposals attached."""
    role: str
    content: str
    timestamp: datetime
    proposals: Optional[List[Issue]] = None
