from pathlib import Path
from typing import Optional

from scholar.sectioning import DocumentLoader, Sectionizer
from scholar.session import DocumentSession

def open_session(file_path: Path, detect_uppercase: bool = True, sectionizer: Optional[Sectionizer] = None) -> DocumentSession:
    """Load a document from disk into a new editing session."""
    sectionizer = sectionizer or Sectionizer(detect_uppercase_headings=detect_uppercase)
    text = DocumentLoader().load(file_path)

    session = DocumentSession(sectionizer=sectionizer)
    if not session.import_text(text):
        print(f"'{file_path}' is empty, starting from the default sections.")
    return session
