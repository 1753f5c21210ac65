"""Configuration settings for the document engine."""

# Section titles
FRONT_MATTER_TITLE = "Front Matter"  # Leading content before the first heading
UNTITLED_DOCUMENT_TITLE = "Introduction"  # Whole document had no heading at all
REFERENCES_TITLE = "References"
REFERENCES_SECTION_ID = "refs-auto"

# Heading detection
MIN_UPPERCASE_HEADING_LENGTH = 4  # Shortest ALL CAPS line treated as a heading
DETECT_UPPERCASE_HEADINGS = True

# Selection settings
MIN_SELECTION_CHARS = 2  # Non-whitespace characters needed for a selection

# Import / export
SUPPORTED_SUFFIXES = (".txt", ".md", ".markdown", ".docx")
DEFAULT_EXPORT_FILENAME = "scholar_paper.md"
