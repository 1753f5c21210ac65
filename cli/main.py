import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from core.startup import open_session
from scholar.exceptions import DocumentLoadError, InvalidProposalError
from scholar.models import Issue, decode_payload, parse_agent_reply, parse_analysis_result, parse_issues
from scholar.sectioning import export_markdown, join_as_markdown

logging.basicConfig(level=logging.WARNING)

app = typer.Typer(help="Section academic documents and apply model-proposed edits.")

def _open(file: Path, detect_uppercase: bool = True):
    try:
        return open_session(file, detect_uppercase=detect_uppercase)
    except DocumentLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

def _write(session, output: Optional[Path]) -> None:
    if output:
        export_markdown(session.sections, output)
        typer.echo(f"Wrote {len(session.sections)} sections to {output}")
    else:
        typer.echo(join_as_markdown(session.sections))

def _parse_proposals(raw: bytes) -> List[Issue]:
    """Pick the issue list out of an issue array, analysis result or agent reply."""
    data = decode_payload(raw)
    if isinstance(data, dict) and "content" in data and "issues" not in data:
        return parse_agent_reply(data).proposals
    if isinstance(data, dict) and ("stats" in data or "generalFeedback" in data or "feedback" in data):
        return parse_analysis_result(data).issues
    return parse_issues(data)

@app.command()
def sections(
    file: Path = typer.Argument(..., help="Document to section (.txt, .md or .docx)"),
    no_uppercase: bool = typer.Option(False, "--no-uppercase", help="Only treat '#' lines as headings")
):
    """List the sections found in a document."""
    session = _open(file, detect_uppercase=not no_uppercase)
    for i, section in enumerate(session.sections, 1):
        typer.echo(f"{i:>3}. [{section.id}] {section.title} ({section.word_count} words)")

@app.command()
def export(
    file: Path = typer.Argument(..., help="Document to convert"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Markdown file to write (stdout if omitted)")
):
    """Convert a document into sectioned markdown."""
    _write(_open(file), output)

@app.command()
def fix(
    file: Path = typer.Argument(..., help="Document to edit"),
    snippet: str = typer.Option(..., help="Exact text to replace"),
    replacement: str = typer.Option(..., help="Replacement text"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Markdown file to write (stdout if omitted)")
):
    """Replace the first occurrence of a snippet."""
    session = _open(file)
    issue = Issue(title="Manual fix", snippet=snippet, replacement=replacement)
    if not session.confirm_fix(issue):
        typer.echo("Snippet not found in the document; nothing changed.", err=True)
        raise typer.Exit(code=1)
    _write(session, output)

@app.command()
def apply(
    file: Path = typer.Argument(..., help="Document to edit"),
    proposals: Path = typer.Argument(..., help="JSON model response holding the proposals"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Markdown file to write (stdout if omitted)")
):
    """Validate model proposals and apply each one in order."""
    session = _open(file)
    try:
        issues = _parse_proposals(proposals.read_bytes())
    except (InvalidProposalError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    session.set_issues(issues)
    applied = 0
    for issue in issues:
        if not issue.is_actionable:
            continue
        if session.confirm_fix(issue):
            applied += 1

    stale = sum(1 for issue in session.issues if issue.is_actionable)
    typer.echo(f"Applied {applied} proposal(s), {stale} stale.", err=True)
    _write(session, output)

def main():
    try:
        app()
    except KeyboardInterrupt:
        print("\nExiting...")
        sys.exit(1)

if __name__ == "__main__":
    main()
