"""Line-oriented excerpts of a note around the lines that match a query."""

from __future__ import annotations

from collections.abc import Sequence

from .corpus import Document

HEADER_LINES = 5
CONTEXT_LINES = 2
MAX_LINES = 30
MAX_CHARS = 1500


def _matches(line: str, terms: Sequence[str]) -> bool:
    if not terms:
        return bool(line.strip())
    lowered = line.lower()
    return any(term in lowered for term in terms)


def extract_excerpt(document: Document, terms: Sequence[str]) -> str:
    """Return at most 1500 characters of *document* relevant to *terms*.

    The first lines of a note usually carry its title and metadata, so they
    always lead the excerpt. Each later matching line brings two lines of
    context on either side. When nothing past the header matches, the top of
    the note is returned instead.
    """

    lines = document.text.split("\n")
    collected: list[str] = [line.strip() for line in lines[:HEADER_LINES] if line.strip()]
    header_count = len(collected)

    for index in range(HEADER_LINES, len(lines)):
        if len(collected) >= MAX_LINES:
            break
        if not _matches(lines[index], terms):
            continue

        start = max(HEADER_LINES, index - CONTEXT_LINES)
        end = min(len(lines) - 1, index + CONTEXT_LINES)
        for context_line in lines[start : end + 1]:
            stripped = context_line.strip()
            if stripped and stripped not in collected:
                collected.append(stripped)
                if len(collected) >= MAX_LINES:
                    break

    if len(collected) == header_count:
        return "\n".join(lines[:MAX_LINES])[:MAX_CHARS]
    return "\n".join(collected)[:MAX_CHARS]
