"""Notes excerpt for the entry form."""
from __future__ import annotations

NOTES_PREFIX = "Extracted from image:\n"
NOTES_MAX_CHARS = 500
ELLIPSIS = "..."


def compose_notes(text: str) -> str:
    excerpt = text[:NOTES_MAX_CHARS]
    if len(text) > NOTES_MAX_CHARS:
        excerpt += ELLIPSIS
    return NOTES_PREFIX + excerpt
