"""Heuristic job-posting field extraction from OCR text.

``extract_fields`` is a pure function: same text in, same fields out. Nothing
here raises for string input; a field nobody could find is an empty string.
"""
from __future__ import annotations

from jobtrack.extract.fallback import resolve_fallbacks
from jobtrack.extract.fields import (
    ExtractionContext,
    extract_company,
    extract_location,
    extract_salary,
    extract_title,
)
from jobtrack.extract.lines import split_lines
from jobtrack.extract.notes import compose_notes
from jobtrack.log import get_logger
from jobtrack.models import ExtractedFields

log = get_logger(__name__)

__all__ = [
    "ExtractionContext", "compose_notes", "extract_company", "extract_fields",
    "extract_location", "extract_salary", "extract_title", "resolve_fallbacks",
    "split_lines",
]


def extract_fields(text: str) -> ExtractedFields:
    text = text or ""
    lines = split_lines(text)

    company = extract_company(lines)
    ctx = ExtractionContext(claimed_company=company)
    title = extract_title(lines, ctx)
    location = extract_location(lines)
    salary = extract_salary(lines)
    company, title = resolve_fallbacks(lines, company, title)

    fields = ExtractedFields(
        title=title,
        company=company,
        location=location,
        salary=salary,
        notes=compose_notes(text),
    )
    log.info(
        "Extracted %d line(s) → %s",
        len(lines),
        ", ".join(k for k in fields.found() if k != "notes") or "no fields",
    )
    return fields
