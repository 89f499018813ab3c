"""Last-resort company/title guesses when the pattern chains found nothing.

Runs in a fixed order: company A, title A, company B, title B. A field that is
already set is never touched again.
"""
from __future__ import annotations

import re

from jobtrack.extract.rules import COMPANY_STOP_PREFIXES, HIRING_KEYWORD, HIRING_LABEL
from jobtrack.log import get_logger

log = get_logger(__name__)

MAX_FALLBACK_CHARS = 50
_LEADING_UPPER = re.compile(r"[A-Z]")


def _company_candidate(lines: list[str]) -> str:
    for line in lines:
        if len(line) <= 5:
            continue
        if line.lower().startswith(COMPANY_STOP_PREFIXES):
            continue
        if not _LEADING_UPPER.match(line):
            continue
        return line[:MAX_FALLBACK_CHARS]
    return ""


def _hiring_title(lines: list[str]) -> str:
    for line in lines:
        if not HIRING_KEYWORD.search(line):
            continue
        m = HIRING_LABEL.search(line)
        value = m.group("value").strip() if m else line
        return value[:MAX_FALLBACK_CHARS]
    return ""


def resolve_fallbacks(lines: list[str], company: str, title: str) -> tuple[str, str]:
    """Fill an empty company and/or title from positional heuristics."""
    if not company:
        company = _company_candidate(lines)
        if company:
            log.debug("company ← fallback.first_capitalised: %r", company)
    if not title:
        title = _hiring_title(lines)
        if title:
            log.debug("title ← fallback.hiring_phrase: %r", title)

    if not company and lines:
        company = lines[0][:MAX_FALLBACK_CHARS]
        log.debug("company ← fallback.first_line: %r", company)
    # Compares the truncated second line with the resolved company, unlike the
    # primary pass which skips any line equal to the claimed company
    candidate = lines[1][:MAX_FALLBACK_CHARS] if len(lines) >= 2 else ""
    if not title and candidate and candidate != company:
        title = candidate
        log.debug("title ← fallback.second_line: %r", title)

    return company, title
