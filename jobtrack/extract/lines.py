"""Turn raw OCR output into the line sequence every extractor scans."""
from __future__ import annotations

MIN_LINE_LENGTH = 3


def split_lines(text: str) -> list[str]:
    """Trimmed lines of *text*, in order, dropping anything shorter than 3 chars.

    OCR noise like stray bullets or "|" fragments never reaches the extractors.
    Duplicates are kept; order is the scan order.
    """
    if not text:
        return []
    lines: list[str] = []
    for raw in text.split("\n"):
        line = raw.strip()
        if len(line) >= MIN_LINE_LENGTH:
            lines.append(line)
    return lines
