"""Primary field extractors: company, title, location, salary."""
from __future__ import annotations

from dataclasses import dataclass

from jobtrack.extract.rules import (
    COMPANY_RULES,
    LOCATION_RULES,
    SALARY_RULES,
    TITLE_LABEL_RULE,
    TITLE_RULES,
    scan,
    scan_families,
)
from jobtrack.log import get_logger

log = get_logger(__name__)


@dataclass
class ExtractionContext:
    """Lines already claimed by an earlier field in the same pass."""

    claimed_company: str = ""

    def is_company_line(self, line: str) -> bool:
        return bool(self.claimed_company) and line == self.claimed_company


def extract_company(lines: list[str]) -> str:
    value, rule = scan_families(lines, COMPANY_RULES)
    if value:
        log.debug("company ← %s: %r", rule, value)
    return value


def extract_title(lines: list[str], ctx: ExtractionContext) -> str:
    value, rule = scan(lines, TITLE_RULES, skip=ctx.is_company_line)
    if not value:
        value, rule = scan(lines, (TITLE_LABEL_RULE,))
    if value:
        log.debug("title ← %s: %r", rule, value)
    return value


def extract_location(lines: list[str]) -> str:
    value, rule = scan(lines, LOCATION_RULES)
    if value:
        log.debug("location ← %s: %r", rule, value)
    return value


def extract_salary(lines: list[str]) -> str:
    value, rule = scan(lines, SALARY_RULES)
    if value:
        log.debug("salary ← %s: %r", rule, value)
    return value
