"""Ordered pattern tables for each posting field.

Every table is a tuple evaluated front to back; the first rule that yields a
value wins. English and Indonesian patterns sit side by side in a fixed
priority order, there is no language detection step.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable

# What a rule hands back on a match
TAKE_LINE = "line"
TAKE_MATCH = "match"
TAKE_VALUE = "value"


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: re.Pattern
    take: str = TAKE_LINE
    unless: re.Pattern | None = None

    def apply(self, line: str) -> str:
        m = self.pattern.search(line)
        if not m:
            return ""
        if self.unless is not None and self.unless.search(line):
            return ""
        if self.take == TAKE_VALUE:
            return m.group("value").strip()
        if self.take == TAKE_MATCH:
            return m.group(0)
        return line


def _i(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


def scan(
    lines: Iterable[str],
    rules: tuple[Rule, ...],
    skip: Callable[[str], bool] | None = None,
) -> tuple[str, str]:
    """Walk lines in order, trying every rule on a line before moving on.

    Returns ``(value, rule_name)`` for the first hit, or ``("", "")``.
    """
    for line in lines:
        if skip is not None and skip(line):
            continue
        for rule in rules:
            value = rule.apply(line)
            if value:
                return value, rule.name
    return "", ""


def scan_families(lines: list[str], rules: tuple[Rule, ...]) -> tuple[str, str]:
    """Run each rule across every line before falling back to the next rule."""
    for rule in rules:
        for line in lines:
            value = rule.apply(line)
            if value:
                return value, rule.name
    return "", ""


# ── Company ──────────────────────────────────────────────────────────────

COMPANY_RULES: tuple[Rule, ...] = (
    Rule("company.id_legal_prefix", _i(r"^(?:PT|CV)\.?\s+")),
    Rule(
        "company.legal_suffix",
        _i(
            r"(?:Inc\.|Corp\.|Ltd\.|LLC|Co\.|Corporation|Company|Technologies"
            r"|Solutions|Group|GmbH|S\.A\.)$"
        ),
    ),
)

# ── Title ────────────────────────────────────────────────────────────────

_ROLE_VOCABULARY = (
    r"\b(?:"
    r"(?:software|web|front[\s-]?end|back[\s-]?end|full[\s-]?stack|mobile)\s+developer"
    r"|data\s+(?:scientist|analyst|engineer)"
    r"|(?:devops|qa)\s+engineer"
    r"|ui\s*/\s*ux\s+designer"
    r"|(?:product|project)\s+manager"
    r"|(?:business|system)\s+analyst"
    r"|network\s+engineer"
    r"|security\s+analyst"
    r"|cloud\s+engineer"
    r"|(?:ml|machine\s+learning)\s+engineer"
    r")\b"
)

_GENERIC_ROLE = (
    r"\b(?:(?:senior|junior|lead|staff|principal|head\s+of)\s+)?"
    r"(?:programmer|developer|engineer|designer|analyst|architect|manager"
    r"|administrator|specialist|coordinator|consultant|technician|officer)\b"
)

_ID_ROLE = r"\b(?:staff\s+it|it\s+support|admin\s+it|teknisi|operator|staf|karyawan)\b"

TITLE_RULES: tuple[Rule, ...] = (
    Rule("title.role_vocabulary", _i(_ROLE_VOCABULARY)),
    Rule("title.generic_role", _i(_GENERIC_ROLE)),
    Rule("title.id_role", _i(_ID_ROLE)),
)

TITLE_LABEL_RULE = Rule(
    "title.labeled",
    _i(r"(?:posisi|position|lowongan|dibutuhkan|hiring|vacancy)[:\s]+(?P<value>.+)"),
    take=TAKE_VALUE,
)

# ── Location ─────────────────────────────────────────────────────────────

ID_CITIES: tuple[str, ...] = (
    "jakarta", "surabaya", "bandung", "medan", "semarang", "makassar",
    "palembang", "tangerang", "depok", "bekasi", "bogor", "malang",
    "yogyakarta", "solo", "denpasar", "bali", "batam",
)

LOCATION_RULES: tuple[Rule, ...] = (
    Rule(
        "location.labeled",
        _i(r"(?:lokasi|location|alamat|address|tempat|kantor|office)[:\s]+(?P<value>.+)"),
        take=TAKE_VALUE,
    ),
    # A city inside "PT. Bank Jakarta" is a company name, not a place
    Rule(
        "location.id_city",
        _i("|".join(ID_CITIES)),
        unless=_i(r"pt\.|cv\."),
    ),
    Rule("location.work_mode", _i(r"\b(?:remote|hybrid|wfh|work\s+from\s+home|on-?site)\b")),
)

# ── Salary ───────────────────────────────────────────────────────────────

_AMOUNT = r"\d[\d.,]*"
_ID_SCALE = r"(?:juta|jt|rb|ribu)"

SALARY_RULES: tuple[Rule, ...] = (
    Rule(
        "salary.rupiah",
        _i(
            rf"\b(?:Rp\.?|IDR)\s*{_AMOUNT}"
            rf"(?:\s*-\s*(?:(?:Rp\.?|IDR)\s*)?{_AMOUNT})?"
            rf"(?:\s*{_ID_SCALE}\b)?"
        ),
        take=TAKE_MATCH,
    ),
    Rule(
        "salary.labeled",
        _i(
            rf"\b(?:gaji|salary|upah|penghasilan)[:\s]*"
            rf"(?:(?:Rp\.?|IDR|USD|\$)\s*)?{_AMOUNT}"
        ),
        take=TAKE_MATCH,
    ),
    Rule(
        "salary.usd",
        _i(
            rf"\${_AMOUNT}k?(?:\s*-\s*\${_AMOUNT}k?)?"
            r"(?:\s*/\s*[a-z]+|\s+per\s+(?:year|month|bulan|tahun))?"
        ),
        take=TAKE_MATCH,
    ),
    Rule(
        "salary.bare_range",
        _i(rf"{_AMOUNT}\s*-\s*{_AMOUNT}\s*(?:USD|IDR|juta|jt)\b"),
        take=TAKE_MATCH,
    ),
)

# ── Fallback ─────────────────────────────────────────────────────────────

COMPANY_STOP_PREFIXES: tuple[str, ...] = (
    "we are", "hiring", "lowongan", "dibutuhkan",
    "kualifikasi", "persyaratan", "requirements",
)

HIRING_KEYWORD = _i(r"\b(?:hiring|looking\s+for|dibutuhkan|dicari|membutuhkan)\b")
HIRING_LABEL = _i(r"(?:hiring|looking\s+for|dibutuhkan|dicari|membutuhkan)[:\s]+(?P<value>.+)")
