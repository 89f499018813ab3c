"""Data models for tracked applications and extracted posting fields."""
from __future__ import annotations

import html
import re
import uuid
from dataclasses import asdict, dataclass, field, fields as dc_fields
from datetime import date
from typing import Any

STATUS_OPTIONS: list[tuple[str, str]] = [
    ("applied", "Applied"),
    ("interview", "Interview"),
    ("offer", "Offer"),
    ("rejected", "Rejected"),
    ("pending", "Pending"),
]
STATUSES: tuple[str, ...] = tuple(value for value, _ in STATUS_OPTIONS)
STATUS_LABELS: dict[str, str] = dict(STATUS_OPTIONS)

# Fields an extraction pass is allowed to overwrite; logo never is.
EXTRACTED_KEYS: tuple[str, ...] = ("title", "company", "location", "salary", "notes")

_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|<>~$])")


def escape_markdown(text: str) -> str:
    """Backslash-escape markdown and dollar signs so user text renders literally."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def new_job_id() -> str:
    return uuid.uuid4().hex[:12]


def check_status(status: str) -> str:
    if status not in STATUSES:
        raise ValueError(f"Unknown status {status!r} (expected one of {', '.join(STATUSES)})")
    return status


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    if not value:
        return date.today()
    return date.fromisoformat(str(value)[:10])


@dataclass
class JobEntry:
    id: str
    title: str
    company: str
    location: str = ""
    salary: str = ""
    status: str = "applied"
    date_applied: date = field(default_factory=date.today)
    notes: str = ""
    logo: str | None = None

    def __post_init__(self) -> None:
        check_status(self.status)

    @property
    def initials(self) -> str:
        """Up to two initials of the company, shown when there is no logo."""
        return "".join(w[0] for w in self.company.split())[:2].upper()

    @property
    def date_label(self) -> str:
        """e.g. ``Feb 5, 2026``."""
        d = self.date_applied
        return f"{d.strftime('%b')} {d.day}, {d.year}"

    @property
    def notes_html(self) -> str:
        """Italic quoted notes paragraph for the job card."""
        return f'<p class="job-notes">&quot;{html.escape(self.notes)}&quot;</p>'

    @property
    def initials_html(self) -> str:
        return f'<div class="job-logo">{html.escape(self.initials)}</div>'

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date_applied"] = self.date_applied.isoformat()
        if not self.logo:
            data.pop("logo")
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JobEntry":
        known = {f.name for f in dc_fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs["id"] = str(kwargs.get("id") or new_job_id())
        kwargs["date_applied"] = _parse_date(kwargs.get("date_applied"))
        for key in ("title", "company", "location", "salary", "notes"):
            kwargs[key] = kwargs.get(key) or ""
        kwargs.setdefault("status", "applied")
        return cls(**kwargs)


@dataclass
class ExtractedFields:
    title: str = ""
    company: str = ""
    location: str = ""
    salary: str = ""
    notes: str = ""

    def as_dict(self) -> dict[str, str]:
        return asdict(self)

    def found(self) -> list[str]:
        """Names of the fields that came back non-empty."""
        return [k for k, v in self.as_dict().items() if v]
