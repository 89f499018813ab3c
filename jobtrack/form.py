"""Entry form state: add/edit, validation, and assisted-fill merging."""
from __future__ import annotations

from datetime import date
from typing import Any

from jobtrack.log import get_logger
from jobtrack.models import EXTRACTED_KEYS, ExtractedFields, JobEntry
from jobtrack.store import JobStore

log = get_logger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("title", "company")


class ValidationError(ValueError):
    """A required form field is missing."""


def empty_form() -> dict[str, Any]:
    return {
        "title": "",
        "company": "",
        "location": "",
        "salary": "",
        "status": "applied",
        "date_applied": date.today(),
        "notes": "",
        "logo": None,
    }


class JobForm:
    def __init__(self) -> None:
        self.data: dict[str, Any] = empty_form()
        self.editing_id: str | None = None
        self.visible = False
        # Bumped when contents change behind the widgets' back
        self.revision = 0

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def open(self) -> None:
        self.visible = True

    def reset(self) -> None:
        self.data = empty_form()
        self.editing_id = None
        self.visible = False
        self.revision += 1

    def edit(self, job: JobEntry) -> None:
        self.data = {k: v for k, v in job.to_dict().items() if k != "id"}
        self.data["date_applied"] = job.date_applied
        self.data.setdefault("logo", None)
        self.editing_id = job.id
        self.visible = True
        self.revision += 1

    def update(self, **values: Any) -> None:
        """Record values typed into the widgets."""
        self.data.update(values)

    def apply_extracted(self, fields: ExtractedFields) -> list[str]:
        """Overwrite only the fields extraction actually found; returns their names."""
        changed: list[str] = []
        for key in EXTRACTED_KEYS:
            value = getattr(fields, key)
            if value:
                self.data[key] = value
                changed.append(key)
        if changed:
            self.revision += 1
        return changed

    def validate(self) -> None:
        missing = [k for k in REQUIRED_FIELDS if not str(self.data.get(k) or "").strip()]
        if missing:
            raise ValidationError("Please fill in required fields")

    def submit(self, store: JobStore) -> JobEntry:
        """Create or update one entry, then clear the form.

        Raises ValidationError without touching the store when title or
        company is blank.
        """
        self.validate()
        if self.editing_id is not None:
            job = store.update(self.editing_id, self.data)
        else:
            job = store.add(self.data)
        log.debug("Form submitted (%s)", "edit" if self.editing_id else "new")
        self.reset()
        return job
