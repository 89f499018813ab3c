"""Job application store backed by a JSON snapshot with file locking."""
from __future__ import annotations

import fcntl
import json
import os
import threading
from pathlib import Path
from typing import Any

from jobtrack.log import get_logger
from jobtrack.models import JobEntry, check_status, new_job_id

log = get_logger(__name__)

SAMPLE_JOBS: list[dict[str, Any]] = [
    {
        "id": "1",
        "title": "Senior Frontend Developer",
        "company": "TechCorp",
        "location": "Jakarta, Indonesia",
        "salary": "$80,000 - $120,000",
        "status": "interview",
        "date_applied": "2026-02-05",
        "notes": "Second round interview scheduled",
    },
    {
        "id": "2",
        "title": "Full Stack Engineer",
        "company": "StartupXYZ",
        "location": "Remote",
        "salary": "$70,000 - $100,000",
        "status": "applied",
        "date_applied": "2026-02-07",
        "notes": "Applied through LinkedIn",
    },
    {
        "id": "3",
        "title": "React Developer",
        "company": "DigitalAgency",
        "location": "Bandung, Indonesia",
        "salary": "$60,000 - $90,000",
        "status": "offer",
        "date_applied": "2026-01-28",
        "notes": "Received offer letter!",
    },
]


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class JsonSnapshotStorage:
    """The whole collection as one JSON document under ``<data_dir>/<key>.json``."""

    def __init__(self, data_dir: Path, key: str = "fedtech-jobs") -> None:
        self.path: Path = Path(data_dir) / f"{key}.json"
        self._lock_path: Path = self.path.with_suffix(".lock")

    def load(self) -> list[dict[str, Any]] | None:
        """Stored records, or None when nothing usable has been saved yet."""
        if not self.path.exists():
            return None
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._lock_path, "a", encoding="utf-8") as lf:
            _lock(lf, exclusive=False)
            try:
                raw = self.path.read_text(encoding="utf-8")
            finally:
                _unlock(lf)
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            log.warning("Ignoring unreadable snapshot %s: %s", self.path.name, exc)
            return None
        if not isinstance(data, list):
            log.warning("Ignoring snapshot %s: expected a list, got %s", self.path.name, type(data).__name__)
            return None
        return data

    def save(self, records: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with open(self._lock_path, "a", encoding="utf-8") as lf:
            _lock(lf)
            try:
                tmp.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
                os.replace(tmp, self.path)
            finally:
                _unlock(lf)
        log.debug("Saved %d job(s) → %s", len(records), self.path.name)


class JobStore:
    """Single owner of the in-memory job list; every mutation saves a full snapshot."""

    def __init__(self, storage: JsonSnapshotStorage, *, seed_samples: bool = True) -> None:
        self.storage = storage
        self._mutex = threading.Lock()
        records = storage.load()
        if records is None:
            records = SAMPLE_JOBS if seed_samples else []
            self._jobs = [JobEntry.from_dict(r) for r in records]
            self._persist()
            log.info("Created job tracker → %s (%d sample job(s))", storage.path.name, len(self._jobs))
        else:
            self._jobs = self._load_entries(records)
            log.info("Loaded %d job(s) from %s", len(self._jobs), storage.path.name)

    @staticmethod
    def _load_entries(records: list[dict[str, Any]]) -> list[JobEntry]:
        jobs: list[JobEntry] = []
        seen: set[str] = set()
        for r in records:
            try:
                job = JobEntry.from_dict(r)
            except (TypeError, ValueError) as exc:
                log.warning("Skipping malformed job record %r: %s", r.get("id") if isinstance(r, dict) else r, exc)
                continue
            if job.id in seen:
                job.id = new_job_id()
            seen.add(job.id)
            jobs.append(job)
        return jobs

    def _persist(self) -> None:
        self.storage.save([j.to_dict() for j in self._jobs])

    def _index(self, job_id: str) -> int:
        for i, job in enumerate(self._jobs):
            if job.id == job_id:
                return i
        raise KeyError(job_id)

    # ── Reads ────────────────────────────────────────────────────────────

    def all(self) -> list[JobEntry]:
        return list(self._jobs)

    def get(self, job_id: str) -> JobEntry:
        return self._jobs[self._index(job_id)]

    def filter(self, status: str = "all") -> list[JobEntry]:
        if status == "all":
            return self.all()
        check_status(status)
        return [j for j in self._jobs if j.status == status]

    def stats(self) -> dict[str, int]:
        return {
            "total": len(self._jobs),
            "interview": sum(1 for j in self._jobs if j.status == "interview"),
            "offer": sum(1 for j in self._jobs if j.status == "offer"),
        }

    # ── Mutations ────────────────────────────────────────────────────────

    def add(self, data: dict[str, Any]) -> JobEntry:
        """Create a new entry (fresh id) at the top of the list."""
        with self._mutex:
            job = JobEntry.from_dict({**data, "id": new_job_id()})
            self._jobs.insert(0, job)
            self._persist()
        log.info("Added %s @ %s [%s]", job.title, job.company, job.status)
        return job

    def update(self, job_id: str, data: dict[str, Any]) -> JobEntry:
        """Replace an entry's fields; the id never changes."""
        with self._mutex:
            i = self._index(job_id)
            job = JobEntry.from_dict({**data, "id": job_id})
            self._jobs[i] = job
            self._persist()
        log.info("Updated %s → %s @ %s", job_id, job.title, job.company)
        return job

    def delete(self, job_id: str) -> JobEntry:
        with self._mutex:
            job = self._jobs.pop(self._index(job_id))
            self._persist()
        log.info("Deleted %s (%s @ %s)", job_id, job.title, job.company)
        return job

    def set_status(self, job_id: str, status: str) -> JobEntry:
        check_status(status)
        with self._mutex:
            job = self._jobs[self._index(job_id)]
            job.status = status
            self._persist()
        log.debug("Status %s → %s", job_id, status)
        return job

