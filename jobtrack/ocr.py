"""OCR assisted fill: image data-URI → text → extracted fields → form.

Recognition runs on a worker thread. Each upload bumps a generation counter;
a result is written into the form only if its ticket is still the newest one
and was not cancelled, so a slow, superseded job can never clobber the fields
filled by a later upload.
"""
from __future__ import annotations

import base64
import binascii
import io
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable

import pytesseract
from PIL import Image

from jobtrack.extract import extract_fields
from jobtrack.form import JobForm
from jobtrack.log import get_logger
from jobtrack.models import ExtractedFields

log = get_logger(__name__)

ProgressCallback = Callable[[float], None]
Recognizer = Callable[..., str]

NO_TEXT_MESSAGE = "No text found in image"
FAILED_MESSAGE = "Failed to extract text from image"

STATUS_APPLIED = "applied"
STATUS_EMPTY = "empty"
STATUS_FAILED = "failed"
STATUS_STALE = "stale"


class OcrError(RuntimeError):
    """Recognition could not run on the given image."""


# ── Data URIs ────────────────────────────────────────────────────────────


def to_data_uri(raw: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"


def decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:") or ";base64" not in header:
        raise ValueError("Not a base64 data URI")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Bad base64 payload: {exc}") from exc


# ── Recognition ──────────────────────────────────────────────────────────


def recognize(
    image_data: str,
    language: str = "eng",
    on_progress: ProgressCallback | None = None,
) -> str:
    """Run Tesseract over a data-URI image and return the recognized text.

    Tesseract gives no incremental progress, so *on_progress* sees 0.0 when
    recognition starts and 1.0 when it finishes.
    """
    try:
        image = Image.open(io.BytesIO(decode_data_uri(image_data)))
        image.load()
    except (ValueError, OSError) as exc:
        raise OcrError(f"Unreadable image: {exc}") from exc

    if on_progress:
        on_progress(0.0)
    try:
        text = pytesseract.image_to_string(image, lang=language)
    except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
        raise OcrError(str(exc)) from exc
    if on_progress:
        on_progress(1.0)
    return text or ""


def configure_tesseract(cmd: str) -> None:
    if cmd:
        pytesseract.pytesseract.tesseract_cmd = cmd
        log.debug("Using tesseract binary %s", cmd)


# ── Session ──────────────────────────────────────────────────────────────


@dataclass
class OcrOutcome:
    status: str
    message: str = ""
    fields: ExtractedFields | None = None
    changed: list[str] = field(default_factory=list)


@dataclass
class OcrTicket:
    generation: int
    cancelled: threading.Event = field(default_factory=threading.Event)
    progress: float = 0.0
    future: Future | None = None

    def cancel(self) -> None:
        self.cancelled.set()
        if self.future is not None:
            self.future.cancel()

    def result(self, timeout: float | None = None) -> OcrOutcome:
        if self.future is None or self.future.cancelled():
            return OcrOutcome(STATUS_STALE)
        return self.future.result(timeout=timeout)


class OcrSession:
    """One form's assisted-fill episodes; only the newest upload may write."""

    def __init__(
        self,
        form: JobForm,
        recognizer: Recognizer = recognize,
        *,
        language: str = "eng",
        max_workers: int = 2,
    ) -> None:
        self.form = form
        self.recognizer = recognizer
        self.language = language
        self._lock = threading.Lock()
        self._generation = 0
        self._current: OcrTicket | None = None
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ocr")

    @property
    def current(self) -> OcrTicket | None:
        return self._current

    @property
    def progress(self) -> float:
        ticket = self._current
        return ticket.progress if ticket else 0.0

    def start(self, image_data: str) -> OcrTicket:
        """Begin a new episode for *image_data*, superseding any running one."""
        with self._lock:
            if self._current is not None:
                self._current.cancel()
            self._generation += 1
            ticket = OcrTicket(generation=self._generation)
            self._current = ticket
            self.form.data["logo"] = image_data
        ticket.future = self._pool.submit(self._run, ticket, image_data)
        log.info("OCR job #%d started", ticket.generation)
        return ticket

    def cancel(self) -> None:
        with self._lock:
            if self._current is not None:
                self._current.cancel()
                log.info("OCR job #%d cancelled", self._current.generation)
            self._current = None

    def shutdown(self) -> None:
        self.cancel()
        self._pool.shutdown(wait=False)

    def _is_live(self, ticket: OcrTicket) -> bool:
        return self._current is ticket and not ticket.cancelled.is_set()

    def _progress_for(self, ticket: OcrTicket) -> ProgressCallback:
        def report(fraction: float) -> None:
            fraction = min(max(fraction, 0.0), 1.0)
            # Never let progress run backwards
            ticket.progress = max(ticket.progress, fraction)

        return report

    def _run(self, ticket: OcrTicket, image_data: str) -> OcrOutcome:
        try:
            text = self.recognizer(image_data, self.language, self._progress_for(ticket))
        except Exception as exc:
            with self._lock:
                if not self._is_live(ticket):
                    log.debug("OCR job #%d failed after being superseded: %s", ticket.generation, exc)
                    return OcrOutcome(STATUS_STALE)
            log.error("OCR job #%d failed: %s", ticket.generation, exc)
            return OcrOutcome(STATUS_FAILED, FAILED_MESSAGE)

        with self._lock:
            if not self._is_live(ticket):
                log.info("OCR job #%d finished after being superseded; discarding", ticket.generation)
                return OcrOutcome(STATUS_STALE)
            if not text.strip():
                log.warning("OCR job #%d found no text", ticket.generation)
                return OcrOutcome(STATUS_EMPTY, NO_TEXT_MESSAGE)
            fields = extract_fields(text)
            changed = self.form.apply_extracted(fields)

        log.info("OCR job #%d filled %s", ticket.generation, ", ".join(changed))
        return OcrOutcome(
            STATUS_APPLIED,
            f"Auto-filled {len(changed)} field(s) from image",
            fields=fields,
            changed=changed,
        )
