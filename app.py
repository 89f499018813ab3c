"""Streamlit UI for the FedTech Toga job tracker."""
from __future__ import annotations

import hashlib
import random
import sys
import time
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobtrack.config import data_dir, ensure_dirs, load_settings
from jobtrack.extract import extract_fields
from jobtrack.form import JobForm, ValidationError
from jobtrack.log import get_logger
from jobtrack.models import STATUS_LABELS, STATUS_OPTIONS, STATUSES, JobEntry, escape_markdown
from jobtrack.ocr import (
    STATUS_APPLIED,
    STATUS_STALE,
    OcrSession,
    configure_tesseract,
    decode_data_uri,
    to_data_uri,
)
from jobtrack.store import JobStore, JsonSnapshotStorage

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

# Pasted into the form by the demo button; picked at random
SAMPLE_POSTINGS: list[str] = [
    "PT Teknologi Maju\nSoftware Engineer\nJakarta, Indonesia\n"
    "Rp 8.000.000 - Rp 12.000.000\nKirim CV ke hr@contoh.com",
    "Hiring: Barista\nStarbucks\nRemote",
    "Acme Solutions\nSenior Data Analyst\nLocation: Surabaya (Hybrid)\n"
    "Salary: 15.000.000 / month\nRequirements: SQL, Python",
    "Dibutuhkan Segera\nCV. Sinar Abadi\nPosisi: Teknisi Jaringan\nLokasi: Bekasi\nGaji Rp 4,5 juta",
    "We are looking for a Product Manager\nGlobex Corporation\nWork from home\n$90,000 - $110,000 per year",
]

_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #e8eaf6 0%, #f3e5f5 40%, #e0f2f1 100%);
}
[data-testid="stMetric"] {
    background: rgba(255,255,255,0.6);
    padding: 0.75rem 1rem;
    border-radius: 12px;
    border: 1px solid rgba(255,255,255,0.4);
    box-shadow: 0 4px 16px rgba(0,0,0,0.06);
}
[data-testid="stForm"] {
    background: rgba(255,255,255,0.5);
    border-radius: 12px;
    border: 1px solid rgba(255,255,255,0.35);
}
.job-logo {
    width: 44px; height: 44px; border-radius: 10px;
    display: flex; align-items: center; justify-content: center;
    background: #4a90d9; color: #fff; font-weight: 700;
}
.job-notes { font-style: italic; color: #555; font-size: 0.9rem; }
h1, h2, h3 { color: #1a1a2e; }
</style>
"""

# ── State ────────────────────────────────────────────────────────────────


@st.cache_resource
def _store() -> JobStore:
    settings = load_settings()
    ensure_dirs()
    storage = JsonSnapshotStorage(data_dir(), settings["storage_key"])
    return JobStore(storage, seed_samples=bool(settings.get("seed_samples", True)))


def _form() -> JobForm:
    if "form" not in st.session_state:
        st.session_state["form"] = JobForm()
    return st.session_state["form"]


def _ocr() -> OcrSession:
    if "ocr" not in st.session_state:
        settings = load_settings()
        configure_tesseract(settings["ocr"]["tesseract_cmd"])
        st.session_state["ocr"] = OcrSession(_form(), language=settings["ocr"]["language"])
    return st.session_state["ocr"]


def _toast(message: str, ok: bool = True) -> None:
    st.toast(message, icon="✅" if ok else "❌")


def _cancel_form() -> None:
    _ocr().cancel()
    st.session_state.pop("_upload_digest", None)
    _form().reset()


# ── Assisted fill ────────────────────────────────────────────────────────


def _handle_upload(uploaded) -> None:
    """Start OCR for a newly uploaded image and wait for it with a progress bar."""
    raw = uploaded.getvalue()
    digest = hashlib.sha256(raw).hexdigest()
    if st.session_state.get("_upload_digest") == digest:
        return
    st.session_state["_upload_digest"] = digest

    session = _ocr()
    ticket = session.start(to_data_uri(raw, uploaded.type or "image/png"))
    bar = st.progress(0.0, text="Recognizing text…")
    while ticket.future is None or not ticket.future.done():
        bar.progress(ticket.progress, text=f"Recognizing text… {int(ticket.progress * 100)}%")
        time.sleep(0.1)
    bar.empty()

    outcome = ticket.result()
    if outcome.status == STATUS_STALE:
        return
    _toast(outcome.message, ok=outcome.status == STATUS_APPLIED)
    st.rerun()


def _fill_sample() -> None:
    text = random.choice(SAMPLE_POSTINGS)
    changed = _form().apply_extracted(extract_fields(text))
    _toast(f"Auto-filled {len(changed)} field(s) from sample posting")


# ── Sections ─────────────────────────────────────────────────────────────


def _header(store: JobStore) -> None:
    st.title("💼 FedTech Toga")
    st.caption("Job Tracker")
    stats = store.stats()
    c1, c2, c3 = st.columns(3)
    c1.metric("Total", stats["total"])
    c2.metric("Interviews", stats["interview"])
    c3.metric("Offers", stats["offer"])


def _job_form(store: JobStore) -> None:
    form = _form()
    if not form.visible:
        if st.button("➕ Add New Job Application", type="primary", use_container_width=True):
            form.open()
            st.rerun()
        return

    st.subheader("✏️ Edit Job" if form.is_editing else "➕ Add New Job")

    uploaded = st.file_uploader(
        "Screenshot of the job posting (optional): fields are filled in from the image",
        type=["png", "jpg", "jpeg", "webp"],
        key=f"upload_{form.revision}",
    )
    if uploaded:
        _handle_upload(uploaded)
    if st.button("🎲 Try a sample posting"):
        _fill_sample()
        st.rerun()

    rev = form.revision
    d = form.data
    with st.form(f"job_form_{rev}"):
        c1, c2 = st.columns(2)
        with c1:
            title = st.text_input("Job Title *", value=d["title"], placeholder="e.g. Frontend Developer")
            location = st.text_input("Location", value=d["location"], placeholder="e.g. Remote, Jakarta")
            status = st.selectbox(
                "Status",
                STATUSES,
                index=STATUSES.index(d["status"]),
                format_func=lambda s: STATUS_LABELS[s],
            )
        with c2:
            company = st.text_input("Company *", value=d["company"], placeholder="e.g. Google")
            salary = st.text_input("Salary Range", value=d["salary"], placeholder="e.g. $60,000 - $80,000")
            date_applied = st.date_input("Date Applied", value=d["date_applied"])
        notes = st.text_area("Notes", value=d["notes"], placeholder="Add any notes...")

        b1, b2 = st.columns(2)
        cancel = b1.form_submit_button("Cancel", use_container_width=True)
        save = b2.form_submit_button(
            "Update Job" if form.is_editing else "Add Job",
            type="primary",
            use_container_width=True,
        )

    if cancel:
        _cancel_form()
        st.rerun()
    if save:
        form.update(
            title=title, company=company, location=location, salary=salary,
            status=status, date_applied=date_applied, notes=notes,
        )
        editing = form.is_editing
        try:
            form.submit(store)
        except ValidationError as exc:
            st.error(str(exc))
            return
        _ocr().cancel()
        st.session_state.pop("_upload_digest", None)
        _toast("Job updated successfully! ✨" if editing else "Job added successfully! 🎉")
        st.rerun()


def _job_card(store: JobStore, job: JobEntry) -> None:
    with st.container(border=True):
        c_logo, c_info, c_actions = st.columns([1, 6, 2])
        with c_logo:
            if job.logo:
                st.image(decode_data_uri(job.logo), width=44)
            else:
                st.markdown(job.initials_html, unsafe_allow_html=True)
        with c_info:
            st.markdown(f"**{escape_markdown(job.title)}**  \n{escape_markdown(job.company)}")
            meta = []
            if job.location:
                meta.append(f"📍 {escape_markdown(job.location)}")
            if job.salary:
                meta.append(f"💰 {escape_markdown(job.salary)}")
            if meta:
                st.caption("  ·  ".join(meta))
        with c_actions:
            if st.button("✏️", key=f"edit_{job.id}", help="Edit"):
                _form().edit(job)
                st.rerun()
            if st.button("🗑️", key=f"delete_{job.id}", help="Delete"):
                st.session_state["_confirm_delete"] = job.id

        if st.session_state.get("_confirm_delete") == job.id:
            st.warning("Are you sure you want to delete this job application?")
            y, n = st.columns(2)
            if y.button("Delete", key=f"confirm_{job.id}", type="primary"):
                store.delete(job.id)
                st.session_state.pop("_confirm_delete", None)
                _toast("Job deleted successfully")
                st.rerun()
            if n.button("Keep", key=f"keep_{job.id}"):
                st.session_state.pop("_confirm_delete", None)
                st.rerun()

        if job.notes:
            st.markdown(job.notes_html, unsafe_allow_html=True)

        f_date, f_status = st.columns([3, 2])
        f_date.caption(f"📅 {job.date_label}")
        new_status = f_status.selectbox(
            "Status",
            STATUSES,
            index=STATUSES.index(job.status),
            format_func=lambda s: STATUS_LABELS[s],
            key=f"status_{job.id}",
            label_visibility="collapsed",
        )
        if new_status != job.status:
            store.set_status(job.id, new_status)
            _toast("Status updated! ✅")
            st.rerun()


def _job_list(store: JobStore) -> None:
    filters = ["all"] + list(STATUSES)
    labels = {"all": "All", **STATUS_LABELS}
    current = st.radio(
        "Filter",
        filters,
        format_func=lambda s: labels[s],
        horizontal=True,
        label_visibility="collapsed",
    )
    jobs = store.filter(current)
    st.subheader(f"📋 Your Applications ({len(jobs)})")

    if not jobs:
        st.info(
            "Start tracking your job search by adding your first application!"
            if current == "all"
            else f'No applications with "{current}" status'
        )
        return

    cols = st.columns(2)
    for i, job in enumerate(jobs):
        with cols[i % 2]:
            _job_card(store, job)


# ── Pages ────────────────────────────────────────────────────────────────


def page_tracker() -> None:
    store = _store()
    _header(store)
    st.divider()
    _job_form(store)
    st.divider()
    _job_list(store)


def page_table() -> None:
    import pandas as pd

    store = _store()
    st.header("All Applications")
    rows = [j.to_dict() for j in store.all()]
    if not rows:
        st.info("No applications tracked yet.")
        return

    df = pd.DataFrame(rows)
    df["status"] = df["status"].map(STATUS_LABELS)
    df["date_applied"] = pd.to_datetime(df["date_applied"])
    display_cols = ["title", "company", "location", "salary", "status", "date_applied"]
    st.dataframe(
        df[display_cols].sort_values("date_applied", ascending=False),
        use_container_width=True,
        column_config={
            "date_applied": st.column_config.DateColumn("Date Applied", format="MMM D, YYYY"),
        },
        hide_index=True,
    )
    counts = df["status"].value_counts().reindex([label for _, label in STATUS_OPTIONS], fill_value=0)
    st.bar_chart(counts)


def _inject_css() -> None:
    st.markdown(_CSS, unsafe_allow_html=True)


def _wrap_tracker():
    _inject_css()
    page_tracker()


def _wrap_table():
    _inject_css()
    page_table()


pages = [
    st.Page(_wrap_tracker, title="Tracker", icon="💼", url_path="tracker", default=True),
    st.Page(_wrap_table, title="Table", icon="📋", url_path="table"),
]

nav = st.navigation(pages)
nav.run()
