"""
Shared fixtures for the job tracker tests.

File logging is switched off before any jobtrack module configures the root
logger, so test runs don't litter logs/.
"""
import os

os.environ.setdefault("JOBTRACK_LOG_FILE", "0")

import pytest

from jobtrack.form import JobForm
from jobtrack.store import JobStore, JsonSnapshotStorage


@pytest.fixture
def storage(tmp_path):
    return JsonSnapshotStorage(tmp_path, "test-jobs")


@pytest.fixture
def store(storage):
    """Store seeded with the three sample applications."""
    return JobStore(storage)


@pytest.fixture
def empty_store(storage):
    return JobStore(storage, seed_samples=False)


@pytest.fixture
def form():
    return JobForm()
