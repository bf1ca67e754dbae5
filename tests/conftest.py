"""
Shared fixtures for the LabPulse tests.

Every test gets a fresh in-memory SQLite store.

Run: pytest tests/ -v
"""

import threading

import pytest

from labpulse.config import VOLUME_COUNTER_COLUMNS
from labpulse.store import SqlStore


# --- Store Fixtures ---

@pytest.fixture
def store():
    """Empty in-memory store."""
    s = SqlStore("sqlite://")
    yield s
    s.dispose()


@pytest.fixture
def offices():
    return [
        {"office_id": 1, "office_name": "Albertville", "model": "PO",
         "address": "1 Main St", "dfo": "Dana"},
        {"office_id": 2, "office_name": "Birmingham", "model": "PLLC",
         "address": "2 Main St", "dfo": "Dana"},
        {"office_id": 3, "office_name": "Macon", "model": "PO",
         "address": "3 Main St", "dfo": "Marcus"},
    ]


@pytest.fixture
def seeded_store(store, offices):
    """Store with three offices and no time-series data."""
    for office in offices:
        store.upsert_office(office)
    return store


# --- Row Builders ---

def weekly_row(office_id, year, week_number, **counters):
    """Weekly volume row with every counter 0 unless given."""
    row = {"office_id": office_id, "year": year, "week_number": week_number}
    row.update({col: 0 for col in VOLUME_COUNTER_COLUMNS})
    row.update(counters)
    return row


def financial_values(revenue=100_000.0, lab=15_000.0, personnel=12_000.0, overtime=1_000.0):
    return {
        "revenue": revenue,
        "lab_exp_no_outside": lab,
        "lab_exp_with_outside": lab,
        "personnel_exp": personnel,
        "overtime_exp": overtime,
    }


# --- Concurrency Helpers ---

class WriterDuringRead:
    """Start a writer thread the first time `method_name` is read from the store.

    finished_mid_request records whether the writer completed while the
    report was still running.
    """

    def __init__(self, store, method_name, write, wait=0.5):
        self.finished_mid_request = None
        self._done = threading.Event()
        self._wait = wait
        self._original = getattr(store, method_name)
        self._thread = threading.Thread(target=self._run, args=(store, write))
        setattr(store, method_name, self._read)

    def _run(self, store, write):
        with store.exclusive():
            write(store)
        self._done.set()

    def _read(self, *args, **kwargs):
        result = self._original(*args, **kwargs)
        if self.finished_mid_request is None:
            self._thread.start()
            self.finished_mid_request = self._done.wait(timeout=self._wait)
        return result

    def join(self, timeout=5.0):
        self._thread.join(timeout)
        return self._done.is_set()
