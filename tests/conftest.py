"""Shared fixtures: record builders, a frozen clock and stage names."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:  # pragma: no cover - path setup
    sys.path.insert(0, str(SRC_DIR))

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)

STAGE_NAMES = {
    "C1:NEW": "New Lead",
    "C1:UC_CONTACTED": "Contacted",
    "C1:UC_FOLLOW": "Follow up in 24 Hours",
    "C1:UC_OFFER": "Offer Finalization for Patient",
    "C1:WON": "Treatment booked",
    "C1:LOSE": "Deal lost",
    "C3:UC_FU3": "FOLLOW UP IN 24 HOURS (abroad)",
}


def iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


@pytest.fixture
def t0() -> datetime:
    return T0


@pytest.fixture
def hours():
    """``hours(n)`` -> T0 + n hours."""
    return lambda n: T0 + timedelta(hours=n)


@pytest.fixture
def stage_names() -> dict:
    return dict(STAGE_NAMES)


@pytest.fixture
def make_deal():
    def _make(deal_id, created=None, stage="C1:NEW", **extra):
        record = {"ID": str(deal_id), "STAGE_ID": stage}
        if created is not None:
            record["DATE_CREATE"] = iso(created) if isinstance(created, datetime) else created
        record.update(extra)
        return record
    return _make


@pytest.fixture
def make_event():
    def _make(deal_id, stage, at):
        return {
            "OWNER_ID": str(deal_id),
            "STAGE_ID": stage,
            "CREATED_TIME": iso(at) if isinstance(at, datetime) else at,
        }
    return _make
