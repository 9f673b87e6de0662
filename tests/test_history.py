from datetime import datetime, timezone

from deal_analytics.sla.domain import StageChangeEvent, group_history


def _event(owner, stage, hour=None, raw=""):
    at = datetime(2024, 1, 1, hour, tzinfo=timezone.utc) if hour is not None else None
    return StageChangeEvent(owner_id=owner, stage_id=stage, occurred_at=at, raw_time=raw)


def test_groups_by_owner_and_sorts_ascending():
    history = group_history([
        _event("1", "C1:UC_OFFER", 5),
        _event("2", "C1:NEW", 1),
        _event("1", "C1:NEW", 0),
        _event("1", "C1:UC_FOLLOW", 2),
    ])

    assert set(history) == {"1", "2"}
    assert [e.stage_id for e in history["1"]] == ["C1:NEW", "C1:UC_FOLLOW", "C1:UC_OFFER"]
    assert len(history["2"]) == 1


def test_equal_timestamps_keep_feed_order():
    history = group_history([
        _event("1", "A", 3),
        _event("1", "B", 3),
        _event("1", "C", 3),
    ])

    assert [e.stage_id for e in history["1"]] == ["A", "B", "C"]


def test_unparseable_times_sort_first():
    history = group_history([
        _event("1", "LATE", 4),
        _event("1", "BROKEN", raw="n/a"),
    ])

    assert [e.stage_id for e in history["1"]] == ["BROKEN", "LATE"]


def test_events_without_owner_are_dropped():
    history = group_history([_event("", "C1:NEW", 1), _event("3", "C1:NEW", 1)])

    assert list(history) == ["3"]


def test_empty_feed():
    assert group_history([]) == {}
