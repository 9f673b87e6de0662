from datetime import datetime, timedelta, timezone

import pytest

from deal_analytics.core import InvalidInputException
from deal_analytics.sla.domain import Deal, DealFieldMap, StageChangeEvent, normalize_deals, normalize_events, parse_timestamp
from deal_analytics.sla.domain.normalization import ensure_list, normalize_deal, normalize_event


@pytest.mark.parametrize("raw, expected", [
    ("2024-01-01T00:45:00Z", datetime(2024, 1, 1, 0, 45, tzinfo=timezone.utc)),
    ("2024-01-01T03:45:00+03:00", datetime(2024, 1, 1, 0, 45, tzinfo=timezone.utc)),
    ("2024-01-01T00:45:00", datetime(2024, 1, 1, 0, 45, tzinfo=timezone.utc)),
])
def test_parse_timestamp_normalizes_to_comparable_instants(raw, expected):
    assert parse_timestamp(raw) == expected


def test_parse_timestamp_keeps_offset():
    parsed = parse_timestamp("2024-01-01T03:45:00+03:00")
    assert parsed.utcoffset() == timedelta(hours=3)


@pytest.mark.parametrize("raw", [None, "", "   ", "not a date", "2024-13-45T99:00:00Z", True])
def test_parse_timestamp_returns_none_for_unusable_values(raw):
    assert parse_timestamp(raw) is None


def test_normalize_deal_reads_crm_fields():
    deal = normalize_deal({
        "ID": 101,
        "DATE_CREATE": "2024-01-01T00:00:00Z",
        "STAGE_ID": "C1:NEW",
        "CATEGORY_ID": "1",
        "SOURCE_ID": "WEB",
        "UF_CRM_1758023694929": "45",
        "UF_CRM_1753862633986": "",
        "UF_CRM_1753861857976": "812",
        "UF_CRM_1768995573895": "7",
        "UF_CRM_1769688668259": "  90 ",
    })

    assert deal == Deal(
        id="101",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        stage_id="C1:NEW",
        category_id="1",
        source_id="WEB",
        department="45",
        rejection_reason="812",
        comment_classification="7",
        country="90",
    )


def test_normalize_deal_accepts_snake_case_aliases():
    deal = normalize_deal({
        "id": "7",
        "created_at": "2024-01-01T00:00:00Z",
        "stage_id": "C1:WON",
        "department": "12",
    })

    assert deal.id == "7"
    assert deal.stage_id == "C1:WON"
    assert deal.department == "12"
    assert deal.created_at is not None


def test_normalize_deal_with_custom_field_map():
    fields = DealFieldMap(department="UF_DEPT", rejection_reason=("UF_REJ",), comment_classification="UF_C", country="UF_CO")
    deal = normalize_deal({"ID": "1", "UF_DEPT": "3", "UF_REJ": "9"}, fields)

    assert deal.department == "3"
    assert deal.rejection_reason == "9"
    assert deal.country == ""


def test_normalize_deal_keeps_record_with_bad_date():
    deal = normalize_deal({"ID": "1", "DATE_CREATE": "yesterday"})
    assert deal.id == "1"
    assert deal.created_at is None


def test_normalize_deal_passes_entities_through():
    deal = Deal(id="1", created_at=None)
    assert normalize_deal(deal) is deal


def test_naive_entity_timestamps_become_utc():
    deal = normalize_deal(Deal(id="1", created_at=datetime(2024, 1, 1, 9)))
    event = normalize_event(StageChangeEvent("1", "C1:NEW", datetime(2024, 1, 1, 10)))

    assert deal.created_at == datetime(2024, 1, 1, 9, tzinfo=timezone.utc)
    assert event.occurred_at == datetime(2024, 1, 1, 10, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", [None, 42, "ID=1", ["1"]])
def test_normalize_deal_rejects_non_records(raw):
    assert normalize_deal(raw) is None


def test_normalize_event_owner_and_stage_aliases():
    event = normalize_event({"ownerId": 5, "STATUS_ID": "C1:UC_FOLLOW", "CREATED_TIME": "2024-01-01T00:00:00Z"})

    assert event.owner_id == "5"
    assert event.stage_id == "C1:UC_FOLLOW"
    assert event.occurred_at == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_normalize_event_keeps_unparseable_time():
    event = normalize_event({"OWNER_ID": "5", "STAGE_ID": "C1:NEW", "CREATED_TIME": "garbage"})

    assert event.occurred_at is None
    assert event.raw_time == "garbage"


def test_collection_normalizers_drop_non_records():
    deals = normalize_deals([{"ID": "1"}, None, "junk", Deal(id="2", created_at=None)])
    events = normalize_events([{"OWNER_ID": "1", "STAGE_ID": "C1:NEW"}, 3, StageChangeEvent("2", "C1:NEW", None)])

    assert [d.id for d in deals] == ["1", "2"]
    assert [e.owner_id for e in events] == ["1", "2"]


@pytest.mark.parametrize("value", [None, {"ID": "1"}, "deals", 12])
def test_ensure_list_rejects_non_lists(value):
    with pytest.raises(InvalidInputException) as exc_info:
        ensure_list(value, "deals")

    assert exc_info.value.argument == "deals"
    assert "deals must be a list" in exc_info.value.message


def test_ensure_list_accepts_tuples():
    assert ensure_list((1, 2), "events") == (1, 2)
