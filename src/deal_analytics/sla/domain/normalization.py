"""
Input Normalization
===================

Turns raw CRM records into canonical ``Deal`` / ``StageChangeEvent`` entities.

Every fallback rule for record shape lives here: alternative key spellings,
pipeline-specific custom fields, stringified identifiers and lenient
timestamp parsing. Metric and grouping code only ever sees canonical
entities.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from deal_analytics.core import InvalidInputException
from deal_analytics.sla.domain.entities import Deal, StageChangeEvent

_DATETIME_ADAPTER = TypeAdapter(datetime)

DEAL_ID_KEYS = ("ID", "id")
DEAL_CREATED_KEYS = ("DATE_CREATE", "created_at")
DEAL_STAGE_KEYS = ("STAGE_ID", "stage_id")
DEAL_CATEGORY_KEYS = ("CATEGORY_ID", "category_id")
DEAL_SOURCE_KEYS = ("SOURCE_ID", "source_id")

EVENT_OWNER_KEYS = ("OWNER_ID", "ownerId", "owner_id")
EVENT_STAGE_KEYS = ("STAGE_ID", "STATUS_ID", "stage_id")
EVENT_TIME_KEYS = ("CREATED_TIME", "created_at")


@dataclass(frozen=True)
class DealFieldMap:
    """
    Names of the custom deal fields carrying grouped attributes.

    Rejection reasons live in a different field per pipeline, so several
    candidates are tried in order.
    """

    department: str = "UF_CRM_1758023694929"
    rejection_reason: Tuple[str, ...] = ("UF_CRM_1753862633986", "UF_CRM_1753861857976")
    comment_classification: str = "UF_CRM_1768995573895"
    country: str = "UF_CRM_1769688668259"


def ensure_list(value: Any, argument: str) -> Sequence[Any]:
    """Fail fast when a top-level collection is not a list or tuple."""
    if not isinstance(value, (list, tuple)):
        raise InvalidInputException(argument, value)
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a CRM timestamp; returns None instead of raising.

    Naive values are taken as UTC so every parsed timestamp is comparable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        parsed = _DATETIME_ADAPTER.validate_python(value)
    except ValidationError:
        return None
    return as_utc(parsed)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are returned unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def clean_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _first(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and clean_str(value) != "":
            return value
    return None


def normalize_deal(record: Any, fields: DealFieldMap = DealFieldMap()) -> Optional[Deal]:
    """
    Canonicalize one deal record.

    Returns None for records that are neither a Deal nor a mapping.
    """
    if isinstance(record, Deal):
        if record.created_at is not None and record.created_at.tzinfo is None:
            return replace(record, created_at=as_utc(record.created_at))
        return record
    if not isinstance(record, Mapping):
        return None

    return Deal(
        id=clean_str(_first(record, DEAL_ID_KEYS)),
        created_at=parse_timestamp(_first(record, DEAL_CREATED_KEYS)),
        stage_id=clean_str(_first(record, DEAL_STAGE_KEYS)),
        category_id=clean_str(_first(record, DEAL_CATEGORY_KEYS)),
        source_id=clean_str(_first(record, DEAL_SOURCE_KEYS)),
        department=clean_str(_first(record, (fields.department, "department"))),
        rejection_reason=clean_str(_first(record, (*fields.rejection_reason, "rejection_reason"))),
        comment_classification=clean_str(
            _first(record, (fields.comment_classification, "comment_classification"))
        ),
        country=clean_str(_first(record, (fields.country, "country"))),
    )


def normalize_event(record: Any) -> Optional[StageChangeEvent]:
    """Canonicalize one stage-history record; None when not a record at all."""
    if isinstance(record, StageChangeEvent):
        if record.occurred_at is not None and record.occurred_at.tzinfo is None:
            return replace(record, occurred_at=as_utc(record.occurred_at))
        return record
    if not isinstance(record, Mapping):
        return None

    raw_time = _first(record, EVENT_TIME_KEYS)
    return StageChangeEvent(
        owner_id=clean_str(_first(record, EVENT_OWNER_KEYS)),
        stage_id=clean_str(_first(record, EVENT_STAGE_KEYS)),
        occurred_at=parse_timestamp(raw_time),
        raw_time=clean_str(raw_time),
    )


def normalize_deals(records: Any, fields: DealFieldMap = DealFieldMap()) -> List[Deal]:
    """Canonicalize a deal collection, dropping entries that are not records."""
    deals = (normalize_deal(record, fields) for record in ensure_list(records, "deals"))
    return [deal for deal in deals if deal is not None]


def normalize_events(records: Any) -> List[StageChangeEvent]:
    """Canonicalize a stage-history collection, dropping entries that are not records."""
    events = (normalize_event(record) for record in ensure_list(records, "events"))
    return [event for event in events if event is not None]
