"""
Stage History Grouping
======================

Groups a flat stage-history feed by owning deal, ordered chronologically.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Tuple

from deal_analytics.sla.domain.entities import StageChangeEvent

# Unparseable timestamps sort first
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)

DealHistory = Tuple[StageChangeEvent, ...]


def _sort_key(event: StageChangeEvent) -> datetime:
    return event.occurred_at or _EARLIEST


def group_history(events: Iterable[StageChangeEvent]) -> Dict[str, DealHistory]:
    """
    Build ``{deal_id: events ascending by time}``.

    Events without an owner are dropped. Equal timestamps keep feed order.
    Deals with no events are simply absent from the result.
    """
    buckets: Dict[str, List[StageChangeEvent]] = {}
    for event in events:
        if not event.owner_id:
            continue
        buckets.setdefault(event.owner_id, []).append(event)

    return {
        owner_id: tuple(sorted(owned, key=_sort_key))
        for owner_id, owned in buckets.items()
    }
