"""
Deal Grouping
=============

Pure aggregation of a deal snapshot into labelled buckets.

Every deal lands in exactly one bucket per dimension, so row counts always
add up to the snapshot size. Deals with no value for a dimension go to an
explicit blank bucket.
"""

import re
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from deal_analytics.config import BLANK_LABELS, GroupDimension
from deal_analytics.analytics.domain.entities import (
    DashboardAnalytics, DashboardLookups, GroupRow, KpiStats, empty_lookups,
)
from deal_analytics.sla.domain.entities import Deal
from deal_analytics.sla.domain.value_objects import round_half_up

REJECTION_STAGE_PATTERN = re.compile(r"LOSE|LOST|REJECT|FAIL", re.IGNORECASE)


def is_rejection_stage(stage_id: str) -> bool:
    """Closed-lost style stage IDs (e.g. ``C1:LOSE``, ``C3:UC_REJECTED``)."""
    return bool(stage_id) and REJECTION_STAGE_PATTERN.search(stage_id) is not None


def stage_label(stage_id: str) -> str:
    """Readable fallback for an unnamed stage: ``C1:UC_ABC_DEF`` -> ``UC ABC DEF``."""
    bare = stage_id.split(":", 1)[1] if ":" in stage_id else stage_id
    return bare.replace("_", " ").strip() or stage_id


def percentage(count: int, total: int, precision: int = 2) -> float:
    if total <= 0:
        return 0.0
    return round_half_up(count / total * 100, precision)


def _lookup(mapping: Optional[Mapping[str, str]], key: str) -> str:
    if not mapping:
        return ""
    value = mapping.get(key)
    return str(value).strip() if value is not None else ""


def group_deals(
    deals: Sequence[Deal],
    selector: Callable[[Deal], str],
    *,
    blank_label: str,
    lookup: Optional[Mapping[str, str]] = None,
    seed: Optional[Iterable[str]] = None,
    label_for_key: Optional[Callable[[str], str]] = None,
    flag: Optional[Callable[[str], bool]] = None,
    precision: int = 2,
) -> List[GroupRow]:
    """
    Bucket deals by the key ``selector`` returns.

    Labels come from ``lookup``, then ``label_for_key``, then the raw key;
    an empty key is the blank bucket. With ``seed`` every listed key gets a
    row (possibly zero) in that order, and other keys follow in first-seen
    order when they hold at least one deal. Without it rows are sorted by
    count, ties keeping first-seen order.
    """
    total = len(deals)
    seeded = list(dict.fromkeys(key for key in (seed or ()) if key))
    counts: Dict[str, int] = {key: 0 for key in seeded}

    for deal in deals:
        key = selector(deal) or ""
        counts[key] = counts.get(key, 0) + 1

    def label(key: str) -> str:
        if not key:
            return blank_label
        translated = _lookup(lookup, key)
        if translated:
            return translated
        return label_for_key(key) if label_for_key else key

    def row(key: str, count: int) -> GroupRow:
        return GroupRow(
            key=key,
            label=label(key),
            count=count,
            percentage=percentage(count, total, precision),
            is_rejection=bool(flag and flag(key)),
        )

    if seeded:
        seed_set = set(seeded)
        rows = [row(key, counts[key]) for key in seeded]
        rows.extend(
            row(key, count) for key, count in counts.items()
            if key not in seed_set and count > 0
        )
        return rows

    rows = [row(key, count) for key, count in counts.items()]
    rows.sort(key=lambda r: r.count, reverse=True)
    return rows


def group_by_stage(
    deals: Sequence[Deal],
    *,
    stage_names: Optional[Mapping[str, str]] = None,
    stage_ids_in_order: Iterable[str] = (),
    precision: int = 2,
) -> List[GroupRow]:
    """Current-stage rows in pipeline order, rejection stages flagged."""
    return group_deals(
        deals,
        lambda d: d.stage_id,
        blank_label=BLANK_LABELS[GroupDimension.STAGE],
        lookup=stage_names,
        seed=stage_ids_in_order,
        label_for_key=stage_label,
        flag=is_rejection_stage,
        precision=precision,
    )


def compute_kpi(
    deals: Sequence[Deal],
    *,
    rejection_rate_precision: int = 0,
    avg_delay_hours: float = 1.0,
) -> KpiStats:
    total = len(deals)
    rejections = sum(1 for deal in deals if is_rejection_stage(deal.stage_id))
    return KpiStats(
        total_requests=total,
        total_rejections=rejections,
        rejection_rate=percentage(rejections, total, rejection_rate_precision),
        avg_delay_hours=avg_delay_hours,
    )


def compute_dashboard(
    deals: Sequence[Deal],
    lookups: Optional[DashboardLookups] = None,
    *,
    precision: int = 2,
    rejection_rate_precision: int = 0,
    avg_delay_hours: float = 1.0,
) -> DashboardAnalytics:
    """Build every grouped dimension plus the KPI header for one snapshot."""
    lookups = empty_lookups(lookups)

    def attribute(dimension: str, selector: Callable[[Deal], str],
                  mapping: Mapping[str, str]) -> List[GroupRow]:
        return group_deals(
            deals, selector,
            blank_label=BLANK_LABELS[dimension],
            lookup=mapping,
            precision=precision,
        )

    return DashboardAnalytics(
        kpi=compute_kpi(
            deals,
            rejection_rate_precision=rejection_rate_precision,
            avg_delay_hours=avg_delay_hours,
        ),
        stage_groups=group_by_stage(
            deals,
            stage_names=lookups.stage_names,
            stage_ids_in_order=lookups.stage_ids_in_order,
            precision=precision,
        ),
        department_groups=attribute(
            GroupDimension.DEPARTMENT, lambda d: d.department, lookups.departments),
        rejection_reasons=attribute(
            GroupDimension.REJECTION_REASON, lambda d: d.rejection_reason, lookups.rejection_reasons),
        comment_rows=attribute(
            GroupDimension.COMMENT, lambda d: d.comment_classification, lookups.comments),
        source_groups=attribute(
            GroupDimension.SOURCE, lambda d: d.source_id, lookups.sources),
        country_groups=attribute(
            GroupDimension.COUNTRY, lambda d: d.country, lookups.countries),
    )
