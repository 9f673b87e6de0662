"""
SLA Metric Calculator
=====================

Scans each deal's ordered stage history and classifies it, per metric, as
on time, late, or not applicable:

- First communication: creation -> first move out of the initial phase
- Follow-up: entry into the follow-up phase -> next event (or now)
- Price sharing: entry into the offer finalization phase -> next event (or now)

Only applicable deals enter a metric's denominator. Malformed individual
records are skipped; only a non-list top-level argument raises.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from deal_analytics.config import MetricKey, PhaseKey, VALID_METRIC_KEYS, VALID_PHASE_KEYS
from deal_analytics.shared.infrastructure.logging import get_logger
from deal_analytics.sla.domain.entities import (
    Deal, DealTrace, SLAComputation, SlaSummary, StageChangeEvent,
)
from deal_analytics.sla.domain.history import group_history
from deal_analytics.sla.domain.normalization import as_utc, normalize_deals, normalize_events
from deal_analytics.sla.domain.phases import PhaseMatch, match_phase
from deal_analytics.sla.domain.value_objects import SLACalculator, SLAConfig

logger = get_logger(__name__)

# Metric -> phase whose dwell time it measures
DWELL_METRIC_PHASES = {
    MetricKey.FOLLOW_UP: PhaseKey.FOLLOW_UP,
    MetricKey.PRICE_SHARING: PhaseKey.PRICE_SHARING,
}


class SLAMetricCalculator:
    """
    Computes the SLA summary for a deal collection.

    Holds only configuration; every call works on its own snapshot, so one
    instance can serve concurrent requests.
    """

    def __init__(self, config: Optional[SLAConfig] = None):
        self._config = config or SLAConfig()

    @property
    def config(self) -> SLAConfig:
        return self._config

    def calculate(
        self,
        deals: Any,
        events: Any,
        stage_name_map: Optional[Mapping[str, str]] = None,
        *,
        current_time: Optional[datetime] = None,
        collect_trace: bool = False,
    ) -> SLAComputation:
        """
        Calculate all three SLA metrics.

        Args:
            deals: Deal records (raw CRM mappings or Deal entities)
            events: Stage-history records (raw mappings or StageChangeEvent)
            stage_name_map: Stage ID -> display name
            current_time: Instant used for deals still sitting in a phase;
                defaults to now (UTC)
            collect_trace: Return per-deal intermediate values as well

        Returns:
            SLAComputation with the summary (and traces when requested)

        Raises:
            InvalidInputException: deals or events is not a list
        """
        canonical_deals = normalize_deals(deals)
        canonical_events = normalize_events(events)
        names = stage_name_map if isinstance(stage_name_map, Mapping) else {}
        now = as_utc(current_time or datetime.now(timezone.utc))

        history_by_deal = group_history(canonical_events)
        phases = self._resolve_phases(names, canonical_events)

        traces: List[DealTrace] = []
        for deal in canonical_deals:
            if not deal.id:
                continue
            history = history_by_deal.get(deal.id, ())
            traces.extend(self._evaluate_deal(deal, history, phases, now))

        summary = self._summarize(traces)
        logger.info(
            "SLA metrics calculated",
            extra={
                "deals": len(canonical_deals),
                "events": len(canonical_events),
                "deals_with_history": len(history_by_deal),
                **{f"{m.key}_total": m.total_count for m in summary.metrics},
            },
        )
        return SLAComputation(summary=summary, traces=tuple(traces) if collect_trace else ())

    # ========== Phase resolution ==========

    def _resolve_phases(
        self,
        names: Mapping[str, str],
        events: Sequence[StageChangeEvent],
    ) -> Dict[str, PhaseMatch]:
        """Resolve every phase once per pass."""
        seen_stage_ids = {event.stage_id for event in events if event.stage_id}
        resolved = {}
        for key in VALID_PHASE_KEYS:
            definition = self._config.get_phase(key)
            resolved[key] = match_phase(
                names,
                definition.fragment or "",
                candidate_stage_ids=seen_stage_ids,
                include_default_new=key == PhaseKey.INITIAL,
                explicit_stage_ids=definition.explicit_stage_ids(),
            )
        return resolved

    # ========== Per-deal evaluation ==========

    def _evaluate_deal(
        self,
        deal: Deal,
        history: Sequence[StageChangeEvent],
        phases: Dict[str, PhaseMatch],
        now: datetime,
    ) -> List[DealTrace]:
        verdicts = [self._first_communication(deal, history, phases[PhaseKey.INITIAL], now)]
        for metric_key, phase_key in DWELL_METRIC_PHASES.items():
            verdicts.append(self._phase_dwell(metric_key, deal.id, history, phases[phase_key], now))
        return [verdict for verdict in verdicts if verdict is not None]

    def _first_communication(
        self,
        deal: Deal,
        history: Sequence[StageChangeEvent],
        initial: PhaseMatch,
        now: datetime,
    ) -> Optional[DealTrace]:
        if deal.created_at is None:
            logger.debug("Deal skipped: unparseable creation time", extra={"deal_id": deal.id})
            return None

        for event in history:
            if event.occurred_at is None or not event.stage_id or event.stage_id in initial:
                continue
            if event.occurred_at > deal.created_at:
                return self._verdict(
                    MetricKey.FIRST_COMMUNICATION, deal.id, deal.created_at, event.occurred_at
                )

        if self._config.counts_pending_first_communication:
            if now < deal.created_at:
                logger.debug("Deal skipped: created after current time", extra={"deal_id": deal.id})
                return None
            return self._verdict(
                MetricKey.FIRST_COMMUNICATION, deal.id, deal.created_at, now, still_open=True
            )
        return None

    def _phase_dwell(
        self,
        metric_key: str,
        deal_id: str,
        history: Sequence[StageChangeEvent],
        phase: PhaseMatch,
        now: datetime,
    ) -> Optional[DealTrace]:
        entry_index = next(
            (index for index, event in enumerate(history) if event.stage_id in phase),
            None,
        )
        if entry_index is None:
            return None

        entered_at = history[entry_index].occurred_at
        if entered_at is None:
            logger.debug("Deal skipped: unparseable phase entry", extra={"deal_id": deal_id, "metric": metric_key})
            return None

        if entry_index + 1 < len(history):
            exited_at = history[entry_index + 1].occurred_at
            if exited_at is None:
                return None
            return self._verdict(metric_key, deal_id, entered_at, exited_at)

        if now < entered_at:
            logger.debug("Deal skipped: phase entered after current time", extra={"deal_id": deal_id, "metric": metric_key})
            return None
        return self._verdict(metric_key, deal_id, entered_at, now, still_open=True)

    def _verdict(
        self,
        metric_key: str,
        deal_id: str,
        entered_at: datetime,
        exited_at: datetime,
        still_open: bool = False,
    ) -> DealTrace:
        elapsed = SLACalculator.elapsed_hours(entered_at, exited_at)
        return DealTrace(
            metric=metric_key,
            deal_id=deal_id,
            entered_at=entered_at,
            exited_at=exited_at,
            elapsed_hours=round(elapsed, 4),
            on_time=SLACalculator.is_on_time(elapsed, self._config.get_threshold_hours(metric_key)),
            still_open=still_open,
        )

    @staticmethod
    def _summarize(traces: Sequence[DealTrace]) -> SlaSummary:
        counts = {key: (0, 0) for key in VALID_METRIC_KEYS}
        for trace in traces:
            on_time, total = counts[trace.metric]
            counts[trace.metric] = (on_time + int(trace.on_time), total + 1)
        return SlaSummary.from_counts(counts)
