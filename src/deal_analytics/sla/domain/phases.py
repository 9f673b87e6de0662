"""
Stage Names and Phase Matching
==============================

Pipelines reuse the same conceptual phase under different raw stage IDs
(``C1:UC_NX31U2`` in one pipeline, ``C3:UC_8KD1`` in another), so phase
membership is decided from the human-readable stage name. The matched ID
set is computed once per calculation pass and reused for every deal.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Mapping, Optional


def resolve_stage_name(stage_id: str, stage_name_map: Mapping[str, str]) -> str:
    """Display name for a stage ID, or the raw ID when the map lacks it."""
    if not stage_id:
        return ""
    return stage_name_map.get(stage_id) or stage_id


def is_default_new_stage(stage_id: str) -> bool:
    """
    True for the CRM's untranslated default entry stage.

    ``NEW`` in the default pipeline, ``C<n>:NEW`` in the others.
    """
    normalized = (stage_id or "").strip().upper()
    return normalized == "NEW" or normalized.endswith(":NEW")


@dataclass(frozen=True)
class PhaseMatch:
    """
    Resolved membership of one conceptual phase.

    ``include_default_new`` extends membership to default entry stages
    even when they never appear in the stage name map.
    """

    fragment: str
    stage_ids: FrozenSet[str]
    include_default_new: bool = False

    def __contains__(self, stage_id: object) -> bool:
        if not isinstance(stage_id, str):
            return False
        if stage_id in self.stage_ids:
            return True
        return self.include_default_new and is_default_new_stage(stage_id)


def match_phase(
    stage_name_map: Mapping[str, str],
    fragment: str,
    *,
    candidate_stage_ids: Iterable[str] = (),
    include_default_new: bool = False,
    explicit_stage_ids: Optional[Iterable[str]] = None,
) -> PhaseMatch:
    """
    Resolve which stage IDs belong to a named phase.

    Args:
        stage_name_map: Stage ID -> display name (never mutated)
        fragment: Case-insensitive substring looked for in display names
        candidate_stage_ids: Extra IDs to test, e.g. IDs seen in history
            that the name map does not cover (they resolve to themselves)
        include_default_new: Also accept ``NEW`` / ``*:NEW`` stage IDs
        explicit_stage_ids: Configured IDs for this phase; when non-empty
            they replace name matching entirely

    Returns:
        PhaseMatch usable with ``in``
    """
    explicit = frozenset(s for s in (explicit_stage_ids or ()) if s)
    if explicit:
        return PhaseMatch(fragment=fragment, stage_ids=explicit, include_default_new=include_default_new)

    needle = (fragment or "").strip().lower()
    matched = set()
    if needle:
        for stage_id in set(stage_name_map) | set(candidate_stage_ids):
            if needle in resolve_stage_name(stage_id, stage_name_map).lower():
                matched.add(stage_id)

    return PhaseMatch(
        fragment=fragment,
        stage_ids=frozenset(matched),
        include_default_new=include_default_new,
    )
