from deal_analytics.sla.domain import is_default_new_stage, match_phase, resolve_stage_name


def test_resolve_stage_name_falls_back_to_raw_id(stage_names):
    assert resolve_stage_name("C1:UC_FOLLOW", stage_names) == "Follow up in 24 Hours"
    assert resolve_stage_name("C9:UC_UNKNOWN", stage_names) == "C9:UC_UNKNOWN"
    assert resolve_stage_name("", stage_names) == ""


def test_match_is_case_insensitive_substring(stage_names):
    match = match_phase(stage_names, "follow up in 24 hours")

    assert match.stage_ids == {"C1:UC_FOLLOW", "C3:UC_FU3"}
    assert "C1:UC_FOLLOW" in match
    assert "C1:UC_OFFER" not in match


def test_unmapped_default_new_stages_are_initial():
    match = match_phase({}, "new", include_default_new=True)

    assert "C1:NEW" in match
    assert "C2:NEW" in match
    assert "NEW" in match
    assert "C1:UC_CONTACTED" not in match


def test_default_new_fallback_is_opt_in():
    match = match_phase({}, "Follow up in 24 Hours")

    assert "C1:NEW" not in match


def test_is_default_new_stage():
    assert is_default_new_stage("C2:NEW")
    assert is_default_new_stage(" new ")
    assert not is_default_new_stage("C2:NEWS")
    assert not is_default_new_stage("")


def test_candidate_ids_resolve_to_themselves():
    match = match_phase({}, "offer", candidate_stage_ids=["C5:OFFER_SENT", "C5:PAID"])

    assert match.stage_ids == {"C5:OFFER_SENT"}


def test_blank_fragment_matches_nothing(stage_names):
    assert match_phase(stage_names, "").stage_ids == frozenset()
    assert match_phase(stage_names, "   ").stage_ids == frozenset()


def test_explicit_stage_ids_replace_name_matching(stage_names):
    match = match_phase(stage_names, "Follow up in 24 Hours", explicit_stage_ids=["C7:UC_CUSTOM"])

    assert match.stage_ids == {"C7:UC_CUSTOM"}
    assert "C1:UC_FOLLOW" not in match


def test_empty_explicit_list_keeps_name_matching(stage_names):
    match = match_phase(stage_names, "offer finalization", explicit_stage_ids=[])

    assert match.stage_ids == {"C1:UC_OFFER"}


def test_adding_stage_names_never_shrinks_a_phase(stage_names):
    before = match_phase(stage_names, "follow up")
    extended = dict(stage_names, **{"C4:UC_X": "Follow up later"})
    after = match_phase(extended, "follow up")

    assert before.stage_ids <= after.stage_ids
    assert "C4:UC_X" in after


def test_name_map_is_not_mutated(stage_names):
    snapshot = dict(stage_names)
    match_phase(stage_names, "new", candidate_stage_ids=["C2:NEW"], include_default_new=True)

    assert stage_names == snapshot
