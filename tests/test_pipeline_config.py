from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.core import pipeline_config as pc
from app.core.pipeline_config import UnknownStageError

pytestmark = pytest.mark.unit

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def test_groups_are_in_flow_order():
    assert [g.label for g in pc.PIPELINE_GROUPS] == [
        "Screening", "Interview", "Documentation", "Offer", "Joining", "Closed / Dropouts",
    ]


def test_all_stages_are_unique_and_ordered():
    stages = pc.list_all_stages()
    assert len(stages) == len(set(stages))
    assert stages[0] == "Screening"
    assert stages[-1] == "Joined"
    for group in pc.PIPELINE_GROUPS:
        for stage in group.stages:
            assert stage in stages


def test_shared_stages_belong_to_first_group():
    assert pc.group_of("Rejected") == "Interview"
    assert pc.group_of("Backout") == "Interview"
    assert pc.group_of("Not Interested") == "Screening"
    assert pc.STAGE_TO_GROUP["Rejected"] == "Interview"


def test_every_stage_has_color_and_variant():
    for stage in pc.ALL_STAGES + pc.LEGACY_STAGES:
        assert pc.color_of(stage)
        assert pc.color_of(stage) != pc.DEFAULT_STAGE_COLOR
        assert pc.variant_of(stage)


def test_active_is_complement_of_closed():
    for stage in pc.ALL_STAGES + pc.LEGACY_STAGES + ("Foobar",):
        assert pc.is_active(stage) == (not pc.is_closed(stage))


def test_active_pipeline_stages_exclude_closed():
    assert "On Hold" in pc.ACTIVE_PIPELINE_STAGES
    assert not set(pc.ACTIVE_PIPELINE_STAGES) & pc.CLOSED_STAGES
    assert len(pc.ACTIVE_PIPELINE_STAGES) + len(pc.CLOSED_STAGES & set(pc.ALL_STAGES)) == len(pc.ALL_STAGES)


def test_group_round_trip():
    for stage in pc.ALL_STAGES:
        assert stage in pc.find_group(pc.group_of(stage)).stages


def test_find_group_unknown_label():
    with pytest.raises(KeyError):
        pc.find_group("Archive")


def test_round_2_metadata():
    assert pc.group_of("Round 2") == "Interview"
    assert pc.color_of("Round 2") == "hsl(120, 60%, 50%)"
    assert pc.is_active("Round 2")
    assert pc.suggested_action("Round 2") == "Follow up on results"


def test_joined_is_closed_success():
    assert pc.group_of("Joined") == "Joining"
    assert pc.is_closed("Joined")
    assert pc.categorize({"stage": "Joined", "updated_at": NOW}, NOW).success


def test_unknown_stage_degrades_except_group_of():
    assert pc.color_of("Foobar") == pc.DEFAULT_STAGE_COLOR
    assert pc.variant_of("Foobar") == pc.DEFAULT_STAGE_VARIANT
    assert pc.suggested_action("Foobar") == "Review"
    assert pc.suggested_action("Foobar", "Follow up") == "Follow up"
    assert not pc.is_known_stage("Foobar")
    with pytest.raises(UnknownStageError) as excinfo:
        pc.group_of("Foobar")
    assert excinfo.value.stage == "Foobar"
    assert isinstance(excinfo.value, LookupError)


def test_legacy_hired_has_metadata_but_no_group():
    assert pc.is_closed("Hired")
    assert pc.suggested_action("Hired") == "Onboarding follow-up"
    assert not pc.is_known_stage("Hired")
    with pytest.raises(UnknownStageError):
        pc.group_of("Hired")


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        pc.STAGE_COLORS["Screening"] = "red"
    with pytest.raises(AttributeError):
        pc.CLOSED_STAGES.add("Screening")


def test_stale_after_a_week_for_open_stages_only():
    eight_days_ago = NOW - timedelta(days=8)
    assert pc.categorize({"stage": "Screening", "updated_at": eight_days_ago}, NOW).stale
    assert not pc.categorize({"stage": "Hired", "updated_at": eight_days_ago}, NOW).stale
    assert not pc.categorize({"stage": "Screening", "updated_at": NOW - timedelta(days=6)}, NOW).stale


def test_categorize_treats_naive_timestamps_as_utc():
    naive = (NOW - timedelta(days=10)).replace(tzinfo=None)
    flags = pc.categorize(SimpleNamespace(stage="Interview", updated_at=naive), NOW)
    assert flags.urgent
    assert flags.stale
    assert flags.active
    assert not flags.follow_up
    assert not flags.success


def test_categorize_follow_up():
    flags = pc.categorize({"stage": "CV Shared", "updated_at": NOW}, NOW)
    assert flags.follow_up
    assert not flags.urgent
    assert not flags.stale


def test_key_stages_are_known():
    for stage in pc.KEY_STAGES:
        assert pc.is_known_stage(stage)
