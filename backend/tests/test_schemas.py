"""Tests for input validation and normalization."""

from datetime import date, datetime, timedelta, timezone

import pytest

from followup_flow.schemas.follow_up import FollowUpCreate, FollowUpUpdate
from followup_flow.schemas.prospect import InteractionCreate, ProspectCreate, ProspectUpdate
from followup_flow.schemas.suggestions import ColorCodeInput, MessageSuggestion


class TestProspectValidation:
    def test_minimal_prospect(self):
        data = ProspectCreate(
            name="Alice", initial_data="Met at expo",
            current_funnel_stage="Prospect", follow_up_stage_number=1,
        )
        assert data.email is None
        assert data.avatar_url is None

    def test_name_required(self):
        with pytest.raises(Exception):
            ProspectCreate(initial_data="x", current_funnel_stage="Prospect", follow_up_stage_number=1)

    def test_empty_initial_data_rejected(self):
        with pytest.raises(Exception):
            ProspectCreate(name="A", initial_data="", current_funnel_stage="Prospect", follow_up_stage_number=1)

    def test_stage_number_bounds(self):
        for bad in (0, 13):
            with pytest.raises(Exception):
                ProspectCreate(name="A", initial_data="x", current_funnel_stage="Prospect", follow_up_stage_number=bad)

    def test_unknown_funnel_stage(self):
        with pytest.raises(Exception):
            ProspectCreate(name="A", initial_data="x", current_funnel_stage="Won", follow_up_stage_number=1)

    def test_update_tracks_sent_fields(self):
        update = ProspectUpdate(follow_up_stage_number=5)
        assert update.model_dump(exclude_unset=True) == {"follow_up_stage_number": 5}


class TestInteractionValidation:
    def test_aware_date_normalized_to_naive_utc(self):
        aware = datetime(2024, 1, 9, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        interaction = InteractionCreate(date=aware, type="Call", summary="Intro")
        assert interaction.date == datetime(2024, 1, 9, 10, 0)
        assert interaction.date.tzinfo is None

    def test_summary_max_length(self):
        with pytest.raises(Exception):
            InteractionCreate(date=datetime(2024, 1, 9), type="Note", summary="x" * 501)

    def test_unknown_type(self):
        with pytest.raises(Exception):
            InteractionCreate(date=datetime(2024, 1, 9), type="Fax", summary="x")


class TestFollowUpValidation:
    def test_valid_follow_up(self):
        fu = FollowUpCreate(prospect_id="p-1", date=date(2024, 1, 10), time="09:30", method="In-Person")
        assert fu.notes == ""

    def test_time_format(self):
        for bad in ("9:30", "24:00", "12:60", "noon"):
            with pytest.raises(Exception):
                FollowUpCreate(prospect_id="p-1", date=date(2024, 1, 10), time=bad, method="Call")

    def test_unknown_method(self):
        with pytest.raises(Exception):
            FollowUpCreate(prospect_id="p-1", date=date(2024, 1, 10), time="09:30", method="Carrier pigeon")

    def test_unknown_status(self):
        with pytest.raises(Exception):
            FollowUpUpdate(status="Cancelled")


class TestSuggestionContracts:
    def test_color_stage_bounds(self):
        with pytest.raises(Exception):
            ColorCodeInput(stage=13, prospect_name="A")

    def test_tone_case_insensitive(self):
        assert MessageSuggestion(tone=" URGENT ", content="x", suggested_tool="y").tone == "urgent"
