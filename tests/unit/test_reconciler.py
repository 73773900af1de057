"""Tests for trip reconciliation against the database."""

from datetime import datetime

import pytest

from backend.app.chat.reconciler import (
    UpdateTripArgs,
    deterministic_changes,
    provided_hints,
    reconcile,
)
from backend.app.db.models.trip import SEARCH_SOURCE
from backend.app.db.trips import create_trip
from backend.app.errors import NotFoundError, ValidationError
from backend.app.models.chat import ChatMessage
from backend.app.models.trip import TripInput, TripState


def stored(**overrides) -> TripState:
    values = {"id": 1, "name": "Trip to Lisbon", "destination": "Lisbon"}
    values.update(overrides)
    return TripState(**values)


class TestUpdateTripArgs:
    def test_invalid_values_are_dropped(self):
        args = UpdateTripArgs.model_validate(
            {
                "name": "  ",
                "destination": "Porto",
                "budget": "1500.9",
                "startDate": "not a date",
                "endDate": "2025-06-10",
            }
        )
        assert args.changes() == {
            "destination": "Porto",
            "budget": 1500,
            "end_date": datetime(2025, 6, 10),
        }

    def test_empty_call_has_no_changes(self):
        assert UpdateTripArgs.model_validate({}).changes() == {}


class TestDeterministicChanges:
    def test_explicit_fields_win_over_chat(self):
        request = TripInput(
            origin="Boston",
            messages=[ChatMessage(role="user", content="origin: Chicago\nbudget: 800")],
        )
        changes = deterministic_changes(stored(), request)
        assert changes == {"origin": "Boston", "budget": 800}

    def test_unchanged_values_are_skipped(self):
        request = TripInput(destination="Lisbon", budget=900)
        changes = deterministic_changes(stored(budget=900), request)
        assert changes == {}

    def test_chat_dates_are_parsed(self):
        request = TripInput(
            messages=[ChatMessage(role="user", content="startDate: 2025-06-01")]
        )
        assert deterministic_changes(stored(), request) == {
            "start_date": datetime(2025, 6, 1)
        }


def test_provided_hints_only_list_differences():
    hints = provided_hints(
        stored(origin="NYC"),
        TripInput(destination="Lisbon", origin="Boston", start_date=datetime(2025, 6, 1)),
    )
    assert hints.splitlines() == ["origin: Boston", "startDate: 2025-06-01"]


class TestReconcile:
    @pytest.mark.asyncio
    async def test_creates_trip_named_after_destination(self, test_session, fake_llm):
        outcome = await reconcile(test_session, TripInput(destination="Kyoto"), fake_llm)

        assert outcome.after.name == "Trip to Kyoto"
        assert outcome.after.destination == "Kyoto"
        assert outcome.after.source == SEARCH_SOURCE
        assert outcome.after.is_booked is False

    @pytest.mark.asyncio
    async def test_create_requires_destination_or_name(self, test_session, fake_llm):
        with pytest.raises(ValidationError) as exc_info:
            await reconcile(test_session, TripInput(origin="Boston"), fake_llm)
        assert exc_info.value.errors == ["destination or name is required to create a trip"]

    @pytest.mark.asyncio
    async def test_unknown_trip_id(self, test_session, fake_llm):
        with pytest.raises(NotFoundError):
            await reconcile(test_session, TripInput(trip_id=999), fake_llm)

    @pytest.mark.asyncio
    async def test_chat_fields_applied_when_model_fails(self, test_session, fake_llm):
        trip = create_trip(
            test_session, name="Trip to Kyoto", destination="Kyoto", source=SEARCH_SOURCE
        )
        request = TripInput(
            trip_id=trip.id,
            messages=[ChatMessage(role="user", content="origin: SFO\nbudget: $2500")],
        )

        outcome = await reconcile(test_session, request, fake_llm)

        assert outcome.before.origin is None
        assert outcome.after.origin == "SFO"
        assert outcome.after.budget == 2500

    @pytest.mark.asyncio
    async def test_model_fills_remaining_fields(self, test_session, fake_llm):
        trip = create_trip(
            test_session, name="Trip to Kyoto", destination="Kyoto", source=SEARCH_SOURCE
        )
        fake_llm.tool_args["update_trip"] = {
            "startDate": "2025-04-01",
            "endDate": "2025-04-10",
            "budget": "oops",
        }

        outcome = await reconcile(test_session, TripInput(trip_id=trip.id), fake_llm)

        assert outcome.after.start_date == datetime(2025, 4, 1)
        assert outcome.after.end_date == datetime(2025, 4, 10)
        assert outcome.after.budget is None

    @pytest.mark.asyncio
    async def test_model_sees_current_row_and_hints(self, test_session, fake_llm):
        trip = create_trip(
            test_session, name="Trip to Kyoto", destination="Kyoto", source=SEARCH_SOURCE
        )
        fake_llm.tool_args["update_trip"] = None

        await reconcile(test_session, TripInput(trip_id=trip.id, origin="SFO"), fake_llm)

        messages = fake_llm.called("call_tool")[0]["messages"]
        assert messages[1]["content"].startswith("Current trip:\nname: Trip to Kyoto")
        assert messages[2]["content"] == "New data provided:\norigin: SFO"

    @pytest.mark.asyncio
    async def test_rejected_chat_budget_does_not_fail_the_request(self, test_session, fake_llm):
        trip = create_trip(
            test_session, name="Trip to Kyoto", destination="Kyoto", source=SEARCH_SOURCE
        )
        fake_llm.tool_args["update_trip"] = {"origin": "Osaka"}
        request = TripInput(
            trip_id=trip.id,
            messages=[ChatMessage(role="user", content="budget: $99999999999999999999")],
        )

        outcome = await reconcile(test_session, request, fake_llm)

        assert outcome.after.budget is None
        assert outcome.after.origin == "Osaka"
