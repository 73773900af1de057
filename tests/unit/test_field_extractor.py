"""Tests for key: value field extraction from chat turns."""

from hypothesis import given
from hypothesis import strategies as st

from backend.app.chat.field_extractor import extract_fields
from backend.app.models.chat import ChatMessage


def user(content: str) -> ChatMessage:
    return ChatMessage(role="user", content=content)


def test_extracts_all_four_fields_from_one_turn():
    """Each labelled line fills its field."""
    found = extract_fields(
        [user("origin: Boston\nbudget: 2500\nstartDate: 2025-05-01\nendDate: 2025-05-08")]
    )

    assert found.origin == "Boston"
    assert found.budget == 2500
    assert found.start_date == "2025-05-01"
    assert found.end_date == "2025-05-08"


def test_budget_accepts_dollar_sign_and_spaces():
    found = extract_fields([user("  Budget :  $ 2500  ")])
    assert found.budget == 2500


def test_labels_are_case_insensitive():
    found = extract_fields([user("ORIGIN: SFO\nstartdate: 2025-06-01")])
    assert found.origin == "SFO"
    assert found.start_date == "2025-06-01"


def test_ignores_assistant_and_system_turns():
    found = extract_fields(
        [
            ChatMessage(role="assistant", content="origin: Paris"),
            ChatMessage(role="system", content="budget: 100"),
        ]
    )
    assert found.is_empty()


def test_last_line_wins_within_a_turn():
    """Lines are scanned last first, so a correction later in the turn wins."""
    found = extract_fields([user("origin: Paris\norigin: Lyon")])
    assert found.origin == "Lyon"


def test_newest_turn_wins():
    found = extract_fields([user("origin: Paris"), user("origin: Berlin")])
    assert found.origin == "Berlin"


def test_scanning_stops_after_newest_matching_turn():
    """A field that only appears in an older turn is not picked up."""
    found = extract_fields([user("budget: 900"), user("origin: Berlin")])

    assert found.origin == "Berlin"
    assert found.budget is None


def test_older_turn_used_when_newer_turns_have_no_match():
    found = extract_fields([user("budget: 900"), user("sounds great, thanks")])
    assert found.budget == 900


def test_malformed_values_are_ignored():
    found = extract_fields(
        [user("startDate: May 1st\nendDate: 2025/05/08\nbudget: lots\norigin:   ")]
    )
    assert found.is_empty()


def test_label_must_start_the_line():
    found = extract_fields([user("my origin: Boston")])
    assert found.origin is None


def test_empty_history():
    assert extract_fields([]).is_empty()


@given(st.integers(min_value=0, max_value=10**9), st.booleans())
def test_budget_roundtrips_any_whole_number(amount: int, with_dollar: bool):
    """Any whole number written after ``budget:`` is read back exactly."""
    prefix = "$" if with_dollar else ""
    found = extract_fields([user(f"budget: {prefix}{amount}")])
    assert found.budget == amount


@given(st.lists(st.text(alphabet="abcdefghij klm\n", max_size=40), max_size=5))
def test_text_without_labels_never_matches(contents: list[str]):
    found = extract_fields([user(content) for content in contents])
    assert found.is_empty()
