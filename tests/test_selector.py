import pytest

from conftest import FakeReasoningService, make_poi
from wanderlust.services.reasoning import ReasoningServiceError
from wanderlust.services.selector import (
    CandidateSelector,
    SelectionParseError,
    build_selection_prompt,
    parse_selection,
)


def test_parse_first_array_only():
    assert parse_selection("pick these: [2, 5, 9] and maybe [1]") == [2, 5, 9]


def test_parse_ignores_non_index_entries():
    assert parse_selection('[1, "two", 3.5, true, 4]') == [1, 4]


def test_parse_accepts_whole_number_floats():
    assert parse_selection('[2.0, 5, 9.0]') == [2, 5, 9]


@pytest.mark.parametrize("reply", ["I like the museum best.", "[2, 5", "[two, five]", ""])
def test_parse_failures(reply):
    with pytest.raises(SelectionParseError):
        parse_selection(reply)


def test_prompt_lists_pois_one_based(five_pois):
    prompt = build_selection_prompt(five_pois)
    assert "1. Place A (museum, 50m away)" in prompt
    assert "5. Place E (museum, 900m away)" in prompt
    assert "exactly 3" in prompt


@pytest.mark.asyncio
async def test_small_input_passes_through_without_a_call():
    pois = [make_poi(0, 10), make_poi(1, 20)]
    reasoning = FakeReasoningService()
    selected = await CandidateSelector(reasoning).select(pois + [pois[0]])
    assert selected == pois
    assert reasoning.prompts == []


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ["pick these: [2, 5, 9]", "pick these: [2.0, 5.0, 9.0]"])
async def test_indices_resolve_to_items(ten_pois, reply):
    reasoning = FakeReasoningService(reply)
    selected = await CandidateSelector(reasoning).select(ten_pois)
    assert selected == [ten_pois[1], ten_pois[4], ten_pois[8]]


@pytest.mark.asyncio
async def test_partial_selection_is_topped_up_with_closest(ten_pois):
    reasoning = FakeReasoningService("[7, 7, 42]")
    selected = await CandidateSelector(reasoning).select(ten_pois)
    assert selected == [ten_pois[6], ten_pois[0], ten_pois[1]]


@pytest.mark.asyncio
async def test_extra_indices_are_truncated(ten_pois):
    reasoning = FakeReasoningService("[3, 1, 4, 10]")
    selected = await CandidateSelector(reasoning).select(ten_pois)
    assert selected == [ten_pois[2], ten_pois[0], ten_pois[3]]


@pytest.mark.asyncio
async def test_service_failure_falls_back_to_closest(five_pois):
    reasoning = FakeReasoningService(ReasoningServiceError("quota exceeded"))
    selected = await CandidateSelector(reasoning).select(five_pois)
    assert selected == five_pois[:3]
    assert [p.distance for p in selected] == [50, 80, 120]


@pytest.mark.asyncio
async def test_unparsable_reply_falls_back_to_closest(five_pois):
    reasoning = FakeReasoningService("The cathedral, obviously.")
    selected = await CandidateSelector(reasoning).select(five_pois)
    assert selected == five_pois[:3]


@pytest.mark.asyncio
async def test_selection_has_no_duplicates(five_pois):
    reasoning = FakeReasoningService("[1, 1, 1]")
    selected = await CandidateSelector(reasoning).select(five_pois + five_pois)
    assert len({p.id for p in selected}) == 3
