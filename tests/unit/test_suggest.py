"""Unit tests for itinerary suggestions."""

import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from backend.app.adapters.llm import LLMError
from backend.app.metrics import MetricsClient
from backend.app.planning import (
    ItineraryParseError,
    SuggestionRequest,
    build_prompt,
    fallback_itinerary,
    parse_itinerary,
    suggest_itinerary,
)

LLM_ITINERARY = {
    "tripName": "Two Days of Old Calcutta",
    "days": [
        {
            "day": 1,
            "theme": "Colonial Kolkata",
            "activities": [
                {
                    "time": "9:00 AM",
                    "type": "site",
                    "name": "Victoria Memorial",
                    "description": "Galleries and gardens",
                    "estimatedCost": "₹250",
                    "duration": "2 hours",
                }
            ],
        }
    ],
    "totalEstimatedCost": 2500,
    "tips": ["Start early"],
}


def test_fallback_first_day_total() -> None:
    itinerary = fallback_itinerary(1)

    assert len(itinerary.days) == 1
    assert itinerary.total_estimated_cost == 1825
    assert itinerary.trip_name == "1-Day Kolkata Heritage Experience"


def test_fallback_caps_at_three_days() -> None:
    itinerary = fallback_itinerary(5)

    assert [day.day for day in itinerary.days] == [1, 2, 3]
    assert itinerary.total_estimated_cost == 1825 + 1900 + 2200
    assert len(itinerary.tips) == 5


def test_parse_fenced_camel_case_json() -> None:
    text = "```json\n" + json.dumps(LLM_ITINERARY) + "\n```"

    itinerary = parse_itinerary(text)

    assert itinerary.trip_name == "Two Days of Old Calcutta"
    assert itinerary.total_estimated_cost == 2500
    assert itinerary.days[0].activities[0].estimated_cost == 250


@pytest.mark.parametrize("text", ["", "Sure! Here is your plan.", '{"days": []}'])
def test_parse_rejects_non_itineraries(text) -> None:
    with pytest.raises(ItineraryParseError):
        parse_itinerary(text)


def test_prompt_lists_venues(test_session, heritage_sites, restaurants) -> None:
    prompt = build_prompt(2, "budget", ["Food"], None, heritage_sites, restaurants)

    assert "2-day trip itinerary" in prompt
    assert "Budget: budget" in prompt
    assert "Interests: Food" in prompt
    assert "Travel Style: cultural" in prompt
    assert "Site 1 (Monument)" in prompt
    assert "Restaurant 6 (moderate)" in prompt


def test_unconfigured_key_uses_fallback(test_session) -> None:
    metrics = MetricsClient()

    result = asyncio.run(
        suggest_itinerary(test_session, SuggestionRequest(duration=2), metrics=metrics)
    )

    assert result.source == "fallback"
    assert len(result.itinerary.days) == 2
    assert metrics.suggestions["fallback"] == 1
    assert metrics.suggestion_fallback_reasons["unconfigured"] == 1


def test_llm_itinerary_returned(test_session, heritage_sites) -> None:
    metrics = MetricsClient()
    mock_complete = AsyncMock(return_value=json.dumps(LLM_ITINERARY))

    with patch("backend.app.planning.suggest.complete", mock_complete):
        result = asyncio.run(
            suggest_itinerary(
                test_session,
                SuggestionRequest(duration=2, budget="moderate", interests=["Heritage"]),
                metrics=metrics,
            )
        )

    assert result.source == "llm"
    assert result.itinerary.trip_name == "Two Days of Old Calcutta"
    assert metrics.suggestions["llm"] == 1
    prompt = mock_complete.call_args.args[0][0]["content"]
    assert "Interests: Heritage" in prompt


def _itinerary_with_cost(raw_cost: str) -> str:
    return (
        '{"trip_name": "Odd Costs", "days": [{"day": 1, "activities": '
        f'[{{"name": "Kumartuli", "estimated_cost": {raw_cost}}}]}}]}}'
    )


@pytest.mark.parametrize(
    "mock_complete,reason",
    [
        (AsyncMock(side_effect=LLMError("boom")), "llm_error"),
        (AsyncMock(return_value="I cannot help with that"), "unparsable"),
        (AsyncMock(return_value=_itinerary_with_cost("Infinity")), "unparsable"),
        (AsyncMock(return_value=_itinerary_with_cost("[500]")), "unparsable"),
        (AsyncMock(return_value=_itinerary_with_cost('{"inr": 500}')), "unparsable"),
    ],
)
def test_llm_failures_use_fallback(test_session, mock_complete, reason) -> None:
    metrics = MetricsClient()

    with patch("backend.app.planning.suggest.complete", mock_complete):
        result = asyncio.run(
            suggest_itinerary(test_session, SuggestionRequest(duration=1), metrics=metrics)
        )

    assert result.source == "fallback"
    assert result.itinerary.total_estimated_cost == 1825
    assert metrics.suggestion_fallback_reasons[reason] == 1
