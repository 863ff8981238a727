"""AI-assisted itinerary suggestions with a deterministic fallback.

The completion API is asked for a JSON itinerary built around the sites and
restaurants in the database. Any failure (no key configured, API error,
empty text, unparsable JSON) yields the built-in Kolkata itinerary instead,
so callers always receive a usable plan.
"""

import json
import logging
import math
import re
from collections.abc import Sequence
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.adapters.llm import LLMError, complete
from backend.app.config import MissingOpenAIKeyError, get_settings
from backend.app.db.models.restaurant import Restaurant
from backend.app.db.models.site import HeritageSite
from backend.app.metrics.registry import MetricsClient, get_metrics

logger = logging.getLogger(__name__)

PROMPT_SITE_LIMIT = 10
PROMPT_RESTAURANT_LIMIT = 10

_FENCE_RE = re.compile(r"```(?:json)?\s*|\s*```")


class ItineraryParseError(ValueError):
    """Completion text is not a valid itinerary document."""


class SuggestedActivity(BaseModel):
    """One timed stop in a suggested day."""

    model_config = ConfigDict(populate_by_name=True)

    time: str = ""
    type: str = "site"
    name: str
    description: str = ""
    estimated_cost: int = Field(
        default=0, validation_alias=AliasChoices("estimated_cost", "estimatedCost")
    )
    duration: str = ""

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def _coerce_cost(cls, value: Any) -> int:
        if value is None or value == "":
            return 0
        if isinstance(value, str):
            value = re.sub(r"[^\d.]", "", value) or 0
        if not isinstance(value, (int, float, str)):
            raise ValueError(f"estimated cost must be a number, got {type(value).__name__}")
        cost = float(value)
        if not math.isfinite(cost):
            raise ValueError("estimated cost must be finite")
        return int(round(cost))


class SuggestedDay(BaseModel):
    day: int
    theme: str = ""
    activities: list[SuggestedActivity] = Field(default_factory=list)


class SuggestedItinerary(BaseModel):
    """Day-by-day plan returned to the client."""

    model_config = ConfigDict(populate_by_name=True)

    trip_name: str = Field(validation_alias=AliasChoices("trip_name", "tripName"))
    days: list[SuggestedDay] = Field(default_factory=list)
    total_estimated_cost: int = Field(
        default=0,
        validation_alias=AliasChoices("total_estimated_cost", "totalEstimatedCost"),
    )
    tips: list[str] = Field(default_factory=list)


class SuggestionRequest(BaseModel):
    """Traveller preferences for a suggestion."""

    duration: int = Field(ge=1, description="Trip length in days")
    budget: str | None = Field(default=None, description="budget | moderate | luxury")
    interests: list[str] | None = None
    travel_style: str | None = None


class SuggestionResult(BaseModel):
    itinerary: SuggestedItinerary
    source: Literal["llm", "fallback"]


def _activity(time: str, kind: str, name: str, description: str, cost: int, duration: str) -> dict[str, Any]:
    return {
        "time": time,
        "type": kind,
        "name": name,
        "description": description,
        "estimated_cost": cost,
        "duration": duration,
    }


FALLBACK_DAYS: list[dict[str, Any]] = [
    {
        "day": 1,
        "theme": "Heritage & History",
        "activities": [
            _activity("9:00 AM", "site", "Victoria Memorial", "Start your day at the iconic marble building with its stunning architecture and museum", 50, "2 hours"),
            _activity("12:00 PM", "restaurant", "Peter Cat", "Enjoy the famous Chelo Kebab for lunch", 800, "1.5 hours"),
            _activity("2:30 PM", "site", "Indian Museum", "Explore one of the oldest museums in Asia", 75, "2 hours"),
            _activity("5:00 PM", "activity", "Park Street Walk", "Stroll through the famous street, enjoy coffee at Flurys", 300, "2 hours"),
            _activity("7:30 PM", "restaurant", "6 Ballygunge Place", "Traditional Bengali dinner", 600, "1.5 hours"),
        ],
    },
    {
        "day": 2,
        "theme": "Cultural Exploration",
        "activities": [
            _activity("8:00 AM", "site", "Howrah Bridge", "Witness the iconic cantilever bridge at sunrise", 0, "1 hour"),
            _activity("9:30 AM", "site", "Marble Palace", "Explore this 19th-century mansion with art collection", 0, "1.5 hours"),
            _activity("12:00 PM", "restaurant", "Paramount Sharbat", "Famous cold drinks and snacks", 200, "30 mins"),
            _activity("1:00 PM", "site", "College Street", "Book lovers paradise - explore old bookshops", 500, "2 hours"),
            _activity("4:00 PM", "site", "Kumartuli", "See artisans crafting clay idols", 0, "1.5 hours"),
            _activity("6:30 PM", "restaurant", "Oh! Calcutta", "Fine dining Bengali cuisine", 1200, "2 hours"),
        ],
    },
    {
        "day": 3,
        "theme": "Spiritual & Local Life",
        "activities": [
            _activity("6:00 AM", "site", "Dakshineswar Kali Temple", "Visit the famous temple associated with Ramakrishna", 0, "2 hours"),
            _activity("9:00 AM", "site", "Belur Math", "Headquarters of Ramakrishna Mission", 0, "1.5 hours"),
            _activity("12:00 PM", "restaurant", "Bhojohori Manna", "Authentic Bengali lunch", 500, "1 hour"),
            _activity("2:00 PM", "site", "Prinsep Ghat", "Relax by the Hooghly river", 0, "1.5 hours"),
            _activity("4:30 PM", "activity", "New Market Shopping", "Shop for souvenirs and local goods", 1000, "2 hours"),
            _activity("7:00 PM", "restaurant", "Arsalan", "Famous Biryani for dinner", 700, "1.5 hours"),
        ],
    },
]

FALLBACK_TIPS = [
    "Best time to visit heritage sites is early morning to avoid crowds",
    "Carry cash for entry fees and street food",
    "Yellow taxis and metro are convenient for getting around",
    "Try the famous Kolkata street food - puchka, jhalmuri, and mishti",
    "Evenings by the Hooghly river are magical",
]


def fallback_itinerary(duration: int) -> SuggestedItinerary:
    """Built-in itinerary, at most three days long."""
    days = [SuggestedDay.model_validate(day) for day in FALLBACK_DAYS[: max(duration, 0)]]
    total = sum(activity.estimated_cost for day in days for activity in day.activities)
    return SuggestedItinerary(
        trip_name=f"{duration}-Day Kolkata Heritage Experience",
        days=days,
        total_estimated_cost=total,
        tips=list(FALLBACK_TIPS),
    )


def build_prompt(
    duration: int,
    budget: str | None,
    interests: Sequence[str] | None,
    travel_style: str | None,
    sites: Sequence[HeritageSite],
    restaurants: Sequence[Restaurant],
) -> str:
    """Prompt describing preferences, known venues and the expected JSON shape."""
    site_lines = "\n".join(
        f"- {site.name} ({site.category}) - Entry: ₹{site.entry_fee or 'Free'}"
        for site in sites[:PROMPT_SITE_LIMIT]
    )
    restaurant_lines = "\n".join(
        f"- {r.name} ({r.price_range}) - ₹{r.avg_cost_per_person}/person"
        for r in restaurants[:PROMPT_RESTAURANT_LIMIT]
    )
    interest_text = ", ".join(interests) if interests else "heritage, culture, food"

    return f"""You are a Kolkata travel expert. Create a {duration}-day trip itinerary for Kolkata, India.

User Preferences:
- Budget: {budget or "moderate"}
- Interests: {interest_text}
- Travel Style: {travel_style or "cultural"}

Available Heritage Sites in our database:
{site_lines}

Available Restaurants:
{restaurant_lines}

Create a detailed day-by-day itinerary in JSON format with this structure:
{{
  "trip_name": "Title for the trip",
  "days": [
    {{
      "day": 1,
      "theme": "Day theme",
      "activities": [
        {{
          "time": "9:00 AM",
          "type": "site",
          "name": "Place name",
          "description": "What to do here",
          "estimated_cost": 500,
          "duration": "2 hours"
        }}
      ]
    }}
  ],
  "total_estimated_cost": 5000,
  "tips": ["Tip 1", "Tip 2"]
}}

Only respond with valid JSON, no markdown or extra text."""


def parse_itinerary(text: str) -> SuggestedItinerary:
    """Parse completion text, tolerating markdown code fences.

    Raises:
        ItineraryParseError: If the text is not JSON or misses required fields
    """
    cleaned = _FENCE_RE.sub("", text or "").strip()
    if not cleaned:
        raise ItineraryParseError("Empty itinerary text")

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ItineraryParseError(f"Itinerary is not valid JSON: {e}") from e

    try:
        return SuggestedItinerary.model_validate(data)
    except ValidationError as e:
        raise ItineraryParseError(f"Itinerary does not match schema: {e}") from e


def _fallback(request: SuggestionRequest, reason: str, metrics: MetricsClient) -> SuggestionResult:
    logger.info("Using fallback itinerary (%s)", reason)
    metrics.inc_suggestion("fallback", reason)
    return SuggestionResult(itinerary=fallback_itinerary(request.duration), source="fallback")


async def suggest_itinerary(
    session: Session,
    request: SuggestionRequest,
    metrics: MetricsClient | None = None,
) -> SuggestionResult:
    """Ask the completion API for an itinerary, falling back on any failure."""
    metrics = metrics or get_metrics()

    sites = session.execute(select(HeritageSite).limit(PROMPT_SITE_LIMIT)).scalars().all()
    restaurants = (
        session.execute(select(Restaurant).limit(PROMPT_RESTAURANT_LIMIT)).scalars().all()
    )
    prompt = build_prompt(
        request.duration,
        request.budget,
        request.interests,
        request.travel_style,
        sites,
        restaurants,
    )

    try:
        text = await complete(
            [{"role": "user", "content": prompt}],
            model=get_settings().openai_model,
            temperature=0.7,
            max_tokens=2048,
        )
    except MissingOpenAIKeyError:
        return _fallback(request, "unconfigured", metrics)
    except LLMError as e:
        logger.warning("Itinerary completion failed: %s", e)
        return _fallback(request, "llm_error", metrics)

    try:
        itinerary = parse_itinerary(text)
    except ItineraryParseError as e:
        logger.warning("Could not parse itinerary completion: %s", e)
        return _fallback(request, "unparsable", metrics)

    metrics.inc_suggestion("llm")
    return SuggestionResult(itinerary=itinerary, source="llm")
