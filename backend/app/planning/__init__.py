"""Trip planning: itinerary suggestions and PDF export."""

from .pdf import render_trip_pdf
from .suggest import (
    ItineraryParseError,
    SuggestedItinerary,
    SuggestionRequest,
    SuggestionResult,
    build_prompt,
    fallback_itinerary,
    parse_itinerary,
    suggest_itinerary,
)

__all__ = [
    "ItineraryParseError",
    "SuggestedItinerary",
    "SuggestionRequest",
    "SuggestionResult",
    "build_prompt",
    "fallback_itinerary",
    "parse_itinerary",
    "render_trip_pdf",
    "suggest_itinerary",
]
