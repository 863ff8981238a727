"""Clients for external services (LLM completions, geocoding)."""

from .geocode import GeocodeError, GeocodeResult, LocationNotFoundError, geocode
from .llm import LLMError, complete

__all__ = [
    "GeocodeError",
    "GeocodeResult",
    "LLMError",
    "LocationNotFoundError",
    "complete",
    "geocode",
]
