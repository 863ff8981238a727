"""Place-name geocoding against Nominatim (OpenStreetMap)."""

import logging

import httpx
from pydantic import BaseModel

from backend.app.config import get_settings

logger = logging.getLogger(__name__)

CITY_SUFFIX = ", Kolkata, West Bengal, India"


class GeocodeResult(BaseModel):
    """Best match for a place name."""

    latitude: float
    longitude: float
    formatted_address: str
    place_id: int | str | None = None


class GeocodeError(RuntimeError):
    """Geocoder unreachable or returned an error status."""


class LocationNotFoundError(GeocodeError):
    """Geocoder returned no results."""


def build_query(place: str) -> str:
    """Scope the search to Kolkata unless the query already names it."""
    if "kolkata" in place.lower():
        return place
    return f"{place}{CITY_SUFFIX}"


async def geocode(place: str, client: httpx.AsyncClient | None = None) -> GeocodeResult:
    """Resolve a place name to coordinates.

    Args:
        place: Free-text place name
        client: Optional HTTP client (a new one is created and closed otherwise)

    Raises:
        LocationNotFoundError: If nothing matches
        GeocodeError: On transport errors or non-2xx responses
    """
    settings = get_settings()
    params = {"format": "json", "q": build_query(place), "limit": 1}
    headers = {"User-Agent": settings.geocode_user_agent}

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=settings.http_timeout_s)

    try:
        response = await client.get(settings.geocode_url, params=params, headers=headers)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error("Geocoder returned %s for %r", e.response.status_code, place)
        raise GeocodeError(f"Geocoder returned {e.response.status_code}") from e
    except httpx.HTTPError as e:
        logger.error("Geocoder request failed for %r: %s", place, e)
        raise GeocodeError(f"Geocoder request failed: {e}") from e
    except ValueError as e:
        raise GeocodeError("Geocoder returned malformed JSON") from e
    finally:
        if owns_client:
            await client.aclose()

    if not data:
        raise LocationNotFoundError("Location not found. Try a more specific name.")

    best = data[0]
    return GeocodeResult(
        latitude=float(best["lat"]),
        longitude=float(best["lon"]),
        formatted_address=best.get("display_name", ""),
        place_id=best.get("place_id"),
    )
