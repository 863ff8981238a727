"""Place-name geocoding endpoint."""

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from backend.app.adapters.geocode import GeocodeError, LocationNotFoundError, geocode

router = APIRouter(prefix="/geocode", tags=["geocode"])


class GeocodeResponse(BaseModel):
    success: bool = True
    latitude: float
    longitude: float
    formatted_address: str
    place_id: int | str | None = None


@router.get("", response_model=GeocodeResponse)
async def geocode_place(place: str | None = Query(default=None)) -> GeocodeResponse:
    """Coordinates for a place, scoped to Kolkata."""
    if not place or not place.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Place name is required")

    try:
        result = await geocode(place.strip())
    except LocationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GeocodeError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to geocode location",
        )

    return GeocodeResponse(**result.model_dump())
