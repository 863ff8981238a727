"""Trip planning endpoints: CRUD, activities, PDF export and AI suggestions."""

import logging
import re
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from backend.app.api.auth import get_current_user
from backend.app.api.schemas import ActivityOut, MessageResponse, TripOut
from backend.app.db.models.restaurant import Restaurant
from backend.app.db.models.site import HeritageSite
from backend.app.db.models.trip import TripActivity, TripPlan
from backend.app.db.models.user import User
from backend.app.db.session import get_session
from backend.app.planning import (
    SuggestedItinerary,
    SuggestionRequest,
    render_trip_pdf,
    suggest_itinerary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


class TripCreate(BaseModel):
    name: str = Field(min_length=1)
    start_date: date
    end_date: date
    budget: int | None = Field(default=None, ge=0)
    description: str | None = None


class TripUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    start_date: date | None = None
    end_date: date | None = None
    budget: int | None = Field(default=None, ge=0)
    description: str | None = None


class TripResponse(BaseModel):
    message: str | None = None
    trip: TripOut


class TripListResponse(BaseModel):
    trips: list[TripOut]


class ActivityCreate(BaseModel):
    date: date
    site_id: UUID | None = None
    restaurant_id: UUID | None = None
    estimated_cost: int | None = Field(default=None, ge=0)
    notes: str | None = None


class ActivityResponse(BaseModel):
    message: str
    activity: ActivityOut


class SuggestResponse(BaseModel):
    success: bool = True
    itinerary: SuggestedItinerary
    source: str


def _get_owned_trip(db: Session, trip_id: UUID, user: User) -> TripPlan:
    trip = db.get(TripPlan, trip_id)
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    if trip.user_id != user.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return trip


def _check_dates(start: date, end: date) -> None:
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must be on or after start date",
        )


@router.post("/suggest", response_model=SuggestResponse)
async def suggest(
    request: SuggestionRequest,
    db: Session = Depends(get_session),
) -> SuggestResponse:
    """AI itinerary for the given preferences, or the built-in plan when unavailable."""
    result = await suggest_itinerary(db, request)
    return SuggestResponse(itinerary=result.itinerary, source=result.source)


@router.get("", response_model=TripListResponse)
async def list_trips(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> TripListResponse:
    trips = (
        db.execute(
            select(TripPlan)
            .where(TripPlan.user_id == current_user.user_id)
            .order_by(TripPlan.start_date.desc())
        )
        .scalars()
        .all()
    )
    return TripListResponse(trips=[TripOut.model_validate(t) for t in trips])


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    request: TripCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> TripResponse:
    _check_dates(request.start_date, request.end_date)

    trip = TripPlan(user_id=current_user.user_id, **request.model_dump())
    db.add(trip)
    db.commit()

    return TripResponse(message="Trip created successfully", trip=TripOut.model_validate(trip))


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> TripResponse:
    trip = _get_owned_trip(db, trip_id, current_user)
    return TripResponse(trip=TripOut.model_validate(trip))


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: UUID,
    request: TripUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> TripResponse:
    trip = _get_owned_trip(db, trip_id, current_user)

    updates = request.model_dump(exclude_unset=True)
    for field in ("name", "start_date", "end_date"):
        if field in updates and updates[field] is None:
            del updates[field]

    _check_dates(
        updates.get("start_date", trip.start_date), updates.get("end_date", trip.end_date)
    )
    for field, value in updates.items():
        setattr(trip, field, value)
    db.commit()

    return TripResponse(message="Trip updated successfully", trip=TripOut.model_validate(trip))


@router.delete("/{trip_id}", response_model=MessageResponse)
async def delete_trip(
    trip_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageResponse:
    trip = _get_owned_trip(db, trip_id, current_user)
    db.delete(trip)
    db.commit()
    return MessageResponse(message="Trip deleted successfully")


@router.post(
    "/{trip_id}/activities",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_activity(
    trip_id: UUID,
    request: ActivityCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ActivityResponse:
    """Append an activity to a trip day; it is ordered after that day's existing activities."""
    trip = _get_owned_trip(db, trip_id, current_user)

    if request.site_id and not db.get(HeritageSite, request.site_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Heritage site not found")
    if request.restaurant_id and not db.get(Restaurant, request.restaurant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")

    existing = db.execute(
        select(func.count())
        .select_from(TripActivity)
        .where(TripActivity.trip_id == trip.trip_id, TripActivity.date == request.date)
    ).scalar_one()

    activity = TripActivity(
        date=request.date,
        site_id=request.site_id,
        restaurant_id=request.restaurant_id,
        estimated_cost=request.estimated_cost,
        notes=request.notes,
        order_index=existing,
    )
    trip.activities.append(activity)
    db.commit()

    return ActivityResponse(
        message="Activity added successfully", activity=ActivityOut.model_validate(activity)
    )


@router.delete("/{trip_id}/activities", response_model=MessageResponse)
async def delete_activity(
    trip_id: UUID,
    activity_id: UUID | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageResponse:
    if activity_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Activity ID is required")

    trip = _get_owned_trip(db, trip_id, current_user)

    activity = db.get(TripActivity, activity_id)
    if not activity or activity.trip_id != trip.trip_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")

    trip.activities.remove(activity)
    db.commit()
    return MessageResponse(message="Activity deleted successfully")


@router.get("/{trip_id}/pdf")
async def download_pdf(
    trip_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> Response:
    """Trip itinerary as a PDF attachment."""
    trip = _get_owned_trip(db, trip_id, current_user)
    content = render_trip_pdf(trip, trip.activities)

    slug = re.sub(r"[^A-Za-z0-9]+", "-", trip.name).strip("-").lower() or "trip"
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{slug}-itinerary.pdf"'},
    )
