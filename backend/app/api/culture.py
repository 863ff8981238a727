"""Culture photo/story submissions."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.api.auth import get_current_user
from backend.app.api.schemas import CultureSubmissionOut
from backend.app.db.models.culture import CultureSubmission
from backend.app.db.models.user import User
from backend.app.db.session import get_session

router = APIRouter(prefix="/culture", tags=["culture"])


class SubmissionCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    image_url: str = Field(min_length=1)


class SubmissionResponse(BaseModel):
    message: str
    submission: CultureSubmissionOut


class SubmissionListResponse(BaseModel):
    submissions: list[CultureSubmissionOut]


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def create_submission(
    request: SubmissionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> SubmissionResponse:
    """Submit a photo/story for admin review; points are awarded on approval."""
    submission = CultureSubmission(user_id=current_user.user_id, **request.model_dump())
    db.add(submission)
    db.commit()
    return SubmissionResponse(
        message="Submission received and pending review",
        submission=CultureSubmissionOut.model_validate(submission),
    )


@router.get("", response_model=SubmissionListResponse)
async def list_my_submissions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> SubmissionListResponse:
    submissions = (
        db.execute(
            select(CultureSubmission)
            .where(CultureSubmission.user_id == current_user.user_id)
            .order_by(CultureSubmission.created_at.desc())
        )
        .scalars()
        .all()
    )
    return SubmissionListResponse(
        submissions=[CultureSubmissionOut.model_validate(s) for s in submissions]
    )
