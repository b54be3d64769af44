from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..services import interview_tracker as interview_service
from ..models.db.database import get_db
from ..utils.api_helpers import unwrap_or_raise
from .auth import get_current_owner_id

router = APIRouter()


@router.post("/", response_model=schemas.DataResponse[schemas.Interview], status_code=status.HTTP_201_CREATED)
def create_interview(
    interview: schemas.InterviewCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Add an interview to one of the current owner's applications.
    """
    created = unwrap_or_raise(interview_service.add_interview(db, owner_id, interview))
    return {"data": created}


@router.get("/{interview_id}", response_model=schemas.DataResponse[schemas.InterviewDetails])
def read_interview(
    interview_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    details = unwrap_or_raise(interview_service.get_interview_by_id(db, owner_id, interview_id))
    return {"data": details}


@router.delete("/{interview_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_interview(
    interview_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    unwrap_or_raise(interview_service.delete_interview(db, owner_id, interview_id))


@router.post(
    "/{interview_id}/comments",
    response_model=schemas.DataResponse[schemas.InterviewComment],
    status_code=status.HTTP_201_CREATED,
)
def create_interview_comment(
    interview_id: str,
    comment: schemas.InterviewCommentCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Attach a comment to an interview, optionally pinned.
    """
    created = unwrap_or_raise(interview_service.add_interview_comment(db, owner_id, interview_id, comment))
    return {"data": created}


@router.delete("/{interview_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_interview_comment(
    interview_id: str,
    comment_id: int,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    unwrap_or_raise(interview_service.delete_interview_comment(db, owner_id, interview_id, comment_id))
