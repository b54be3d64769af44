"""
Owner-scoped data access for interviews and their comments.

Interviews have no owner column of their own; ownership is always resolved
through the application they belong to.
"""
import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db.application import Application, new_id
from ..models.db.database import insert_or_ignore
from ..models.db.interview import Interview, InterviewComment
from ..utils.result import Ok, Result, conflict, not_found, storage_failure

logger = logging.getLogger(__name__)

READ_INTENT = "Failed to read from the interviews table"
INSERT_INTENT = "Failed to insert into the interviews table"
DELETE_INTENT = "Failed to delete the interview"
COMMENT_INSERT_INTENT = "Failed to add the interview comment"
COMMENT_DELETE_INTENT = "Failed to delete the interview comment"


def _owned_interview_ids(owner_id: str, interview_id: str):
    return (
        select(Interview.id)
        .join(Application, Interview.application_id == Application.id)
        .where(Interview.id == interview_id, Application.user_id == owner_id)
    )


def _owns_interview(db: Session, owner_id: str, interview_id: str) -> bool:
    return db.scalar(_owned_interview_ids(owner_id, interview_id)) is not None


def add_interview(db: Session, owner_id: str, payload: schemas.InterviewCreate) -> Result[schemas.Interview]:
    """Schedule an interview on one of the owner's applications."""
    values = payload.model_dump()
    values["id"] = payload.id or new_id()

    try:
        application_id = db.scalar(
            select(Application.id).where(
                Application.id == payload.application_id,
                Application.user_id == owner_id,
            )
        )
        if application_id is None:
            return not_found("Application")

        created = db.scalars(
            insert_or_ignore(db, Interview, values).returning(Interview)
        ).first()
        if created is None:
            db.rollback()
            return conflict("Interview")

        record = schemas.Interview.model_validate(created)
        db.commit()
        logger.info("Added interview %s to application %s", record.id, application_id)
        return Ok(record)
    except Exception as e:
        db.rollback()
        return storage_failure(INSERT_INTENT, e)


def get_interview_by_id(db: Session, owner_id: str, interview_id: str) -> Result[schemas.InterviewDetails]:
    """Fetch an interview with its comments, pinned comments first."""
    try:
        interview = db.scalars(
            select(Interview)
            .join(Application, Interview.application_id == Application.id)
            .where(Interview.id == interview_id, Application.user_id == owner_id)
        ).first()
        if interview is None:
            return not_found("Interview")

        comments = db.scalars(
            select(InterviewComment)
            .where(InterviewComment.interview_id == interview_id)
            .order_by(InterviewComment.pinned.desc(), InterviewComment.id)
        ).all()

        return Ok(schemas.InterviewDetails(
            interview=schemas.Interview.model_validate(interview),
            comments=[schemas.InterviewComment.model_validate(c) for c in comments],
        ))
    except Exception as e:
        db.rollback()
        return storage_failure(READ_INTENT, e)


def delete_interview(db: Session, owner_id: str, interview_id: str) -> Result[None]:
    try:
        if not _owns_interview(db, owner_id, interview_id):
            return not_found("Interview")

        no_sync = {"synchronize_session": False}
        db.execute(
            delete(InterviewComment).where(InterviewComment.interview_id == interview_id),
            execution_options=no_sync,
        )
        db.execute(delete(Interview).where(Interview.id == interview_id), execution_options=no_sync)
        db.commit()
        logger.info("Deleted interview %s", interview_id)
        return Ok(None)
    except Exception as e:
        db.rollback()
        return storage_failure(DELETE_INTENT, e)


def add_interview_comment(
    db: Session, owner_id: str, interview_id: str, payload: schemas.InterviewCommentCreate
) -> Result[schemas.InterviewComment]:
    try:
        if not _owns_interview(db, owner_id, interview_id):
            return not_found("Interview")

        comment = InterviewComment(interview_id=interview_id, comment=payload.comment, pinned=payload.pinned)
        db.add(comment)
        db.flush()
        record = schemas.InterviewComment.model_validate(comment)
        db.commit()
        return Ok(record)
    except Exception as e:
        db.rollback()
        return storage_failure(COMMENT_INSERT_INTENT, e)


def delete_interview_comment(db: Session, owner_id: str, interview_id: str, comment_id: int) -> Result[None]:
    """Remove a comment, provided it sits on an interview the owner can see."""
    try:
        result = db.execute(
            delete(InterviewComment).where(
                InterviewComment.id == comment_id,
                InterviewComment.interview_id.in_(_owned_interview_ids(owner_id, interview_id)),
            ),
            execution_options={"synchronize_session": False},
        )
        if result.rowcount == 0:
            db.rollback()
            return not_found("Comment")

        db.commit()
        return Ok(None)
    except Exception as e:
        db.rollback()
        return storage_failure(COMMENT_DELETE_INTENT, e)
