"""
Owner-scoped data access for job applications.

Every function takes the request session first and returns a Result: Ok with
plain pydantic records, or Err describing what failed. Nothing here raises to
the caller, and writes roll the session back before reporting a failure.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db.application import Application, new_id
from ..models.db.database import insert_or_ignore
from ..models.db.interview import Interview, InterviewComment
from ..utils.result import Ok, Result, conflict, not_found, storage_failure

logger = logging.getLogger(__name__)

READ_INTENT = "Failed to read from the applications table"
UPDATE_INTENT = "Failed to update the application"
INSERT_INTENT = "Failed to insert into the applications table"
DELETE_INTENT = "Failed to delete user applications"


@dataclass(frozen=True)
class ByOwner:
    """Select every application owned by ``owner_id``."""
    owner_id: str


@dataclass(frozen=True)
class ByIds:
    """
    Select applications by id.

    Without ``owner_id`` the ids are deleted whoever owns them; callers acting
    for an end user should pass the owner so foreign ids are skipped.
    """
    ids: Iterable[str]
    owner_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "ids", tuple(self.ids))


DeleteSelector = Union[ByOwner, ByIds]


def _to_list_item(application: Application, interviews_count: int) -> schemas.ApplicationListItem:
    item = schemas.ApplicationListItem.model_validate(application)
    return item.model_copy(update={"interviews_count": interviews_count})


def get_all_applications(db: Session, owner_id: str) -> Result[List[schemas.ApplicationListItem]]:
    """
    List the owner's applications with the number of interviews each one has.

    Applications without interviews are kept by the outer join and counted as 0.
    """
    try:
        interviews_count = func.count(Interview.id).label("interviews_count")
        stmt = (
            select(Application, interviews_count)
            .outerjoin(Interview, Interview.application_id == Application.id)
            .where(Application.user_id == owner_id)
            .group_by(Application.id)
            .order_by(Application.application_date, Application.id)
        )
        rows = db.execute(stmt).all()
        return Ok([_to_list_item(application, count) for application, count in rows])
    except Exception as e:
        db.rollback()
        return storage_failure(READ_INTENT, e)


def get_application_by_id(
    db: Session, owner_id: str, application_id: str
) -> Result[schemas.ApplicationDetails]:
    """Fetch one application and its interviews, earliest interview first."""
    try:
        application = db.execute(
            select(Application).where(
                Application.user_id == owner_id,
                Application.id == application_id,
            )
        ).scalar_one_or_none()
        if application is None:
            logger.debug("Application %s not found for owner %s", application_id, owner_id)
            return not_found("Application")

        interviews = db.scalars(
            select(Interview)
            .where(Interview.application_id == application_id)
            .order_by(Interview.interview_date, Interview.id)
        ).all()

        return Ok(schemas.ApplicationDetails(
            application=schemas.Application.model_validate(application),
            interviews=[schemas.Interview.model_validate(i) for i in interviews],
        ))
    except Exception as e:
        db.rollback()
        return storage_failure(READ_INTENT, e)


def _set_application_fields(
    db: Session, owner_id: str, application_id: str, **values
) -> Result[schemas.Application]:
    try:
        stmt = (
            update(Application)
            .where(Application.id == application_id, Application.user_id == owner_id)
            .values(**values)
            .returning(Application)
            .execution_options(synchronize_session="fetch")
        )
        updated = db.scalars(stmt).first()
        if updated is None:
            db.rollback()
            logger.debug("No application %s for owner %s to update", application_id, owner_id)
            return not_found("Application")

        record = schemas.Application.model_validate(updated)
        db.commit()
        logger.info("Updated %s on application %s", ", ".join(values), application_id)
        return Ok(record)
    except Exception as e:
        db.rollback()
        return storage_failure(UPDATE_INTENT, e)


def set_application_status(
    db: Session, owner_id: str, application_id: str, new_status: schemas.ApplicationStatus
) -> Result[schemas.Application]:
    try:
        status_value = schemas.ApplicationStatus(new_status).value
    except ValueError as e:
        return storage_failure(UPDATE_INTENT, e)
    return _set_application_fields(db, owner_id, application_id, status=status_value)


def set_application_job_description(
    db: Session, owner_id: str, application_id: str, new_job_description: str
) -> Result[schemas.Application]:
    return _set_application_fields(
        db, owner_id, application_id, job_description=new_job_description
    )


def update_application(
    db: Session, owner_id: str, application_id: str, command: schemas.ApplicationUpdateCommand
) -> Result[schemas.Application]:
    """Apply a status or job description change to one of the owner's applications."""
    change = command.root
    if isinstance(change, schemas.StatusUpdate):
        return set_application_status(db, owner_id, application_id, change.status)
    return set_application_job_description(db, owner_id, application_id, change.job_description)


def add_application(
    db: Session, owner_id: str, payload: schemas.ApplicationCreate
) -> Result[schemas.Application]:
    """
    Insert a new application for ``owner_id``.

    The insert ignores primary key conflicts, so replaying a create with the
    same id leaves the existing row alone and reports a CONFLICT failure.
    """
    values = payload.model_dump()
    values["id"] = payload.id or new_id()
    values["status"] = payload.status.value
    values["user_id"] = owner_id

    try:
        created = db.scalars(
            insert_or_ignore(db, Application, values).returning(Application)
        ).first()
        if created is None:
            db.rollback()
            logger.info("Application %s already exists, nothing inserted", values["id"])
            return conflict("Application")

        record = schemas.Application.model_validate(created)
        db.commit()
        logger.info("Created application %s for owner %s", record.id, owner_id)
        return Ok(record)
    except Exception as e:
        db.rollback()
        return storage_failure(INSERT_INTENT, e)


def _application_criteria(selector: DeleteSelector) -> list:
    if isinstance(selector, ByOwner):
        return [Application.user_id == selector.owner_id]
    if isinstance(selector, ByIds):
        criteria = [Application.id.in_(selector.ids)]
        if selector.owner_id is not None:
            criteria.append(Application.user_id == selector.owner_id)
        return criteria
    raise TypeError(f"Unsupported delete selector: {selector!r}")


def delete_applications(db: Session, selector: DeleteSelector) -> Result[None]:
    """
    Delete applications together with their interviews and comments.

    Children are removed first, all in one transaction. The number of deleted
    rows is not reported.
    """
    if isinstance(selector, ByIds) and not selector.ids:
        return Ok(None)

    try:
        criteria = _application_criteria(selector)
        application_ids = select(Application.id).where(*criteria)
        interview_ids = select(Interview.id).where(Interview.application_id.in_(application_ids))
        no_sync = {"synchronize_session": False}

        db.execute(
            delete(InterviewComment).where(InterviewComment.interview_id.in_(interview_ids)),
            execution_options=no_sync,
        )
        db.execute(
            delete(Interview).where(Interview.application_id.in_(application_ids)),
            execution_options=no_sync,
        )
        db.execute(
            delete(Application).where(*criteria),
            execution_options=no_sync,
        )
        db.commit()
        logger.info("Deleted applications matching %s", selector)
        return Ok(None)
    except Exception as e:
        db.rollback()
        return storage_failure(DELETE_INTENT, e)
