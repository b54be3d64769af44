from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..services import application_tracker as application_service
from ..models.db.database import get_db
from ..utils.api_helpers import unwrap_or_raise
from .auth import get_current_owner_id

router = APIRouter()


@router.get("/", response_model=schemas.DataResponse[List[schemas.ApplicationListItem]])
def read_applications(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Retrieve all job applications of the current owner with their interview counts.
    """
    applications = unwrap_or_raise(application_service.get_all_applications(db, owner_id))
    return {"data": applications}


@router.post("/", response_model=schemas.DataResponse[schemas.Application], status_code=status.HTTP_201_CREATED)
def create_application(
    application: schemas.ApplicationCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Create a new job application entry. Replaying a create with the same id returns 409.
    """
    created = unwrap_or_raise(application_service.add_application(db, owner_id, application))
    return {"data": created}


# Must be registered before "/{application_id}"
@router.delete("/of-user", status_code=status.HTTP_204_NO_CONTENT)
def delete_owner_applications(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Delete every application of the current owner, with interviews and comments.
    """
    unwrap_or_raise(application_service.delete_applications(db, application_service.ByOwner(owner_id)))


@router.get("/{application_id}", response_model=schemas.DataResponse[schemas.ApplicationDetails])
def read_application(
    application_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Retrieve a specific job application with its interviews in date order.
    """
    details = unwrap_or_raise(application_service.get_application_by_id(db, owner_id, application_id))
    return {"data": details}


@router.put("/{application_id}", response_model=schemas.DataResponse[schemas.Application])
def update_application(
    application_id: str,
    command: schemas.ApplicationUpdateCommand,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Change an application's status or job description.
    """
    updated = unwrap_or_raise(application_service.update_application(db, owner_id, application_id, command))
    return {"data": updated}


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application(
    application_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Delete a job application. Ids owned by someone else are left untouched.
    """
    selector = application_service.ByIds([application_id], owner_id=owner_id)
    unwrap_or_raise(application_service.delete_applications(db, selector))
