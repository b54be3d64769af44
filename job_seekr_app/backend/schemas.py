from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_serializer, field_validator

T = TypeVar("T")


class ApplicationStatus(str, Enum):
    applied = "applied"
    interviewing = "interviewing"
    offer = "offer"
    rejected = "rejected"
    accepted = "accepted"
    withdrawn = "withdrawn"


# Application Tracker Schemas
class ApplicationBase(BaseModel):
    company: str = Field(..., min_length=1, examples=["Acme Corp"])
    position: str = Field(..., min_length=1, examples=["Backend Engineer"])
    application_date: date
    status: ApplicationStatus = ApplicationStatus.applied
    job_description: Optional[str] = None
    job_posting_url: Optional[str] = None


class ApplicationCreate(ApplicationBase):
    # Supplying an id makes creation idempotent: a repeated create is ignored
    id: Optional[str] = None


class Application(ApplicationBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    # Stored statuses are not re-validated against the enum on the way out
    status: str


class ApplicationListItem(Application):
    interviews_count: int = 0


class StatusUpdate(BaseModel):
    kind: Literal["status"] = "status"
    status: ApplicationStatus


class JobDescriptionUpdate(BaseModel):
    kind: Literal["job_description"] = "job_description"
    job_description: str


ApplicationUpdate = Annotated[Union[StatusUpdate, JobDescriptionUpdate], Field(discriminator="kind")]


class ApplicationUpdateCommand(RootModel[ApplicationUpdate]):
    """Either a status change or a job description change."""


# Interview Schemas
class InterviewBase(BaseModel):
    application_id: str
    interview_date: datetime
    topic: str = Field(..., min_length=1)
    participants: Optional[str] = None
    prep_notes: Optional[str] = None

    @field_validator("interview_date")
    @classmethod
    def normalize_to_utc(cls, v: datetime) -> datetime:
        # Stored as naive UTC so rows sort by the actual moment
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class InterviewCreate(InterviewBase):
    id: Optional[str] = None


class Interview(InterviewBase):
    model_config = ConfigDict(from_attributes=True)

    id: str

    @field_serializer("interview_date")
    def serialize_as_utc(self, v: datetime) -> datetime:
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v


class InterviewCommentCreate(BaseModel):
    comment: str = Field(..., min_length=1)
    pinned: bool = False


class InterviewComment(InterviewCommentCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    interview_id: str


# Aggregates
class ApplicationDetails(BaseModel):
    application: Application
    interviews: List[Interview] = []


class InterviewDetails(BaseModel):
    interview: Interview
    comments: List[InterviewComment] = []


class DataResponse(BaseModel, Generic[T]):
    data: T
