import uuid

from sqlalchemy import Column, Date, String, Text
from sqlalchemy.orm import relationship
from .database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String, nullable=False, index=True)
    company = Column(String, nullable=False, index=True)
    position = Column(String, nullable=False)
    application_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="applied")
    job_description = Column(Text, nullable=True)
    job_posting_url = Column(String, nullable=True)

    interviews = relationship(
        "Interview",
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Interview.interview_date",
    )
