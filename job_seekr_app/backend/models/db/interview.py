from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from .database import Base
from .application import new_id


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(String(36), primary_key=True, default=new_id)
    application_id = Column(
        String(36),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    interview_date = Column(DateTime, nullable=False, index=True)
    topic = Column(String, nullable=False)
    participants = Column(Text, nullable=True)
    prep_notes = Column(Text, nullable=True)

    application = relationship("Application", back_populates="interviews")
    comments = relationship(
        "InterviewComment",
        back_populates="interview",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class InterviewComment(Base):
    __tablename__ = "interview_comments"

    # Autoincrement keeps insertion order for comment listings
    id = Column(Integer, primary_key=True, autoincrement=True)
    interview_id = Column(
        String(36),
        ForeignKey("interviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    comment = Column(Text, nullable=False)
    pinned = Column(Boolean, nullable=False, default=False)

    interview = relationship("Interview", back_populates="comments")
