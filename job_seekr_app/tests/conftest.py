"""
Pytest configuration and shared fixtures for the Job Seekr tests.
"""
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from job_seekr_app.backend import schemas
from job_seekr_app.backend.main import app
from job_seekr_app.backend.models.db.database import get_db, Base
from job_seekr_app.backend.models.db.interview import Interview, InterviewComment
from job_seekr_app.backend.services import application_tracker


OWNER_ID = "user-1"
OTHER_OWNER_ID = "user-2"


# Test Database Setup
@pytest.fixture(scope="function")
def test_db_engine():
    """Create a fresh in-memory SQLite database for every test."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(autoflush=False, bind=test_db_engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session):
    """Create a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# Owner Fixtures
@pytest.fixture
def owner_headers():
    return {"X-Owner-Id": OWNER_ID}


@pytest.fixture
def other_owner_headers():
    return {"X-Owner-Id": OTHER_OWNER_ID}


# Data Fixtures
@pytest.fixture
def sample_application_data():
    """Sample application payload as a client would post it."""
    return {
        "company": "Tech Innovations Inc",
        "position": "Senior Python Developer",
        "application_date": "2024-01-15",
        "status": "applied",
        "job_description": "Build and run the hiring platform APIs.",
        "job_posting_url": "https://example.com/jobs/123",
    }


@pytest.fixture
def create_application(test_db_session):
    """Factory inserting an application through the repository."""
    def _create(owner_id=OWNER_ID, **overrides):
        fields = {
            "company": "Acme Corp",
            "position": "Backend Engineer",
            "application_date": date(2024, 1, 2),
            "status": schemas.ApplicationStatus.applied,
        }
        fields.update(overrides)
        result = application_tracker.add_application(
            test_db_session, owner_id, schemas.ApplicationCreate(**fields)
        )
        assert result.is_ok(), result
        return result.value

    return _create


@pytest.fixture
def create_interview(test_db_session):
    """Factory inserting an interview row directly."""
    counter = {"n": 0}

    def _create(application_id, interview_date=None, **overrides):
        counter["n"] += 1
        interview = Interview(
            application_id=application_id,
            interview_date=interview_date or datetime(2024, 2, counter["n"], 10, 0),
            topic=overrides.pop("topic", f"Round {counter['n']}"),
            **overrides,
        )
        test_db_session.add(interview)
        test_db_session.commit()
        return interview.id

    return _create


@pytest.fixture
def create_comment(test_db_session):
    """Factory inserting an interview comment directly."""
    def _create(interview_id, comment="Follow up with the recruiter", pinned=False):
        row = InterviewComment(interview_id=interview_id, comment=comment, pinned=pinned)
        test_db_session.add(row)
        test_db_session.commit()
        return row.id

    return _create
