"""
Shared fixtures: reference backend on a throwaway SQLite database
"""

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from qa_console.core.db import Base, get_db
from qa_console.api.routes_backend import create_backend_app
from qa_console.models import Event, Question
from qa_console.services.backend_client import BackendClient
from qa_console.services.event_directory import EventDirectoryClient
from qa_console.services.query_cache import QueryCache
from qa_console.services.question_queue import QuestionQueueClient

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_backend.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def backend_app(db_session):
    """Reference backend bound to the test database"""
    app = create_backend_app()

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return app

@pytest.fixture
def backend_client(backend_app):
    """BackendClient talking to the reference backend in-process"""
    return BackendClient(
        base_url="http://backend",
        transport=httpx.ASGITransport(app=backend_app)
    )

@pytest.fixture
def cache():
    return QueryCache(stale_time=60.0)

@pytest.fixture
def directory(backend_client, cache):
    return EventDirectoryClient(backend_client, cache)

@pytest.fixture
def queue(backend_client, cache):
    return QuestionQueueClient(backend_client, cache)

@pytest.fixture
def town_hall(db_session):
    """An open event with a few questions already submitted"""
    event = Event(
        code="TOWN1",
        title="Town Hall",
        organizer_name="Jo",
        organizer_email="jo@example.com",
    )
    db_session.add(event)
    db_session.flush()

    for index, status in enumerate(["pending", "approved", "declined"], start=1):
        db_session.add(Question(
            id=index,
            event_id=event.id,
            participant_name=f"Participant {index}",
            participant_email=f"p{index}@example.com",
            question_text=f"Question number {index}?",
            status=status
        ))

    db_session.commit()
    db_session.refresh(event)
    return event

def mock_backend(handler) -> BackendClient:
    """BackendClient whose requests are answered by `handler`"""
    return BackendClient(base_url="http://backend", transport=httpx.MockTransport(handler))

def event_json(event_id, code, **overrides):
    data = {
        "id": event_id,
        "code": code,
        "title": f"Event {code}",
        "description": None,
        "organizer_name": "Jo",
        "organizer_email": "jo@example.com",
        "language": "en",
        "max_participants": 100,
        "status": "active",
    }
    data.update(overrides)
    return data

def question_json(question_id, event_id, status="pending", **overrides):
    data = {
        "id": question_id,
        "event_id": event_id,
        "participant_name": "Sam",
        "participant_email": "sam@example.com",
        "question_text": "What is next?",
        "status": status,
    }
    data.update(overrides)
    return data
