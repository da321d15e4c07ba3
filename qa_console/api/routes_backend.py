"""
Reference events/questions backend

Serves the REST surface the console polls (GET/POST /events,
GET /questions, PUT /questions/{id}) on top of SQLAlchemy. Questions are
created by the participant flow elsewhere; this backend only reads and
moderates them.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.orm import Session

from qa_console.core.db import Base, engine, get_db
from qa_console.schemas.event import EventCreate, EventOut
from qa_console.schemas.question import QuestionOut, StatusUpdate
from qa_console.services.repositories import EventRepo, QuestionRepo
from qa_console.utils.responses import backend_error

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/events", response_model=List[EventOut])
async def list_events(db: Session = Depends(get_db)):
    """All events, newest first"""
    return EventRepo.list_sql(db)

@router.post("/events", response_model=EventOut, status_code=201)
async def create_event(event_data: EventCreate, db: Session = Depends(get_db)):
    """Create a new event; the code must not be held by another open event"""
    if EventRepo.get_active_by_code_sql(db, event_data.code):
        return backend_error("Event code already exists", status_code=409)

    event = EventRepo.create_sql(db, event_data)
    logger.info(f"Event {event.code} stored with id {event.id}")
    return event

@router.get("/questions", response_model=List[QuestionOut])
async def list_questions(
    event_id: Optional[int] = Query(None, alias="eventId"),
    db: Session = Depends(get_db)
):
    """Questions of one event, oldest first"""
    if event_id is None:
        return backend_error("eventId is required", status_code=400)
    return QuestionRepo.list_for_event_sql(db, event_id)

@router.put("/questions/{question_id}", response_model=QuestionOut)
async def update_question(
    question_id: int,
    update: StatusUpdate,
    db: Session = Depends(get_db)
):
    """Apply a moderation status"""
    question = QuestionRepo.get_by_id_sql(db, question_id)
    if not question:
        return backend_error("Question not found", status_code=404)

    question = QuestionRepo.set_status_sql(db, question, update.status.value)
    logger.info(f"Question {question.id} set to {question.status}")
    return question

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request validation failures in the backend's `{error}` shape"""
    problems = []
    for error in exc.errors():
        field = error["loc"][-1] if error["loc"] else "body"
        problems.append(f"{field}: {error['msg']}")
    return backend_error("; ".join(problems) or "Invalid request", status_code=400)

@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Backend tables ready")
    yield

def create_backend_app() -> FastAPI:
    """Stand-alone ASGI app for the backend, mountable under a prefix"""
    app = FastAPI(title="Q&A Events Backend", lifespan=lifespan)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(router)
    return app
