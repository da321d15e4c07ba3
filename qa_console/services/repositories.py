"""
Repository layer for the reference backend's SQL storage.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from qa_console.models import Event, Question
from qa_console.schemas.event import EventCreate, EventStatus


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def list_sql(db: Session) -> List[Event]:
        return db.query(Event).order_by(Event.created_at.desc(), Event.id.desc()).all()

    @staticmethod
    def get_by_id_sql(db: Session, event_id: int) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def get_active_by_code_sql(db: Session, code: str) -> Optional[Event]:
        """Event holding `code` among events that are not closed"""
        return db.query(Event).filter(
            Event.code == code,
            Event.status != EventStatus.CLOSED.value
        ).first()

    @staticmethod
    def create_sql(db: Session, data: EventCreate) -> Event:
        event = Event(
            code=data.code,
            title=data.title,
            description=data.description,
            organizer_name=data.organizer_name,
            organizer_email=str(data.organizer_email),
            language=data.language.value,
            max_participants=data.max_participants,
            status=EventStatus.ACTIVE.value,
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event


# -------- Question repository --------

class QuestionRepo:
    @staticmethod
    def list_for_event_sql(db: Session, event_id: int) -> List[Question]:
        return db.query(Question).filter(Question.event_id == event_id).order_by(Question.created_at, Question.id).all()

    @staticmethod
    def get_by_id_sql(db: Session, question_id: int) -> Optional[Question]:
        return db.query(Question).filter(Question.id == question_id).first()

    @staticmethod
    def set_status_sql(db: Session, question: Question, status: str) -> Question:
        question.status = status
        db.commit()
        db.refresh(question)
        return question
