"""
Event model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship

from qa_console.core.db import Base

class Event(Base):
    __tablename__ = "events"
    
    id = Column(Integer, primary_key=True, index=True)
    # Unique among non-closed events; enforced by EventRepo
    code = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    organizer_name = Column(String(255), nullable=False)
    organizer_email = Column(String(255), nullable=False)
    language = Column(String(10), default="en")
    max_participants = Column(Integer, default=100)
    status = Column(String(20), default="active")  # active, paused, closed
    created_at = Column(DateTime, default=datetime.utcnow)
    
    # Relationships
    questions = relationship("Question", back_populates="event", cascade="all, delete-orphan")
