"""
Event-related Pydantic schemas
"""

import re
from datetime import datetime
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

DEFAULT_MAX_PARTICIPANTS = 100

class Language(str, Enum):
    EN = "en"
    PL = "pl"

class EventStatus(str, Enum):
    """Lifecycle owned by the backend; the console only observes it"""
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"

class EventCreate(BaseModel):
    """Schema for creating an event"""
    model_config = ConfigDict(str_strip_whitespace=True)

    code: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1)
    description: Optional[str] = None
    organizer_name: str = Field(min_length=1)
    organizer_email: EmailStr
    language: Language = Language.EN
    max_participants: int = DEFAULT_MAX_PARTICIPANTS

    @field_validator("max_participants", mode="before")
    @classmethod
    def coerce_max_participants(cls, value):
        """Read a leading integer; anything missing, non-numeric or non-positive becomes the default"""
        if value is None or isinstance(value, bool):
            return DEFAULT_MAX_PARTICIPANTS
        match = re.match(r"\s*([+-]?\d+)", str(value))
        number = int(match.group(1)) if match else 0
        return number if number > 0 else DEFAULT_MAX_PARTICIPANTS

class EventOut(BaseModel):
    """Event as served by the backend"""
    model_config = ConfigDict(from_attributes=True)

    id: Union[int, str]
    code: str
    title: str
    description: Optional[str] = None
    organizer_name: str
    organizer_email: str
    language: str = Language.EN.value
    max_participants: int = DEFAULT_MAX_PARTICIPANTS
    status: EventStatus = EventStatus.ACTIVE
    created_at: Optional[datetime] = None

class SelectionRequest(BaseModel):
    """Dashboard request selecting the event to moderate"""
    event_id: Union[int, str]
