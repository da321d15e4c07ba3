"""
Question-related Pydantic schemas
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict

class QuestionStatus(str, Enum):
    """Moderation status; any status may follow any other"""
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    ANSWERED = "answered"

class QuestionOut(BaseModel):
    """Question as served by the backend"""
    model_config = ConfigDict(from_attributes=True)

    id: Union[int, str]
    event_id: Union[int, str]
    participant_name: str
    participant_email: Optional[str] = None
    question_text: str
    status: QuestionStatus = QuestionStatus.PENDING
    created_at: Optional[datetime] = None

class StatusUpdate(BaseModel):
    """Body of a moderation decision"""
    status: QuestionStatus
