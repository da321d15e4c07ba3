"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .question import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "BackendError",
    "Language",
    "EventStatus",
    "EventCreate",
    "EventOut",
    "SelectionRequest",
    "QuestionStatus",
    "QuestionOut",
    "StatusUpdate",
]
