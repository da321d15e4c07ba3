"""
Database models package
"""

from .event import Event
from .question import Question

__all__ = ["Event", "Question"]
