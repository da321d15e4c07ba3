"""
Question queue: polled per-event question list and moderation transitions
"""

import logging
from typing import Hashable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from qa_console.core.errors import ModerationError, NoOpTransitionError, NotFoundError, TransportError, ValidationError
from qa_console.schemas.question import QuestionOut, QuestionStatus
from qa_console.services.backend_client import BackendClient
from qa_console.services.query_cache import QueryCache

logger = logging.getLogger(__name__)

QUESTIONS_PREFIX = "questions"


def questions_key(event_id: Hashable) -> tuple:
    return (QUESTIONS_PREFIX, str(event_id))


def allowed_statuses(question: QuestionOut) -> List[QuestionStatus]:
    """Every status except the current one; moderation imposes no ordering"""
    return [status for status in QuestionStatus if status != question.status]


def parse_status(value: Union[QuestionStatus, str]) -> QuestionStatus:
    try:
        return QuestionStatus(value)
    except ValueError:
        choices = ", ".join(status.value for status in QuestionStatus)
        raise ValidationError(
            f"Unknown question status '{value}'",
            fields={"status": f"Must be one of: {choices}"},
        )


class QuestionQueueClient:
    """Reads an event's questions and applies moderation decisions"""

    def __init__(self, backend: BackendClient, cache: QueryCache):
        self.backend = backend
        self.cache = cache

    async def list_questions(self, event_id: Optional[Hashable], force: bool = False) -> List[QuestionOut]:
        """Questions of one event; no event selected means no questions and no request"""
        if event_id is None:
            return []

        async def fetch_questions():
            return await self._fetch_questions(event_id)

        return await self.cache.fetch(questions_key(event_id), fetch_questions, force=force)

    def cached_questions(self, event_id: Optional[Hashable]) -> List[QuestionOut]:
        if event_id is None:
            return []
        return self.cache.peek(questions_key(event_id), [])

    async def _fetch_questions(self, event_id: Hashable) -> List[QuestionOut]:
        try:
            payload = await self.backend.get("/questions", params={"eventId": event_id})
            return [QuestionOut.model_validate(item) for item in payload]
        except ModerationError as e:
            logger.warning(f"Questions for event {event_id} unavailable, showing none: {e.message}")
            return []
        except (PydanticValidationError, TypeError) as e:
            logger.warning(f"Malformed question list for event {event_id}, showing none: {e}")
            return []

    def find_cached(self, question_id: Hashable) -> Optional[QuestionOut]:
        """Look a question up in every cached question list"""
        for key in self.cache.keys(QUESTIONS_PREFIX):
            for question in self.cache.peek(key, []) or []:
                if str(question.id) == str(question_id):
                    return question
        return None

    async def set_status(
        self,
        question: Union[QuestionOut, Hashable],
        new_status: Union[QuestionStatus, str],
    ) -> QuestionOut:
        """Apply a moderation decision.

        A transition to the status the question already has is rejected with
        NoOpTransitionError before any request is made. Every other transition
        is allowed. Raises NotFoundError if the question is gone, TransportError
        on any other backend failure.
        """
        status = parse_status(new_status)
        current = question if isinstance(question, QuestionOut) else self.find_cached(question)
        question_id = current.id if current is not None else question

        if current is not None and current.status == status:
            raise NoOpTransitionError(
                f"Question {question_id} is already {status.value}",
                fields={"status": f"Already {status.value}"},
            )

        try:
            payload = await self.backend.put(f"/questions/{question_id}", {"status": status.value})
            updated = QuestionOut.model_validate(payload)
        except (NotFoundError, TransportError):
            raise
        except ModerationError as e:
            raise TransportError(f"Failed to update question: {e.message}", status=e.status_code) from e
        except PydanticValidationError as e:
            raise TransportError(f"Failed to update question: malformed response ({e.error_count()} errors)") from e

        self.cache.invalidate(questions_key(updated.event_id))
        logger.info(f"Question {updated.id} moved to {updated.status.value}")
        return updated
