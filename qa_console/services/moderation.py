"""
Moderation controller: selected-event session state, polling scope and
organizer actions
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from qa_console.core.config import settings
from qa_console.core.errors import NotFoundError, SessionClosedError, ValidationError
from qa_console.schemas.event import EventCreate, EventOut
from qa_console.schemas.question import QuestionOut, QuestionStatus
from qa_console.services.event_directory import EventDirectoryClient
from qa_console.services.poller import Poller
from qa_console.services.qr_service import derive_join_link
from qa_console.services.question_queue import QuestionQueueClient, allowed_statuses

logger = logging.getLogger(__name__)

# Organizer action -> status it requests
ACTIONS: Dict[str, QuestionStatus] = {
    "approve": QuestionStatus.APPROVED,
    "decline": QuestionStatus.DECLINED,
    "answer": QuestionStatus.ANSWERED,
}

Listener = Callable[[str, Dict[str, Any]], Awaitable[None]]


@dataclass(frozen=True)
class SessionContext:
    """Which event is being moderated. Replaced, never mutated, on every selection change."""
    selected_event: Optional[EventOut] = None
    generation: int = 0

    @property
    def event_id(self):
        return self.selected_event.id if self.selected_event is not None else None


class ModerationController:
    """Owns the two polling loops and routes organizer intent to the clients"""

    def __init__(
        self,
        directory: EventDirectoryClient,
        queue: QuestionQueueClient,
        event_interval: Optional[float] = None,
        question_interval: Optional[float] = None,
    ):
        self.directory = directory
        self.queue = queue
        self.event_interval = event_interval or settings.EVENT_POLL_INTERVAL
        self.question_interval = question_interval or settings.QUESTION_POLL_INTERVAL

        self.context = SessionContext()
        self._questions: List[QuestionOut] = []
        self._event_poller = Poller("events", self.event_interval, self.refresh_events)
        self._question_poller: Optional[Poller] = None
        self._listeners: List[Listener] = []
        self._closed = False

    # -------- lifecycle --------

    def start(self):
        self._ensure_open()
        self._event_poller.start()

    async def close(self):
        """Tear the session down; results still in flight are dropped"""
        if self._closed:
            return
        self._closed = True
        await self._event_poller.stop()
        if self._question_poller is not None:
            await self._question_poller.stop()
            self._question_poller = None
        self.directory.cache.cancel_all()
        if self.queue.cache is not self.directory.cache:
            self.queue.cache.cancel_all()
        self._listeners.clear()
        logger.info("Moderation session closed")

    def _ensure_open(self):
        if self._closed:
            raise SessionClosedError("Moderation session is closed")

    # -------- view --------

    @property
    def selected_event(self) -> Optional[EventOut]:
        return self.context.selected_event

    @property
    def events(self) -> List[EventOut]:
        return self.directory.cached_events()

    @property
    def questions(self) -> List[QuestionOut]:
        return list(self._questions)

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def snapshot(self) -> Dict[str, Any]:
        selected = self.selected_event
        return {
            "events": [self.describe_event(event) for event in self.events],
            "selected_event": self.describe_event(selected) if selected is not None else None,
            "questions": [self.describe_question(question) for question in self._questions],
        }

    @staticmethod
    def describe_event(event: EventOut) -> Dict[str, Any]:
        link = derive_join_link(event.code)
        data = event.model_dump(mode="json")
        data["join_url"] = link.join_url
        data["qr_url"] = link.qr_url
        return data

    @staticmethod
    def describe_question(question: QuestionOut) -> Dict[str, Any]:
        data = question.model_dump(mode="json")
        allowed = set(allowed_statuses(question))
        data["actions"] = {action: status in allowed for action, status in ACTIONS.items()}
        return data

    async def _notify(self, topic: str):
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                await listener(topic, snapshot)
            except Exception as e:
                logger.error(f"Listener failed on {topic} update: {e}")

    # -------- polling --------

    async def refresh_events(self) -> List[EventOut]:
        events = await self.directory.list_events(force=True)
        if self._closed:
            return events
        await self._notify("events")
        return events

    async def refresh_questions(self) -> Optional[List[QuestionOut]]:
        """Fetch the selected event's questions; None if the selection changed meanwhile"""
        context = self.context
        if context.event_id is None:
            self._questions = []
            return []

        questions = await self.queue.list_questions(context.event_id, force=True)

        if self._closed or self.context.generation != context.generation:
            logger.debug(f"Discarding questions for superseded selection {context.event_id}")
            return None

        self._questions = list(questions)
        await self._notify("questions")
        return self.questions

    async def select_event(self, event: Optional[EventOut]):
        """Move the question polling scope to `event` (or stop it for None)"""
        self._ensure_open()
        previous = self._question_poller
        self._question_poller = None
        self.context = SessionContext(selected_event=event, generation=self.context.generation + 1)
        self._questions = []

        if previous is not None:
            await previous.stop()

        if event is not None:
            logger.info(f"Moderating event {event.code} (id={event.id})")
            self._question_poller = Poller(
                f"questions:{event.id}", self.question_interval, self.refresh_questions
            )
            self._question_poller.start()
        await self._notify("selection")

    async def select_event_by_id(self, event_id) -> EventOut:
        for event in self.events:
            if str(event.id) == str(event_id):
                await self.select_event(event)
                return event
        raise NotFoundError(f"Event {event_id} not found")

    # -------- organizer actions --------

    async def create_event(self, draft: Union[EventCreate, Mapping[str, Any]]) -> EventOut:
        self._ensure_open()
        event = await self.directory.create_event(draft)
        self._event_poller.trigger()
        return event

    async def set_status(self, question: Union[QuestionOut, Any], status: Union[QuestionStatus, str]) -> QuestionOut:
        """Apply a decision. On failure the error propagates and the displayed list is untouched."""
        self._ensure_open()
        updated = await self.queue.set_status(question, status)
        if self._question_poller is not None:
            self._question_poller.trigger()
        return updated

    async def apply_action(self, question: Union[QuestionOut, Any], action: str) -> QuestionOut:
        if action not in ACTIONS:
            raise ValidationError(
                f"Unknown action '{action}'",
                fields={"action": f"Must be one of: {', '.join(ACTIONS)}"},
            )
        return await self.set_status(question, ACTIONS[action])

    async def approve(self, question) -> QuestionOut:
        return await self.set_status(question, QuestionStatus.APPROVED)

    async def decline(self, question) -> QuestionOut:
        return await self.set_status(question, QuestionStatus.DECLINED)

    async def mark_answered(self, question) -> QuestionOut:
        return await self.set_status(question, QuestionStatus.ANSWERED)
