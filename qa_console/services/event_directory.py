"""
Event directory: polled event list and event creation
"""

import logging
from typing import Any, List, Mapping, Union

from pydantic import ValidationError as PydanticValidationError

from qa_console.core.errors import ModerationError, TransportError, ValidationError
from qa_console.schemas.event import EventCreate, EventOut
from qa_console.services.backend_client import BackendClient
from qa_console.services.query_cache import QueryCache

logger = logging.getLogger(__name__)

EVENTS_KEY = ("events",)

REQUIRED_MESSAGE = "This field is required"


def build_draft(data: Union[EventCreate, Mapping[str, Any]]) -> EventCreate:
    """Validate organizer input into an EventCreate, reporting problems per field"""
    if isinstance(data, EventCreate):
        return data
    try:
        return EventCreate.model_validate(dict(data))
    except PydanticValidationError as e:
        fields = {}
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "__root__"
            if error["type"] in ("missing", "string_too_short"):
                fields[field] = REQUIRED_MESSAGE
            else:
                fields.setdefault(field, error["msg"])
        raise ValidationError("Event draft is invalid", fields=fields) from e


class EventDirectoryClient:
    """Reads and creates events on the backend through a shared QueryCache"""

    def __init__(self, backend: BackendClient, cache: QueryCache):
        self.backend = backend
        self.cache = cache

    async def list_events(self, force: bool = False) -> List[EventOut]:
        """Current event set; an unreachable backend reads as no events"""
        return await self.cache.fetch(EVENTS_KEY, self._fetch_events, force=force)

    def cached_events(self) -> List[EventOut]:
        return self.cache.peek(EVENTS_KEY, [])

    async def _fetch_events(self) -> List[EventOut]:
        try:
            payload = await self.backend.get("/events")
            return [EventOut.model_validate(item) for item in payload]
        except ModerationError as e:
            logger.warning(f"Event list unavailable, showing none: {e.message}")
            return []
        except (PydanticValidationError, TypeError) as e:
            logger.warning(f"Malformed event list from backend, showing none: {e}")
            return []

    async def create_event(self, draft: Union[EventCreate, Mapping[str, Any]]) -> EventOut:
        """Submit a new event. Raises ValidationError before sending, ConflictError on a taken code."""
        event_data = build_draft(draft)

        payload = await self.backend.post("/events", event_data.model_dump(mode="json"))
        try:
            event = EventOut.model_validate(payload)
        except PydanticValidationError as e:
            raise TransportError(f"Failed to create event: malformed response ({e.error_count()} errors)") from e

        self.cache.invalidate(EVENTS_KEY)
        logger.info(f"Event {event.code} created (id={event.id})")
        return event
