"""
Organizer dashboard API - drives the moderation controller
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request

from qa_console.core.errors import NotFoundError
from qa_console.schemas.event import SelectionRequest
from qa_console.services.moderation import ModerationController
from qa_console.utils.responses import success_response

router = APIRouter()

def get_controller(request: Request) -> ModerationController:
    """Controller created by the application lifespan"""
    return request.app.state.controller

@router.get("/events")
async def list_events(controller: ModerationController = Depends(get_controller)):
    """Events as last polled, each with its join link"""
    events = [controller.describe_event(event) for event in controller.events]
    return success_response(
        message=f"{len(events)} events",
        data=events
    )

@router.post("/events", status_code=201)
async def create_event(
    draft: Dict[str, Any] = Body(...),
    controller: ModerationController = Depends(get_controller)
):
    """Create an event from the organizer form"""
    event = await controller.create_event(draft)
    return success_response(
        message="Event created successfully",
        data=controller.describe_event(event),
        status_code=201
    )

@router.put("/selection")
async def select_event(
    selection: SelectionRequest,
    controller: ModerationController = Depends(get_controller)
):
    """Start moderating an event"""
    event = await controller.select_event_by_id(selection.event_id)
    return success_response(
        message=f"Moderating {event.title}",
        data=controller.describe_event(event)
    )

@router.delete("/selection")
async def clear_selection(controller: ModerationController = Depends(get_controller)):
    """Stop moderating"""
    await controller.select_event(None)
    return success_response(message="No event selected")

@router.get("/questions")
async def list_questions(controller: ModerationController = Depends(get_controller)):
    """Questions of the selected event with the actions each one still allows"""
    snapshot = controller.snapshot()
    return success_response(
        message="Select an event to manage questions" if snapshot["selected_event"] is None
        else f"{len(snapshot['questions'])} questions",
        data={
            "selected_event": snapshot["selected_event"],
            "questions": snapshot["questions"],
        }
    )

@router.post("/questions/{question_id}/{action}")
async def moderate_question(
    question_id: str,
    action: str,
    controller: ModerationController = Depends(get_controller)
):
    """Approve, decline or mark a question answered"""
    question = next((q for q in controller.questions if str(q.id) == question_id), None)
    if question is None:
        raise NotFoundError(f"Question {question_id} is not in the selected event")

    updated = await controller.apply_action(question, action)
    return success_response(
        message="Question updated!",
        data=controller.describe_question(updated)
    )
