"""
Tests for the organizer dashboard HTTP API
"""

import httpx
import pytest

import main
from qa_console.services.moderation import ModerationController

@pytest.fixture
async def dashboard(directory, queue, town_hall):
    """Dashboard app driving a controller wired to the reference backend"""
    controller = ModerationController(directory, queue, event_interval=60.0, question_interval=60.0)
    await controller.refresh_events()
    main.app.state.controller = controller

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=main.app), base_url="http://console") as client:
        yield client

    await controller.close()
    await directory.backend.close()

async def test_health(dashboard):
    response = await dashboard.get("/health")

    assert response.json() == {"status": "ok"}

async def test_events_include_join_links(dashboard):
    response = await dashboard.get("/dashboard/events")

    assert response.status_code == 200
    [event] = response.json()["data"]
    assert event["code"] == "TOWN1"
    assert event["join_url"].endswith("/listen?code=TOWN1")
    assert "data=" in event["qr_url"]

async def test_create_event(dashboard):
    response = await dashboard.post("/dashboard/events", json={
        "code": "ABC123",
        "title": "Town Hall",
        "organizer_name": "Jo",
        "organizer_email": "jo@x.com",
        "max_participants": "lots",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Event created successfully"
    assert body["data"]["max_participants"] == 100

async def test_create_event_validation_errors(dashboard):
    response = await dashboard.post("/dashboard/events", json={"code": "ABC123"})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "validation_error"
    assert body["details"]["title"] == "This field is required"

async def test_create_event_conflict(dashboard):
    response = await dashboard.post("/dashboard/events", json={
        "code": "TOWN1",
        "title": "Again",
        "organizer_name": "Jo",
        "organizer_email": "jo@x.com",
    })

    assert response.status_code == 409
    assert response.json()["message"] == "Event code already exists"

async def test_questions_without_selection(dashboard):
    response = await dashboard.get("/dashboard/questions")

    body = response.json()
    assert body["message"] == "Select an event to manage questions"
    assert body["data"]["questions"] == []

async def test_select_and_moderate(dashboard, town_hall):
    response = await dashboard.put("/dashboard/selection", json={"event_id": town_hall.id})
    assert response.status_code == 200

    await main.app.state.controller.refresh_questions()
    response = await dashboard.get("/dashboard/questions")
    questions = response.json()["data"]["questions"]
    assert [q["id"] for q in questions] == [1, 2, 3]
    assert questions[1]["actions"] == {"approve": False, "decline": True, "answer": True}

    response = await dashboard.post("/dashboard/questions/1/approve")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "approved"

    response = await dashboard.post("/dashboard/questions/2/approve")
    assert response.status_code == 409
    assert response.json()["error_code"] == "noop_transition"

async def test_unknown_selection_is_not_found(dashboard):
    response = await dashboard.put("/dashboard/selection", json={"event_id": 999})

    assert response.status_code == 404

async def test_clear_selection(dashboard, town_hall):
    await dashboard.put("/dashboard/selection", json={"event_id": town_hall.id})
    response = await dashboard.delete("/dashboard/selection")

    assert response.status_code == 200
    assert main.app.state.controller.selected_event is None

async def test_join_link_endpoint(dashboard):
    response = await dashboard.get("/events/ABC123/join-link", params={"origin": "https://qa.example.com"})

    assert response.json()["data"]["join_url"] == "https://qa.example.com/listen?code=ABC123"

async def test_qr_png_endpoint(dashboard):
    response = await dashboard.get("/events/ABC123/qr.png")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")
