"""
WebSocket relay pushing dashboard snapshots to organizer screens
"""

import json
import logging
from typing import Any, Dict, List
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages dashboard WebSocket connections"""

    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info(f"Dashboard connected. Total connections: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket):
        try:
            self.active_connections.remove(websocket)
            logger.info(f"Dashboard disconnected. Remaining connections: {len(self.active_connections)}")
        except ValueError:
            # WebSocket was not in the list
            pass

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast(self, message: dict):
        """Send a message to every connected dashboard"""
        # Copy: disconnects mutate the list
        connections = self.active_connections.copy()

        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(json.dumps(message))
            except Exception as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket)

    async def relay_snapshot(self, topic: str, snapshot: Dict[str, Any]):
        """Moderation controller listener: forward each applied update"""
        if not self.active_connections:
            return
        await self.broadcast({"type": topic, "snapshot": snapshot})

    def get_connection_count(self) -> int:
        return len(self.active_connections)

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

# Router for WebSocket endpoints
router = APIRouter()

@router.websocket("/dashboard")
async def websocket_endpoint(websocket: WebSocket):
    """Live dashboard feed: current snapshot on connect, then every update"""
    await websocket_manager.connect(websocket)

    try:
        controller = websocket.app.state.controller
        await websocket_manager.send_personal_message(
            {"type": "snapshot", "snapshot": controller.snapshot()},
            websocket
        )

        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            if isinstance(client_message, dict) and client_message.get("type") == "ping":
                await websocket_manager.send_personal_message(
                    {"type": "pong", "timestamp": client_message.get("timestamp")},
                    websocket
                )

    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket)

@router.get("/stats")
async def websocket_stats():
    """Get WebSocket connection statistics (for debugging)"""
    return {"total_connections": websocket_manager.get_connection_count()}
