"""
Live Q&A Organizer Console - FastAPI application
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from qa_console.core.config import settings
from qa_console.core.db import engine, Base
from qa_console.core.errors import ModerationError
from qa_console.api import routes_dashboard, routes_public, ws
from qa_console.api.routes_backend import create_backend_app
from qa_console.services.backend_client import BackendClient
from qa_console.services.event_directory import EventDirectoryClient
from qa_console.services.moderation import ModerationController
from qa_console.services.query_cache import QueryCache
from qa_console.services.question_queue import QuestionQueueClient
from qa_console.utils.responses import moderation_error_response

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

backend_app = create_backend_app() if settings.SERVE_BACKEND else None

def build_backend_client() -> BackendClient:
    """Talk to the in-process backend directly when this app serves it"""
    if backend_app is not None:
        return BackendClient(
            base_url="http://backend",
            transport=httpx.ASGITransport(app=backend_app)
        )
    return BackendClient()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if backend_app is not None:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")

    backend = build_backend_client()
    cache = QueryCache(stale_time=settings.QUESTION_POLL_INTERVAL)
    controller = ModerationController(
        EventDirectoryClient(backend, cache),
        QuestionQueueClient(backend, cache)
    )
    controller.subscribe(ws.websocket_manager.relay_snapshot)
    controller.start()
    app.state.controller = controller
    logger.info(f"Polling backend at {backend.base_url}")
    yield
    await controller.close()
    await backend.close()
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Live Q&A Organizer Console",
    description="Event directory and question moderation for live Q&A sessions",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ModerationError)
async def moderation_error_handler(request: Request, exc: ModerationError):
    return moderation_error_response(exc)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_dashboard.router, prefix="/dashboard", tags=["dashboard"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])

if backend_app is not None:
    app.mount("/api", backend_app)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
