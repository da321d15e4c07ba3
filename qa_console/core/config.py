"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Backend the console polls and mutates
    BACKEND_URL: str = os.getenv("BACKEND_URL", "http://localhost:8000/api")
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "10"))

    # Reference backend served by this process
    SERVE_BACKEND: bool = os.getenv("SERVE_BACKEND", "true").lower() in ("1", "true", "yes")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./qa_console.db")

    # Join links
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    QR_SERVICE_URL: str = os.getenv("QR_SERVICE_URL", "https://api.qrserver.com/v1/create-qr-code/")
    QR_SIZE: int = 200

    # Polling (seconds)
    EVENT_POLL_INTERVAL: float = 5.0
    QUESTION_POLL_INTERVAL: float = 3.0

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"

settings = Settings()
