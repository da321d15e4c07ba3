"""
Error taxonomy shared by the backend clients, the moderation controller
and the dashboard API
"""

from typing import Dict, Optional


class ModerationError(Exception):
    """Base class for every failure the console reports to its caller"""

    status_code = 500
    error_code = "moderation_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(ModerationError):
    """Backend unreachable or answered with an unexpected status"""

    status_code = 502
    error_code = "transport_error"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ValidationError(ModerationError):
    """Request rejected before it reached the backend (or by the backend as malformed)"""

    status_code = 422
    error_code = "validation_error"

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}


class NoOpTransitionError(ValidationError):
    """Question already has the requested status"""

    status_code = 409
    error_code = "noop_transition"


class ConflictError(ModerationError):
    """Event code already taken; message is the backend's, verbatim"""

    status_code = 409
    error_code = "conflict"


class NotFoundError(ModerationError):
    status_code = 404
    error_code = "not_found"


class SessionClosedError(ModerationError):
    status_code = 503
    error_code = "session_closed"
