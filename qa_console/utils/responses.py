"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi.responses import JSONResponse

from qa_console.core.errors import ModerationError, ValidationError
from qa_console.schemas.common import StandardResponse, ErrorResponse, BackendError

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=status_code
    )

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=status_code
    )

def moderation_error_response(exc: ModerationError) -> JSONResponse:
    """Map a ModerationError onto the error envelope, keeping field errors"""
    details = exc.fields if isinstance(exc, ValidationError) and exc.fields else None
    return error_response(
        message=exc.message,
        error_code=exc.error_code,
        details=details,
        status_code=exc.status_code
    )

def backend_error(message: str, status_code: int = 400) -> JSONResponse:
    """Error payload in the backend's `{error}` shape"""
    return JSONResponse(
        content=BackendError(error=message).model_dump(),
        status_code=status_code
    )
