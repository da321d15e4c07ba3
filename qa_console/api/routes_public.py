"""
Public API routes - health and join links
"""

from typing import Optional

from fastapi import APIRouter
from fastapi.responses import Response

from qa_console.services.qr_service import QRService, derive_join_link
from qa_console.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/events/{code}/join-link")
async def get_join_link(code: str, origin: Optional[str] = None):
    """Participant join URL and QR image request for an event code"""
    link = derive_join_link(code, origin)
    return success_response(
        message="Join link derived",
        data={"code": link.code, "join_url": link.join_url, "qr_url": link.qr_url}
    )

@router.get("/events/{code}/qr.png")
async def get_qr_code(code: str, origin: Optional[str] = None):
    """QR code image for an event's join URL, rendered locally"""
    qr_bytes = QRService.generate_event_qr(code, origin)

    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=qr_{code}.png"}
    )
