"""
Join link derivation and QR code generation service
"""

import io
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from urllib.parse import quote

import qrcode

from qa_console.core.config import settings
from qa_console.core.errors import ValidationError

# Same unreserved set as JavaScript's encodeURIComponent
URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class JoinLink:
    code: str
    join_url: str
    qr_url: str


@lru_cache(maxsize=256)
def derive_join_link(
    code: str,
    origin: Optional[str] = None,
    qr_service_url: Optional[str] = None,
    size: Optional[int] = None,
) -> JoinLink:
    """Build the participant join URL for an event code and the QR image request for it.

    Pure: no network, no state. The same inputs always give the same JoinLink.
    """
    if not code or not code.strip():
        raise ValidationError("Event code is required", fields={"code": "This field is required"})

    origin = (origin or settings.BASE_URL).rstrip("/")
    qr_service_url = qr_service_url or settings.QR_SERVICE_URL
    size = size or settings.QR_SIZE

    join_url = f"{origin}/listen?code={code}"
    qr_url = f"{qr_service_url}?size={size}x{size}&data={quote(join_url, safe=URI_COMPONENT_SAFE)}"
    return JoinLink(code=code, join_url=join_url, qr_url=qr_url)


class QRService:
    """Service for generating QR codes"""

    @staticmethod
    def generate_event_qr(code: str, origin: Optional[str] = None, format: str = 'PNG') -> bytes:
        """Render the join URL of an event as a QR image"""
        url = derive_join_link(code, origin).join_url

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(url)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)

        return buffer.getvalue()
