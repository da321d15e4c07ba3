"""
HTTP transport to the events/questions backend
"""

import logging
from typing import Any, Optional

import httpx

from qa_console.core.config import settings
from qa_console.core.errors import ConflictError, NotFoundError, TransportError, ValidationError

logger = logging.getLogger(__name__)


class BackendClient:
    """
    Thin async wrapper around the backend REST surface.
    Translates transport failures and error statuses into ModerationError subclasses.
    No retries: the polling loops are the recovery path.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.BACKEND_URL).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.REQUEST_TIMEOUT,
            transport=transport,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, payload: dict[str, Any]) -> Any:
        return await self._request("POST", path, json=payload)

    async def put(self, path: str, payload: dict[str, Any]) -> Any:
        return await self._request("PUT", path, json=payload)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"Backend unreachable: {e}") from e

        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise TransportError(f"Invalid JSON from {method} {path}", status=response.status_code) from e

        message = self._error_message(response)
        status = response.status_code
        if status == 404:
            raise NotFoundError(message or "Resource not found")
        if status == 409:
            raise ConflictError(message or "Conflict")
        if status in (400, 422):
            raise ValidationError(message or "Invalid request")
        raise TransportError(message or f"Backend returned {status}", status=status)

    @staticmethod
    def _error_message(response: httpx.Response) -> Optional[str]:
        """Extract the `error` field of the backend's error payload, if any"""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            error = body.get("error") or body.get("detail")
            if isinstance(error, str):
                return error
        return None
