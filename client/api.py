"""Async HTTP client for the avatar and style suggestion endpoints."""
from typing import List, Optional

import httpx

from config import Config
from utils.logger import get_logger

logger = get_logger("client.api")

MALFORMED_RESPONSE = "Malformed response from server"


class ApiError(Exception):
    """Non-success response from the BioFace API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AvatarApiClient:
    """
    Thin wrapper over ``httpx.AsyncClient``.

    No timeout is applied: a hung provider call hangs the request.
    Pass ``transport`` to route requests to an in-process app or a mock.
    """

    def __init__(
        self,
        base_url: str = Config.CLIENT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=None)

    async def __aenter__(self) -> "AvatarApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _raise_for_status(response: httpx.Response, prefix: str) -> None:
        if response.is_success:
            return
        error_text = response.text
        raise ApiError(f"{prefix}: {error_text or response.reason_phrase}", status_code=response.status_code)

    async def generate_avatar(self, base64_data: str, mime_type: str, style: Optional[str]) -> str:
        """
        Generate an avatar from an image.

        Args:
            base64_data: Base64-encoded image data, without the data URL prefix
            mime_type: Image MIME type (e.g., 'image/png')
            style: Optional creative style for the avatar

        Returns:
            Base64-encoded JPEG avatar

        Raises:
            ApiError: The server answered with a non-2xx status or a body
                without a usable ``avatar`` string
        """
        response = await self._client.post(
            "/api/generate-avatar",
            json={"image": base64_data, "mimeType": mime_type, "style": style},
        )
        self._raise_for_status(response, "Failed to generate avatar")
        avatar = self._json_field(response, "avatar")
        if not isinstance(avatar, str) or not avatar:
            logger.warning(f"Avatar response without an avatar string: {type(avatar).__name__}")
            raise ApiError(f"Failed to generate avatar: {MALFORMED_RESPONSE}", status_code=response.status_code)
        return avatar

    async def get_suggestions(self, base64_data: str, mime_type: str) -> List[str]:
        """Fetch creative style suggestions for an image."""
        response = await self._client.post(
            "/api/suggest-styles",
            json={"image": base64_data, "mimeType": mime_type},
        )
        self._raise_for_status(response, "Failed to get suggestions")
        suggestions = self._json_field(response, "suggestions")
        if suggestions is None:
            return []
        if not isinstance(suggestions, list):
            logger.warning(f"Suggestion response is not a list: {type(suggestions).__name__}")
            raise ApiError(f"Failed to get suggestions: {MALFORMED_RESPONSE}", status_code=response.status_code)
        return [item for item in suggestions if isinstance(item, str)]

    @staticmethod
    def _json_field(response: httpx.Response, name: str):
        """Read one field of a JSON object body; None when the body is not an object."""
        body = response.json()
        if not isinstance(body, dict):
            return None
        return body.get(name)
