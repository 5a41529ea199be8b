"""Client-side session controller and API client."""
from client.api import ApiError, AvatarApiClient
from client.controller import AvatarSessionController, friendly_error_message
from client.models import SessionState, UploadedImage

__all__ = [
    "ApiError",
    "AvatarApiClient",
    "AvatarSessionController",
    "friendly_error_message",
    "SessionState",
    "UploadedImage"
]
