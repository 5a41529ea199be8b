"""
Single-session controller driving upload, style suggestions, generation,
reset and download.

Every mutation happens on the event loop, either directly from a user
action or when an awaited API call settles. Single-flight is advisory:
``can_generate`` tells the UI when to disable the generate control, but
``generate()`` itself does not refuse a second concurrent call. Results
that settle after a reset or a newer upload are discarded.
"""
import asyncio
import base64
import mimetypes
from pathlib import Path
from typing import List, Optional, Union

from client.api import AvatarApiClient
from client.models import SessionState, UploadedImage
from config import Config
from utils.logger import get_logger

logger = get_logger("client.controller")

ACCEPTED_MIME_TYPES = ("image/png", "image/jpeg", "image/webp")
mimetypes.add_type("image/webp", ".webp")
NO_IMAGE_MESSAGE = "Please upload an image first."
DEFAULT_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


def friendly_error_message(error: Exception) -> str:
    """Show only the text after the last colon of a wrapped error message."""
    message = str(error).split(":")[-1].strip()
    return message or DEFAULT_ERROR_MESSAGE


class AvatarSessionController:
    """Client-side state machine for one avatar session."""

    def __init__(self, api: AvatarApiClient, download_filename: str = Config.DOWNLOAD_FILENAME):
        self.api = api
        self.download_filename = download_filename
        self.state = SessionState.IDLE
        self.uploaded_image: Optional[UploadedImage] = None
        self.file_handle: Optional[str] = None
        self.avatar: Optional[bytes] = None
        self.error: Optional[str] = None
        self.suggestions: List[str] = []
        self.selected_style: Optional[str] = None
        self.is_generating = False
        self.is_fetching_suggestions = False
        # Bumped on every reset; async results tagged with an older value are dropped
        self._session_id = 0

    @property
    def can_generate(self) -> bool:
        return self.uploaded_image is not None and not self.is_generating and not self.is_fetching_suggestions

    @property
    def has_generated(self) -> bool:
        return self.avatar is not None

    def reset(self) -> None:
        """Return to Idle, discarding image, file handle, avatar, suggestions, error and style."""
        self._session_id += 1
        self.uploaded_image = None
        self.file_handle = None
        self.avatar = None
        self.error = None
        self.suggestions = []
        self.selected_style = None
        self.is_generating = False
        self.is_fetching_suggestions = False
        self.state = SessionState.IDLE

    def upload(self, data: bytes, mime_type: str, file_name: Optional[str] = None) -> "asyncio.Task[None]":
        """
        Replace the session with a new image and start fetching suggestions.

        Must be called from within a running event loop. Returns the
        suggestion task; awaiting it is optional.
        """
        self.reset()
        image = UploadedImage.from_bytes(data, mime_type)
        self.uploaded_image = image
        self.file_handle = file_name
        self.is_fetching_suggestions = True
        self.state = SessionState.SUGGESTIONS_PENDING
        logger.info(f"Uploaded {file_name or 'image'} ({mime_type}, {len(data)} bytes)")
        return asyncio.get_running_loop().create_task(self._fetch_suggestions(self._session_id, image))

    def upload_file(self, path: Union[str, Path]) -> "asyncio.Task[None]":
        """Upload a PNG, JPEG or WebP file from disk."""
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        if mime_type not in ACCEPTED_MIME_TYPES:
            raise ValueError(f"Unsupported image type for {path.name}: {mime_type or 'unknown'}")
        return self.upload(path.read_bytes(), mime_type, file_name=path.name)

    async def _fetch_suggestions(self, session_id: int, image: UploadedImage) -> None:
        try:
            suggestions = await self.api.get_suggestions(image.base64_data, image.mime_type)
        except Exception as e:
            logger.warning(f"Failed to fetch suggestions: {e}")
            suggestions = []
        finally:
            if session_id == self._session_id:
                self.is_fetching_suggestions = False

        if session_id != self._session_id:
            logger.debug("Discarding suggestions for a superseded upload")
            return

        self.suggestions = suggestions
        if self.state == SessionState.SUGGESTIONS_PENDING:
            self.state = SessionState.READY

    def select_style(self, style: Optional[str]) -> bool:
        """Select a creative style. Ignored when no image is uploaded."""
        if self.uploaded_image is None:
            logger.debug(f"Ignoring style selection without an image: {style}")
            return False
        self.selected_style = style
        return True

    async def generate(self) -> None:
        """Generate (or regenerate) an avatar from the current image and style."""
        if self.uploaded_image is None:
            self.error = NO_IMAGE_MESSAGE
            return

        session_id = self._session_id
        image = self.uploaded_image
        style = self.selected_style

        self.avatar = None
        self.error = None
        self.is_generating = True
        self.state = SessionState.GENERATING

        try:
            avatar_base64 = await self.api.generate_avatar(image.base64_data, image.mime_type, style)
            avatar = base64.b64decode(avatar_base64, validate=True)
        except Exception as e:
            status_code = getattr(e, "status_code", None)
            logger.error(f"Avatar generation failed (status {status_code}): {e}")
            if session_id == self._session_id:
                self.error = friendly_error_message(e)
                self.state = SessionState.FAILED
            return
        finally:
            if session_id == self._session_id:
                self.is_generating = False

        if session_id != self._session_id:
            logger.debug("Discarding avatar for a reset session")
            return

        self.avatar = avatar
        self.state = SessionState.DONE

    def download(self, directory: Union[str, Path] = ".") -> Optional[Path]:
        """Write the avatar to ``<directory>/biotar.jpeg``. No state change."""
        if self.avatar is None:
            return None
        target = Path(directory) / self.download_filename
        target.write_bytes(self.avatar)
        logger.info(f"Saved avatar to {target}")
        return target
