"""Client session models."""
import base64
from dataclasses import dataclass
from enum import Enum


class SessionState(str, Enum):
    """States of the single-session client controller."""
    IDLE = "idle"
    SUGGESTIONS_PENDING = "suggestions_pending"
    READY = "ready"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadedImage:
    """The uploaded portrait, held as a self-describing data URL."""
    data_url: str
    mime_type: str

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "UploadedImage":
        encoded = base64.b64encode(data).decode("utf-8")
        return cls(data_url=f"data:{mime_type};base64,{encoded}", mime_type=mime_type)

    @property
    def base64_data(self) -> str:
        """The payload without the ``data:<mime>;base64,`` prefix."""
        return self.data_url.split(",", 1)[1]
