"""Shared request models for the image-based endpoints."""
import base64
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ImageInput(BaseModel):
    """Uploaded image in the shape the browser client sends it."""
    model_config = ConfigDict(populate_by_name=True)

    image: Optional[str] = Field(None, description="Base64-encoded image data, without a data URL prefix")
    mime_type: Optional[str] = Field(None, alias="mimeType", description="Image MIME type (e.g., image/png, image/jpeg)")

    @property
    def is_complete(self) -> bool:
        """True when both the image data and its MIME type are present."""
        return bool(self.image) and bool(self.mime_type)

    def image_bytes(self) -> bytes:
        """Decode the base64 payload. Raises ValueError on malformed data."""
        return base64.b64decode(self.image or "", validate=True)
