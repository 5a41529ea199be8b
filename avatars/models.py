"""Pydantic models for avatar generation."""
from typing import Optional
from pydantic import BaseModel, Field

from common.models import ImageInput


class GenerateAvatarRequest(ImageInput):
    """Request model for avatar generation."""
    style: Optional[str] = Field(None, description="Optional creative style label chosen by the user")


class GenerateAvatarResponse(BaseModel):
    """Response model for avatar generation."""
    avatar: str = Field(..., description="Base64-encoded JPEG avatar image")
