"""Pydantic models for style suggestions."""
from typing import List
from pydantic import BaseModel, Field

from common.models import ImageInput


class SuggestStylesRequest(ImageInput):
    """Request model for style suggestions."""


class SuggestStylesResponse(BaseModel):
    """Response model for style suggestions."""
    suggestions: List[str] = Field(default_factory=list, description="Zero to four creative style labels")
