"""Avatar generation module."""
from avatars.models import GenerateAvatarRequest, GenerateAvatarResponse
from avatars.services import (
    PipelineStage,
    PipelineStageError,
    NoPersonDetectedError,
    build_avatar_prompt,
    generate_avatar
)

__all__ = [
    "GenerateAvatarRequest",
    "GenerateAvatarResponse",
    "PipelineStage",
    "PipelineStageError",
    "NoPersonDetectedError",
    "build_avatar_prompt",
    "generate_avatar"
]
