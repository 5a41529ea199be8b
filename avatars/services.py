"""Avatar generation pipeline: describe, validate, synthesize."""
from enum import Enum
from typing import Callable, Optional, TypeVar

from common.error_messages import ErrorCode, get_error_message
from providers.base import ModelProvider
from utils.logger import get_logger

logger = get_logger("avatars.services")

T = TypeVar("T")

DESCRIPTION_INSTRUCTION = (
    "VERY briefly describe the subject in this image using only a few comma-separated keywords. "
    "Focus on key features. Example: 'woman, long brown hair, brown eyes, smiling, glasses' "
    "or 'tabby cat, sitting on a couch'."
)
BASE_PROMPT = "Photorealistic headshot, detailed, professional lighting, soft-focus background."
DEFAULT_STYLE_CLAUSE = "Style: Corporate linkedin, friendly but confident expression."


class PipelineStage(str, Enum):
    """Sequential stages of the avatar pipeline."""
    DESCRIBE = "describe"
    VALIDATE = "validate"
    SYNTHESIZE = "synthesize"


STAGE_ERROR_CODES = {
    PipelineStage.DESCRIBE: ErrorCode.DESCRIPTION_FAILED,
    PipelineStage.VALIDATE: ErrorCode.VALIDATION_FAILED,
    PipelineStage.SYNTHESIZE: ErrorCode.SYNTHESIS_FAILED,
}


class PipelineStageError(RuntimeError):
    """A pipeline stage failed. The message never carries the underlying cause."""

    def __init__(self, stage: PipelineStage):
        self.stage = stage
        self.error_code = STAGE_ERROR_CODES[stage]
        super().__init__(get_error_message(self.error_code))


class NoPersonDetectedError(Exception):
    """The validation gate rejected the image: the description is not a person."""

    def __init__(self):
        self.error_code = ErrorCode.NO_PERSON_DETECTED
        super().__init__(get_error_message(self.error_code))


def describe_subject(provider: ModelProvider, image: bytes, mime_type: str) -> str:
    """Stage 1: extract a short comma-separated keyword description."""
    text = provider.describe(image, mime_type, DESCRIPTION_INSTRUCTION)
    if not text or not text.strip():
        raise RuntimeError("Model failed to generate a description.")
    return text.strip()


def build_validation_prompt(description: str) -> str:
    return (
        'Does the following description refer to a person or human? '
        f'Answer with only "yes" or "no". Description: "{description}"'
    )


def is_person(provider: ModelProvider, description: str) -> bool:
    """Stage 2: anything other than an exact, case-insensitive "yes" is False."""
    answer = provider.classify(build_validation_prompt(description))
    return (answer or "").strip().lower() == "yes"


def build_avatar_prompt(description: str, style: Optional[str] = None) -> str:
    """Combine the base instruction, the style clause and the stage 1 description."""
    if style and style.strip():
        style_clause = f"Creative style: '{style.strip()}'."
    else:
        style_clause = DEFAULT_STYLE_CLAUSE
    return f"{BASE_PROMPT} {style_clause} Use these features from the original photo: {description}"


def synthesize_avatar(provider: ModelProvider, description: str, style: Optional[str] = None) -> bytes:
    """Stage 3: render one square JPEG avatar."""
    image_bytes = provider.synthesize_image(build_avatar_prompt(description, style))
    if not image_bytes:
        raise RuntimeError("Image generation failed to return image data.")
    return image_bytes


def _run_stage(stage: PipelineStage, func: Callable[..., T], *args) -> T:
    try:
        return func(*args)
    except Exception as e:
        logger.error(f"Avatar pipeline stage '{stage.value}' failed: {e}", exc_info=True)
        raise PipelineStageError(stage) from e


def generate_avatar(
    provider: ModelProvider,
    image: bytes,
    mime_type: str,
    style: Optional[str] = None
) -> bytes:
    """
    Run the full avatar pipeline.

    Args:
        provider: Model provider executing each stage
        image: Raw uploaded image bytes
        mime_type: Image MIME type
        style: Optional creative style label; the default persona is used when absent

    Returns:
        JPEG avatar bytes

    Raises:
        PipelineStageError: A stage failed; ``stage`` names which one
        NoPersonDetectedError: The description does not refer to a person
    """
    description = _run_stage(PipelineStage.DESCRIBE, describe_subject, provider, image, mime_type)
    logger.info(f"Generated description: {description}")

    valid = _run_stage(PipelineStage.VALIDATE, is_person, provider, description)
    logger.info(f"Validated description. Is person? {valid}")
    if not valid:
        raise NoPersonDetectedError()

    avatar = _run_stage(PipelineStage.SYNTHESIZE, synthesize_avatar, provider, description, style)
    logger.info(f"Generated avatar ({len(avatar)} bytes, style: {style or 'default'})")
    return avatar
