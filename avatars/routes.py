"""Avatar generation API route."""
import base64
import binascii

from fastapi import APIRouter, Depends, HTTPException

from avatars.models import GenerateAvatarRequest, GenerateAvatarResponse
from avatars.services import generate_avatar, PipelineStageError, NoPersonDetectedError
from common.error_messages import ErrorCode, get_error_response
from providers import ModelProvider, get_provider
from utils.logger import get_logger

logger = get_logger("avatars.routes")
router = APIRouter(prefix="/api", tags=["avatars"])


@router.post("/generate-avatar", response_model=GenerateAvatarResponse)
def generate_avatar_endpoint(
    req: GenerateAvatarRequest,
    provider: ModelProvider = Depends(get_provider)
):
    """
    Generate a stylized avatar from an uploaded portrait.

    Accepts:
      { image: "<base64>", mimeType: "image/png", style?: "Forest Mage" }

    Returns:
      { avatar: "<base64 JPEG>" }
    """
    if not req.is_complete:
        message, status_code = get_error_response(ErrorCode.MISSING_FIELD)
        raise HTTPException(status_code=status_code, detail=message)

    try:
        image_bytes = req.image_bytes()
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Rejected undecodable image payload: {e}")
        message, status_code = get_error_response(ErrorCode.INVALID_IMAGE_DATA)
        raise HTTPException(status_code=status_code, detail=message)

    logger.info(f"Starting avatar generation ({req.mime_type}, {len(image_bytes)} bytes, style: {req.style or 'default'})")

    try:
        avatar = generate_avatar(provider, image_bytes, req.mime_type, req.style)
    except NoPersonDetectedError as e:
        logger.info("Avatar generation rejected: no person detected")
        message, status_code = get_error_response(e.error_code)
        raise HTTPException(status_code=status_code, detail=message)
    except PipelineStageError as e:
        logger.error(f"Avatar generation failed at stage '{e.stage.value}'")
        message, status_code = get_error_response(e.error_code)
        raise HTTPException(status_code=status_code, detail=message)

    return GenerateAvatarResponse(avatar=base64.b64encode(avatar).decode("utf-8"))
