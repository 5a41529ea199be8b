"""Style suggestion API route."""
import binascii

from fastapi import APIRouter, Depends, HTTPException

from common.error_messages import ErrorCode, get_error_response
from providers import ModelProvider, get_provider
from styles.models import SuggestStylesRequest, SuggestStylesResponse
from styles.services import suggest_styles
from utils.logger import get_logger

logger = get_logger("styles.routes")
router = APIRouter(prefix="/api", tags=["styles"])


@router.post("/suggest-styles", response_model=SuggestStylesResponse)
def suggest_styles_endpoint(
    req: SuggestStylesRequest,
    provider: ModelProvider = Depends(get_provider)
):
    """Suggest creative avatar styles for an uploaded portrait. Always 200 once the body is valid."""
    if not req.is_complete:
        message, status_code = get_error_response(ErrorCode.MISSING_SUGGESTION_FIELD)
        raise HTTPException(status_code=status_code, detail=message)

    try:
        image_bytes = req.image_bytes()
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Rejected undecodable image payload: {e}")
        message, status_code = get_error_response(ErrorCode.INVALID_IMAGE_DATA)
        raise HTTPException(status_code=status_code, detail=message)

    return SuggestStylesResponse(suggestions=suggest_styles(provider, image_bytes, req.mime_type))
