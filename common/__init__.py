"""Shared models and error messages."""
from common.error_messages import ErrorCode, get_error_message, get_error_response
from common.models import ImageInput

__all__ = [
    "ErrorCode",
    "get_error_message",
    "get_error_response",
    "ImageInput"
]
