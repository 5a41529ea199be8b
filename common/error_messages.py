"""
User-facing error messages and status codes.

This module provides centralized error message definitions so route
handlers never expose provider internals to the caller.
"""
from typing import Tuple, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for different types of failures."""

    # Validation Errors (400)
    MISSING_FIELD = "MISSING_FIELD"
    MISSING_SUGGESTION_FIELD = "MISSING_SUGGESTION_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_IMAGE_DATA = "INVALID_IMAGE_DATA"
    NO_PERSON_DETECTED = "NO_PERSON_DETECTED"

    # Routing Errors (404, 405)
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Pipeline stage Errors (500)
    DESCRIPTION_FAILED = "DESCRIPTION_FAILED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    SYNTHESIS_FAILED = "SYNTHESIS_FAILED"

    # Configuration Errors (500)
    MISSING_API_KEY = "MISSING_API_KEY"

    # Generic Errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES = {
    # Validation Errors
    ErrorCode.MISSING_FIELD: "Missing image or mimeType data in request body",
    ErrorCode.MISSING_SUGGESTION_FIELD: "Missing image or mimeType data",
    ErrorCode.INVALID_FORMAT: "Invalid request body. Expected JSON with image and mimeType fields.",
    ErrorCode.INVALID_IMAGE_DATA: "The image data provided is invalid or corrupted. Please try with a different image.",
    ErrorCode.NO_PERSON_DETECTED: "No person detected in the image. Please upload a clear photo of a face.",

    # Routing Errors
    ErrorCode.ROUTE_NOT_FOUND: "API route not found",
    ErrorCode.METHOD_NOT_ALLOWED: "Method Not Allowed",

    # Pipeline stage Errors
    ErrorCode.DESCRIPTION_FAILED: "Failed to generate description from image.",
    ErrorCode.VALIDATION_FAILED: "Failed to validate image description.",
    ErrorCode.SYNTHESIS_FAILED: "Failed to generate the final avatar image.",

    # Configuration Errors
    ErrorCode.MISSING_API_KEY: "The service is not properly configured. Please contact support.",

    # Generic Errors
    ErrorCode.UNKNOWN_ERROR: "An internal server error occurred",
}


ERROR_STATUS_CODES = {
    ErrorCode.MISSING_FIELD: 400,
    ErrorCode.MISSING_SUGGESTION_FIELD: 400,
    ErrorCode.INVALID_FORMAT: 400,
    ErrorCode.INVALID_IMAGE_DATA: 400,
    ErrorCode.NO_PERSON_DETECTED: 400,

    ErrorCode.ROUTE_NOT_FOUND: 404,
    ErrorCode.METHOD_NOT_ALLOWED: 405,

    ErrorCode.DESCRIPTION_FAILED: 500,
    ErrorCode.VALIDATION_FAILED: 500,
    ErrorCode.SYNTHESIS_FAILED: 500,

    ErrorCode.MISSING_API_KEY: 500,

    ErrorCode.UNKNOWN_ERROR: 500,
}


def get_error_message(error_code: ErrorCode) -> str:
    """Return the user-facing message for an error code."""
    return ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR])


def get_error_response(
    error_code: ErrorCode,
    custom_message: Optional[str] = None
) -> Tuple[str, int]:
    """
    Get user-facing error message and HTTP status code.

    Args:
        error_code: The error code enum
        custom_message: Optional message to use instead of the standard one

    Returns:
        Tuple of (error_message, status_code)
    """
    message = custom_message or get_error_message(error_code)
    status_code = ERROR_STATUS_CODES.get(error_code, 500)
    return message, status_code
