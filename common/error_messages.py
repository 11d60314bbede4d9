"""
User-facing error messages and status codes.

This module keeps every error string the API can return in one place, and
maps provider failures onto the error categories the client understands.
"""
from typing import Tuple, Optional, Dict, Any
from enum import Enum

from config import Config


class ErrorCode(str, Enum):
    """Error codes for different types of failures."""

    # Validation Errors (400)
    MISSING_PROMPT = "MISSING_PROMPT"
    MISSING_IMAGE = "MISSING_IMAGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Provider Errors (429, 401, 500)
    QUOTA = "QUOTA"
    AUTH_FAILURE = "AUTH_FAILURE"
    UNKNOWN = "UNKNOWN"

    # Generic Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_MESSAGES = {
    ErrorCode.MISSING_PROMPT: "Prompt text is required",
    ErrorCode.MISSING_IMAGE: "Image file is required",
    ErrorCode.UNSUPPORTED_MEDIA_TYPE: "Only image files are allowed!",
    ErrorCode.PAYLOAD_TOO_LARGE: "File too large. Maximum size is {limit}.",
    ErrorCode.INVALID_REQUEST: "Invalid request payload",

    ErrorCode.QUOTA: "API quota exceeded. Please try again later.",
    ErrorCode.AUTH_FAILURE: "API authentication failed.",
    ErrorCode.UNKNOWN: "Failed to generate poster",

    ErrorCode.INTERNAL_ERROR: "Internal server error",
}


ERROR_STATUS_CODES = {
    ErrorCode.MISSING_PROMPT: 400,
    ErrorCode.MISSING_IMAGE: 400,
    ErrorCode.UNSUPPORTED_MEDIA_TYPE: 400,
    ErrorCode.PAYLOAD_TOO_LARGE: 400,
    ErrorCode.INVALID_REQUEST: 400,

    ErrorCode.QUOTA: 429,
    ErrorCode.AUTH_FAILURE: 401,
    ErrorCode.UNKNOWN: 500,

    ErrorCode.INTERNAL_ERROR: 500,
}


# Fixed details for provider failures; UNKNOWN reports the provider's own message
ERROR_DETAILS = {
    ErrorCode.QUOTA: "The Gemini API has usage limits. Please wait a moment and try again.",
    ErrorCode.AUTH_FAILURE: "Please check your Gemini API key configuration.",
}


class PosterRequestError(Exception):
    """Raised when an inbound poster request fails validation."""

    def __init__(self, error_code: ErrorCode, detail: Optional[str] = None):
        self.error_code = error_code
        self.detail = detail
        message, self.status_code = get_error_response(error_code)
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


def format_upload_limit(limit_bytes: int) -> str:
    """Render a byte limit the way the client reads it, e.g. 5242880 -> '5MB'."""
    if limit_bytes >= 1024 * 1024:
        return f"{limit_bytes / (1024 * 1024):g}MB"
    if limit_bytes >= 1024:
        return f"{limit_bytes / 1024:g}KB"
    return f"{limit_bytes} bytes"


def get_error_response(error_code: ErrorCode) -> Tuple[str, int]:
    """
    Get the client-facing error message and HTTP status code.

    Args:
        error_code: The error code enum

    Returns:
        Tuple of (error_message, status_code)
    """
    message = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.INTERNAL_ERROR])
    status_code = ERROR_STATUS_CODES.get(error_code, 500)

    if error_code == ErrorCode.PAYLOAD_TOO_LARGE:
        message = message.format(limit=format_upload_limit(Config.MAX_UPLOAD_BYTES))

    return message, status_code


def error_envelope(error: str, details: Optional[str] = None) -> Dict[str, Any]:
    """Build the uniform failure body: {success: false, error, details?}."""
    body: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return body


def classify_error_message(message: str) -> ErrorCode:
    """
    Map a provider error message to a failure category.

    Matching is a case-sensitive substring test, so "Quota" or "api key"
    fall through to UNKNOWN.
    """
    if "quota" in message or "billing" in message:
        return ErrorCode.QUOTA
    if "API key" in message:
        return ErrorCode.AUTH_FAILURE
    return ErrorCode.UNKNOWN

