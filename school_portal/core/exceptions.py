"""Custom exception classes for the School Portal."""
from typing import Optional, Dict, Any


GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class SchoolPortalException(Exception):
    """Base exception for all application-specific exceptions."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ApiError(SchoolPortalException):
    """Raised when a request to the school API fails (network or HTTP error)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.server_message = server_message
        super().__init__(message, error_code=error_code, details=details)


class ValidationError(SchoolPortalException):
    """Exception raised for user-input validation errors."""
    pass


class AuthenticationError(ApiError):
    """Exception raised when the school API rejects our credentials."""
    pass


class NotFoundError(SchoolPortalException):
    """Exception raised when a resource is not found."""
    pass


class ConfirmationRequiredError(SchoolPortalException):
    """Raised when a destructive action was attempted without explicit confirmation."""
    pass


class ConfigurationError(SchoolPortalException):
    """Exception raised for configuration errors."""
    pass


class PageClosedError(SchoolPortalException):
    """Raised when work is scheduled on a page scope that has already closed."""
    pass


def extract_server_message(payload: Any) -> Optional[str]:
    """
    Pull the human readable error out of an API error body.

    The school API reports errors as ``{"error": ...}``, ``{"detail": ...}``
    or ``{"message": ...}``; DRF style field errors come back as
    ``{"field": ["msg", ...]}``.
    """
    if isinstance(payload, str):
        return payload.strip() or None
    if not isinstance(payload, dict):
        return None

    for key in ("error", "detail", "message"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
        if isinstance(value, list) and value and isinstance(value[0], str):
            return value[0]

    for field, value in payload.items():
        if isinstance(value, list) and value and isinstance(value[0], str):
            return f"{field}: {value[0]}"
    return None


def sanitize_error_message(error: Exception, include_details: bool = False) -> str:
    """
    Sanitize error messages to prevent leaking sensitive information.

    Args:
        error: The exception to sanitize
        include_details: Whether to include detailed error information (dev only)

    Returns:
        Sanitized error message
    """
    from school_portal.core.config import get_settings

    # If it's our custom exception, use its message
    if isinstance(error, SchoolPortalException):
        return error.message

    error_type = type(error).__name__
    error_str = str(error)

    sensitive_patterns = [
        'password',
        'secret',
        'key',
        'token',
        'credential',
        'auth',
        'connection',
    ]

    error_lower = error_str.lower()
    is_sensitive = any(pattern in error_lower for pattern in sensitive_patterns)
    debug = get_settings().DEBUG

    if is_sensitive and not debug:
        if 'password' in error_lower or 'credential' in error_lower:
            return "Authentication failed. Please check your credentials."
        elif 'connection' in error_lower:
            return "Could not reach the school server. Please try again later."
        elif 'token' in error_lower or 'auth' in error_lower:
            return "Authentication error. Please login again."
        else:
            return "An error occurred. Please try again or contact support."

    if debug or include_details:
        return f"{error_type}: {error_str}"
    else:
        return "An error occurred. Please try again."


def alert_message(error: Exception, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """
    Text for the single dismissible alert a page shows when a request fails.

    Uses the server's message when the school API supplied one, the fallback
    string otherwise.
    """
    if isinstance(error, ApiError):
        if error.status_code is None:
            # Timeouts and unreachable server: our own wording is all there is
            return error.message
        return error.server_message or fallback
    if isinstance(error, SchoolPortalException):
        return error.message
    return fallback
