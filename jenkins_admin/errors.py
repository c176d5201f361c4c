# errors.py

from typing import Any, Dict, Optional, Union

from .log import logger


# --- Standardized Error Handling ---
class JenkinsError(Exception):
    """Base exception for Jenkins administration operations."""

    def __init__(self, message: str, suggestion: str = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion
        self.details = details


class JenkinsClientError(JenkinsError):
    """Raised by the HTTP transport when a request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class JenkinsConnectionError(JenkinsClientError):
    """Raised when the Jenkins server cannot be reached or times out."""
    pass


class JenkinsAuthenticationError(JenkinsClientError):
    """Raised when Jenkins rejects the credentials (HTTP 401/403)."""
    pass


class JenkinsServerError(JenkinsError):
    """Raised by server operations; transport failures are wrapped into this."""
    pass


class _NamedEntityError(JenkinsServerError):

    def __init__(self, message: str, name: str, **kwargs):
        super().__init__(message, **kwargs)
        self.name = name


class JenkinsNotFoundError(_NamedEntityError):
    """Raised when a job or view does not exist."""
    pass


class JenkinsAlreadyExistsError(_NamedEntityError):
    """Raised when creating a job or view whose name is taken."""
    pass


class JenkinsCreationError(_NamedEntityError):
    """Raised when a job or view could not be created or is missing afterwards."""
    pass


def create_error_response(error: Union[Exception, JenkinsError],
                          context: Dict[str, Any] = None,
                          operation: str = "operation") -> Dict[str, Any]:
    """
    Create standardized error response format.

    Args:
        error: The exception that occurred
        context: Request context for logging
        operation: Description of the operation that failed

    Returns:
        Standardized error response dictionary
    """
    request_id = context.get('request_id', 'N/A') if context else 'N/A'

    if isinstance(error, JenkinsNotFoundError):
        response = {
            "error": error.message,
            "operation": operation,
            "suggestion": f"Verify that '{error.name}' exists in Jenkins"
        }
    elif isinstance(error, JenkinsAlreadyExistsError):
        response = {
            "error": error.message,
            "operation": operation,
            "suggestion": f"Choose another name or reuse the existing '{error.name}'"
        }
    elif isinstance(error, JenkinsError):
        response = {
            "error": error.message,
            "operation": operation
        }
        if error.suggestion:
            response["suggestion"] = error.suggestion
        if error.details:
            response["details"] = error.details
    else:
        response = {
            "error": f"Unexpected error during {operation}: {str(error)}",
            "suggestion": "Check server logs for more details"
        }

    logger.error(f"[{request_id}] {operation} failed: {response['error']}")
    if 'suggestion' in response:
        logger.info(f"[{request_id}] Suggestion: {response['suggestion']}")

    return response
