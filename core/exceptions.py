"""
Core domain exceptions.

These exceptions are transport-agnostic and should be caught by the server
layer to convert into appropriate HTTP responses or stream error events.
"""

import httpx
from pydantic_ai.exceptions import ModelHTTPError

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"


class CoreError(Exception):
    """Base exception for all core errors."""

    pass


class NotFoundError(CoreError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidOperationError(CoreError):
    """Raised when an operation cannot be performed in the current state."""

    pass


class AbortedError(CoreError):
    """Raised when a request's abort signal fires while awaiting work."""

    def __init__(self, reason: str = "Request aborted"):
        self.reason = reason
        super().__init__(reason)


class StreamError(CoreError):
    """Raised when the model's event stream fails at the transport level."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message)


def format_provider_error(error: BaseException) -> str:
    """
    Build the user-visible message for a failed generation.

    Args:
        error: The exception raised by the provider stream

    Returns:
        A short message suitable for display in the chat
    """
    cause = error.cause if isinstance(error, StreamError) and error.cause else error

    status = None
    if isinstance(cause, httpx.HTTPStatusError):
        status = cause.response.status_code
    elif isinstance(cause, ModelHTTPError):
        status = cause.status_code

    if status is not None:
        if status == 401:
            return "Invalid API key for the model provider"
        if status == 402:
            return "Insufficient credits with the model provider"
        if status == 429:
            return "Rate limited by the model provider, please retry shortly"
        if status >= 500:
            return "The model provider is unavailable, please retry"
        return f"Model provider rejected the request ({status})"
    if isinstance(cause, httpx.TimeoutException):
        return "The model provider timed out"

    return str(error) or DEFAULT_ERROR_MESSAGE
