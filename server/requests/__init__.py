"""
HTTP request models for the API.

These are Pydantic models for validating and parsing API requests.
"""

from .chat_request import ChatRequest
from .stop_request import StopRequest

__all__ = [
    "ChatRequest",
    "StopRequest",
]
