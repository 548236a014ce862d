"""StopRequest model."""

from pydantic import BaseModel

from core import Message


class StopRequest(BaseModel):
    threadId: str
    message: Message | None = None  # client copy of the stopped response
