"""
Persistence gateway.

The relational store lives outside this service; core talks to it through
the PersistenceGateway protocol. InMemoryPersistence backs tests and local
runs.
"""

import asyncio
import logging
from typing import Protocol

from .models import Message

logger = logging.getLogger(__name__)


class PersistenceGateway(Protocol):
    """Abstract interface for storing thread messages."""

    async def save(self, thread_id: str, user_id: str, message: Message) -> None:
        """Insert or replace a message in a thread."""
        ...

    async def load(self, thread_id: str) -> list[Message]:
        """Load a thread's messages in order."""
        ...


class InMemoryPersistence:
    """Process-local message store keyed by thread."""

    def __init__(self) -> None:
        self._threads: dict[str, list[Message]] = {}
        self._lock = asyncio.Lock()

    async def save(self, thread_id: str, user_id: str, message: Message) -> None:
        async with self._lock:
            messages = self._threads.setdefault(thread_id, [])
            stored = message.model_copy(deep=True)
            for i, existing in enumerate(messages):
                if existing.id == message.id:
                    messages[i] = stored
                    logger.debug("Updated message %s in thread %s", message.id, thread_id)
                    return
            messages.append(stored)
            logger.debug("Saved message %s to thread %s", message.id, thread_id)

    async def load(self, thread_id: str) -> list[Message]:
        async with self._lock:
            return [m.model_copy(deep=True) for m in self._threads.get(thread_id, [])]
