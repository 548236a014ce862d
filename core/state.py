"""
In-memory state storage.

Tracks the abort signal of each thread's in-flight generation so a stop
request can reach it. Each entry is owned by the request that registered it.
"""

from .abort import AbortSignal

# =============================================================================
# Active Generations
# =============================================================================

active_signals: dict[str, AbortSignal] = {}  # threadID -> signal of running generation


def register_signal(thread_id: str, signal: AbortSignal) -> None:
    """Register the signal of a generation starting on a thread."""
    previous = active_signals.get(thread_id)
    if previous is not None and previous is not signal:
        previous.abort("Superseded by a new generation")
    active_signals[thread_id] = signal


def release_signal(thread_id: str, signal: AbortSignal) -> None:
    """Forget a thread's signal if it still belongs to the finishing request."""
    if active_signals.get(thread_id) is signal:
        del active_signals[thread_id]
