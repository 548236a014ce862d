"""Request-scoped context for one chat generation."""

from dataclasses import dataclass, field

from .abort import AbortSignal


@dataclass
class RequestContext:
    """
    Everything a single generation needs to know about its request.

    Attributes:
        model_id: Model identifier as requested (may carry a variant suffix)
        user_id: Owner of the thread
        thread_id: Thread the messages belong to (None for unsaved chats)
        search_enabled: Whether search/extract tools are offered to the model
        reasoning_level: Requested reasoning effort, if any
        ocr_cost: Cost already incurred by document OCR for this request
        is_regeneration: Whether the request regenerates an existing turn
        signal: Abort signal shared with tool calls
    """

    model_id: str
    user_id: str = "anonymous"
    thread_id: str | None = None
    search_enabled: bool = False
    reasoning_level: str | None = None
    ocr_cost: float = 0.0
    is_regeneration: bool = False
    signal: AbortSignal = field(default_factory=AbortSignal)
