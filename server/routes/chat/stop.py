"""
Stop generation endpoint.
"""

from fastapi import APIRouter, Header, HTTPException

from core import InvalidOperationError, save_stopped_message, stop_generation

from ...requests import StopRequest
from ...state import get_persistence


router = APIRouter()


@router.post("/chat/stop")
async def stop_chat_route(
    request: StopRequest, x_user_id: str = Header("anonymous")
) -> dict:
    """Stop a thread's running generation and save the client's copy."""
    stopped = stop_generation(request.threadId)

    saved = None
    if request.message is not None:
        try:
            saved = await save_stopped_message(
                request.threadId, x_user_id, request.message, get_persistence()
            )
        except InvalidOperationError as e:
            raise HTTPException(status_code=400, detail=str(e))

    return {"ok": True, "stopped": stopped, "savedID": saved.id if saved else None}
