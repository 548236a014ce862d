"""
Health check endpoint.
"""

from fastapi import APIRouter

from ..state import get_pricing


router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "pricedModels": len(get_pricing().models)}
