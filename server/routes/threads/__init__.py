"""
Thread route registration.
"""

from fastapi import FastAPI

from . import messages


def register_routes(app: FastAPI) -> None:
    """Register all thread routes."""
    app.include_router(messages.router)
