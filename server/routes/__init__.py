"""
Route registration for the chat API.
"""

from fastapi import FastAPI

from . import chat, health, threads


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(health.router)
    chat.register_routes(app)
    threads.register_routes(app)
