"""
Chat streaming API server.

Exposes the chat stream, stop and thread history endpoints over HTTP.
"""

from .app import app
from .routes import register_routes
from .state import (
    get_agent_factory,
    get_persistence,
    get_pricing,
    set_agent_factory,
    set_persistence,
    set_pricing,
)

# Register all routes with the app
register_routes(app)

__all__ = [
    "app",
    "get_agent_factory",
    "set_agent_factory",
    "get_persistence",
    "set_persistence",
    "get_pricing",
    "set_pricing",
]
