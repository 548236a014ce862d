"""
Chat server entry point.
"""
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import get_config
from core.pricing import PricingTable, fetch_openrouter_pricing
from server import app, set_pricing
from server.logging_config import log_timing, setup_logging

# Initialize logging before anything else
setup_logging()
logger = logging.getLogger(__name__)

# Constants
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load configuration and model prices before serving."""
    config = get_config()

    logger.info("Starting chat server")
    logger.info("Default model: %s", config.default_model)
    logger.info("Search provider: %s", config.search.base_url)

    remote = {}
    if config.pricing.fetch_remote:
        with log_timing(logger, "OpenRouter pricing fetch", logging.INFO):
            remote = await fetch_openrouter_pricing()
    pricing = PricingTable.from_config(config.pricing, remote)
    set_pricing(pricing)
    logger.info("Pricing ready for %d models", len(pricing.models))

    yield

    logger.info("Chat server stopped")


app.router.lifespan_context = lifespan


def main() -> None:
    """Start the chat server."""
    host = os.environ.get("HOST", DEFAULT_HOST)
    port = int(os.environ.get("PORT", str(DEFAULT_PORT)))

    logger.info("Server listening on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
