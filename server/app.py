"""
FastAPI application setup and configuration.
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server.middleware import RequestLoggingMiddleware


# =============================================================================
# Constants
# =============================================================================

DEFAULT_CORS_ORIGINS = "*"
CORS_ORIGINS_ENV = "CORS_ORIGINS"
API_TITLE = "Chatstream API"
API_VERSION = "1.0.0"


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(title=API_TITLE, version=API_VERSION)


# =============================================================================
# CORS Configuration
# =============================================================================

# Comma-separated list, e.g. CORS_ORIGINS="https://chat.example.com"
cors_origins_env = os.environ.get(CORS_ORIGINS_ENV, DEFAULT_CORS_ORIGINS)
cors_origins = [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    # Credentials cannot be combined with a wildcard origin
    allow_credentials=cors_origins != [DEFAULT_CORS_ORIGINS],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Request logging middleware (added after CORS so it runs first)
app.add_middleware(RequestLoggingMiddleware)
