"""
Module 07 - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import (
    APIError,
    allowlist_error_handler,
    api_error_handler,
    generic_error_handler,
)
from api.routes import health, merkle
from core.config.runtime import ENV_PREFIX
from core.schemas.errors import AllowlistException


# Configure logging; respects ALLOWLIST_LOG_LEVEL and merkle-allowlist.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or merkle-allowlist.json, defaulting to INFO."""
    raw = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "merkle-allowlist.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = json.load(f).get("log_level")
            except (OSError, ValueError, AttributeError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Merkle Allowlist API",
        description="""
HTTP API for building Merkle allowlists and checking airdrop eligibility.

## Endpoints

- **POST /tree** - Build a tree over a list of addresses and return its root
- **POST /proof** - Inclusion proof for one address
- **POST /verify** - Verify a proof against a root (no allowlist needed)
- **POST /eligibility** - Eligibility check with allocation amount
- **GET /health** - Health check

## Tree Rules

- Leaves are keccak256 of the 20-byte address
- Pairs are sorted before hashing; an odd node is promoted unchanged
- Invalid addresses are skipped and reported unless `invalid_identifier_policy` is `reject`
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(AllowlistException, allowlist_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(merkle.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
