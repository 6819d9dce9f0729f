#!/usr/bin/env python3
"""
Proactive Match Scorer - FastAPI Application

Exposes the batch scoring trigger with automatic API documentation.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/api/scoring/run - Trigger (POST)
    - http://localhost:8080/docs - API Documentation (Swagger UI)
"""

import logging
from typing import Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException

from core.config_loader import AppConfig
from core.exceptions import ConfigurationError
from .config import get_config
from .cors import OriginAllowListMiddleware, OriginPolicy
from .exceptions import (
    ServiceException,
    service_exception_handler,
    configuration_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import scoring_router
from .routers.scoring import add_rate_limit_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build the FastAPI app. ``config`` defaults to the cached project config."""
    config = config or get_config()

    app = FastAPI(
        title="Proactive Match Scorer API",
        description="Trigger LLM-backed scoring of queued job postings",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.config = config

    # Configure rate limiting
    add_rate_limit_handlers(app)

    # Register exception handlers
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(ConfigurationError, configuration_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.add_middleware(
        OriginAllowListMiddleware,
        policy=OriginPolicy(config.web.allowed_origins),
        path_prefix="/api/",
    )

    # Include routers
    app.include_router(scoring_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "proactive-match-scorer"}

    return app


app = create_app()


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    logger.info(f"Starting scoring web server on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
