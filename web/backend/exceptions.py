#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class ScoringRunFailedException(ServiceException):
    """Raised when a scoring batch aborts before producing counts."""
    pass


class MethodNotAllowedException(ServiceException):
    """Raised for any method other than POST/OPTIONS on a trigger endpoint."""
    pass


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = 500
    if isinstance(exc, MethodNotAllowedException):
        status_code = 405
        logger.info(f"Rejected {request.method} {request.url.path}")
    else:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def configuration_exception_handler(
    request: Request,
    exc: ConfigurationError
) -> JSONResponse:
    """
    Missing credentials or store URL. The detail is logged, never returned.
    """
    logger.error(f"Configuration error in {request.url.path}: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Missing required env configuration",
            "type": "ConfigurationError"
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.

    Args:
        request: The FastAPI request.
        exc: The HTTP exception.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        },
        headers=getattr(exc, 'headers', None)
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Args:
        request: The FastAPI request.
        exc: The exception.

    Returns:
        JSONResponse with error details.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
