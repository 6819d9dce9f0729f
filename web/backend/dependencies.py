#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from fastapi import Request

from core.app_context import AppContext


def get_app_context(request: Request) -> AppContext:
    """
    FastAPI dependency that returns the wired application context.

    Built from ``app.state.config`` on first use and kept on the app. A
    ConfigurationError is not cached, so a fixed environment is picked up
    by the next request.

    Usage:
        @router.post("/endpoint")
        def my_endpoint(ctx: AppContext = Depends(get_app_context)):
            ...
    """
    ctx = getattr(request.app.state, 'app_context', None)
    if ctx is None:
        ctx = AppContext.build(request.app.state.config)
        request.app.state.app_context = ctx
    return ctx
