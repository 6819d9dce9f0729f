#!/usr/bin/env python3
"""
Origin allow-list for browser-facing trigger endpoints.

A missing origin (server-to-server or same-origin call) is always allowed.
'*' in the allow-list admits every origin.
"""

import logging
from typing import Dict, Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

ALLOW_HEADERS = 'authorization, x-client-info, apikey, content-type'
ALLOW_METHODS = 'GET, POST, OPTIONS'


class OriginPolicy:
    def __init__(self, allowed_origins: Iterable[str]):
        self.allowed_origins = {o.strip() for o in allowed_origins if o and o.strip()}

    def is_allowed(self, origin: Optional[str]) -> bool:
        if not origin:
            return True
        return '*' in self.allowed_origins or origin in self.allowed_origins

    def headers_for(self, origin: Optional[str]) -> Dict[str, str]:
        """Echo the origin when allowed, else 'null'."""
        if '*' in self.allowed_origins:
            allow_origin = '*'
        elif origin and origin in self.allowed_origins:
            allow_origin = origin
        else:
            allow_origin = 'null'
        return {
            'Access-Control-Allow-Origin': allow_origin,
            'Access-Control-Allow-Headers': ALLOW_HEADERS,
            'Access-Control-Allow-Methods': ALLOW_METHODS,
        }


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    """Rejects disallowed origins with 403 and stamps CORS headers on every response under ``path_prefix``."""

    def __init__(self, app, policy: OriginPolicy, path_prefix: str = '/api/'):
        super().__init__(app)
        self.policy = policy
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        origin = request.headers.get('origin')
        headers = self.policy.headers_for(origin)

        if not self.policy.is_allowed(origin):
            logger.warning(f"Rejected request to {request.url.path} from origin {origin}")
            return JSONResponse(
                status_code=403,
                content={"success": False, "error": "Origin not allowed"},
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
