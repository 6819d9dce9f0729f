"""
Telemetry sink - fire-and-forget structured lifecycle events.

Every event is mirrored to the Python logger. When an endpoint is configured
the event is also POSTed as JSON; delivery failures never reach the caller.
"""
import logging
import random
import string
import time
from typing import Any, Dict, Optional

import requests

from core.config_loader import TelemetryConfig

logger = logging.getLogger(__name__)

EVENT_NAME = 'async_ats_scorer.lifecycle'
COMPONENT = 'async-ats-scorer'
OPERATION = 'score_staged_jobs'

_LEVELS = {
    'ERROR': logging.ERROR,
    'INFO': logging.INFO,
    'DEBUG': logging.DEBUG,
    'TRACE': logging.DEBUG,
}

_BASE36 = string.digits + string.ascii_lowercase


def new_request_id() -> str:
    suffix = ''.join(random.choice(_BASE36) for _ in range(6))
    return f"ats-{int(time.time() * 1000)}-{suffix}"


class TelemetrySink:
    def __init__(self, config: Optional[TelemetryConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or TelemetryConfig()
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> Optional[str]:
        if not self.config.enabled:
            return None
        return self.config.endpoint or None

    def build_envelope(self, level: str, message: str, metadata: Dict[str, Any], request_id: str) -> Dict[str, Any]:
        return {
            'script_name': self.config.script_name,
            'log_level': level,
            'message': message,
            'request_id': request_id,
            'metadata': {
                'event_name': EVENT_NAME,
                'component': COMPONENT,
                'operation': OPERATION,
                'outcome': 'failure' if level == 'ERROR' else 'info',
                **metadata,
            },
        }

    def log_event(self, level: str, message: str, metadata: Dict[str, Any], request_id: str) -> None:
        logger.log(_LEVELS.get(level, logging.INFO), f"[{request_id}] {message} {metadata}")

        endpoint = self.endpoint
        if not endpoint:
            return

        try:
            self.session.post(
                endpoint,
                json=self.build_envelope(level, message, metadata, request_id),
                timeout=self.config.timeout_seconds,
            )
        except Exception as e:
            # Telemetry must never block the scorer.
            logger.debug(f"Telemetry delivery failed: {e}")
