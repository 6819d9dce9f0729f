"""Tests for the telemetry sink."""
import re
from unittest.mock import MagicMock

import requests

from core.config_loader import TelemetryConfig
from core.telemetry import TelemetrySink, new_request_id


class TestRequestId:

    def test_format(self):
        assert re.fullmatch(r"ats-\d+-[0-9a-z]{6}", new_request_id())

    def test_unique(self):
        assert new_request_id() != new_request_id()


class TestTelemetrySink:

    def test_no_endpoint_logs_only(self, caplog):
        session = MagicMock()
        sink = TelemetrySink(TelemetryConfig(endpoint=None), session=session)

        with caplog.at_level("INFO"):
            sink.log_event('INFO', 'Async ATS scorer started', {'batch_jobs_limit': 8}, 'req-1')

        session.post.assert_not_called()
        assert "req-1" in caplog.text

    def test_disabled_ignores_endpoint(self):
        session = MagicMock()
        sink = TelemetrySink(TelemetryConfig(enabled=False, endpoint="https://logs.example.com"), session=session)

        sink.log_event('INFO', 'started', {}, 'req-1')

        assert sink.endpoint is None
        session.post.assert_not_called()

    def test_posts_envelope(self):
        session = MagicMock()
        sink = TelemetrySink(TelemetryConfig(endpoint="https://logs.example.com"), session=session)

        sink.log_event('ERROR', 'Async ATS scorer completed', {'failed_jobs': 1}, 'req-2')

        args, kwargs = session.post.call_args
        assert args[0] == "https://logs.example.com"
        envelope = kwargs['json']
        assert envelope['script_name'] == 'async-ats-scorer'
        assert envelope['log_level'] == 'ERROR'
        assert envelope['request_id'] == 'req-2'
        assert envelope['metadata']['outcome'] == 'failure'
        assert envelope['metadata']['event_name'] == 'async_ats_scorer.lifecycle'
        assert envelope['metadata']['failed_jobs'] == 1
        assert kwargs['timeout'] == 3.0

    def test_info_outcome(self):
        sink = TelemetrySink(TelemetryConfig())
        assert sink.build_envelope('INFO', 'm', {}, 'r')['metadata']['outcome'] == 'info'

    def test_delivery_failure_is_swallowed(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        sink = TelemetrySink(TelemetryConfig(endpoint="https://logs.example.com"), session=session)

        sink.log_event('INFO', 'started', {}, 'req-3')

        session.post.assert_called_once()
