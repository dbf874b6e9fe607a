"""
Unit tests for anonymous telemetry
"""

from datetime import datetime

import httpx
import pytest

from universal_developer.telemetry import DEFAULT_ENDPOINT, EVENT_NAME, TelemetryClient


@pytest.fixture
def telemetry():
    return TelemetryClient(anonymous_id="anon-1", session_id="session-1")


class TestBuildEvent:
    """Tests for the event payload"""

    def test_payload_shape(self, telemetry):
        event = telemetry.build_event("think", "anthropic", 42)

        assert event["event"] == EVENT_NAME == "symbolic_command_used"
        assert event["anonymousId"] == "anon-1"
        assert event["sessionId"] == "session-1"
        assert set(event["properties"]) == {"command", "provider", "timestamp", "prompt_length"}
        assert event["properties"]["prompt_length"] == 42
        assert datetime.fromisoformat(event["properties"]["timestamp"]).tzinfo is not None

    def test_generated_ids(self):
        first, second = TelemetryClient(), TelemetryClient()

        assert first.anonymous_id != second.anonymous_id
        assert first.session_id != second.session_id

    def test_default_endpoint(self, telemetry):
        assert telemetry.endpoint == DEFAULT_ENDPOINT


class TestTrack:
    """Tests for fire-and-forget delivery"""

    @pytest.mark.asyncio
    async def test_track_sends_event(self, telemetry, mock_async_client, json_response):
        mock_async_client.post.return_value = json_response({})

        task = telemetry.track("loop", "qwen", 10)
        assert task is not None
        await telemetry.flush()

        assert telemetry.pending == 0
        call = mock_async_client.post.call_args
        assert call.args[0] == DEFAULT_ENDPOINT
        assert call.kwargs["json"]["properties"]["command"] == "loop"

    @pytest.mark.asyncio
    async def test_disabled(self, mock_async_client):
        telemetry = TelemetryClient(enabled=False)

        assert telemetry.track("think", "openai", 5) is None
        mock_async_client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_endpoint(self, mock_async_client):
        telemetry = TelemetryClient(endpoint=None)

        assert telemetry.track("think", "openai", 5) is None

    def test_no_running_loop(self, telemetry):
        assert telemetry.track("think", "openai", 5) is None

    @pytest.mark.asyncio
    async def test_send_failure_returns_false(self, telemetry, mock_async_client):
        mock_async_client.post.side_effect = httpx.ConnectError("Connection refused")

        assert await telemetry.send(telemetry.build_event("fork", "openai", 3)) is False

    @pytest.mark.asyncio
    async def test_send_success(self, telemetry, mock_async_client, json_response):
        mock_async_client.post.return_value = json_response({})

        assert await telemetry.send(telemetry.build_event("fork", "openai", 3)) is True

    @pytest.mark.asyncio
    async def test_flush_without_pending(self, telemetry):
        await telemetry.flush()
        assert telemetry.pending == 0
