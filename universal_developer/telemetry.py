"""
Anonymous command-usage telemetry

Events carry the command name, provider, timestamp and prompt length only;
never prompt text, completions or credentials. Delivery is fire-and-forget:
``track`` schedules a task and returns immediately, and a failed delivery is
logged at debug level and dropped.
"""

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://telemetry.universal-developer.org/v1/events"
EVENT_NAME = "symbolic_command_used"


def generate_anonymous_id() -> str:
    return uuid.uuid4().hex


def generate_session_id() -> str:
    return f"{int(time.time() * 1000):x}{uuid.uuid4().hex[:8]}"


class TelemetryClient:
    """Best-effort event sender"""

    def __init__(
        self,
        enabled: bool = True,
        endpoint: str | None = DEFAULT_ENDPOINT,
        anonymous_id: str | None = None,
        session_id: str | None = None,
        timeout: float = 5.0,
    ):
        self.enabled = enabled
        self.endpoint = endpoint
        self.anonymous_id = anonymous_id or generate_anonymous_id()
        self.session_id = session_id or generate_session_id()
        self.timeout = timeout
        self._pending: set[asyncio.Task] = set()

    def build_event(self, command: str, provider: str, prompt_length: int) -> dict[str, Any]:
        return {
            "event": EVENT_NAME,
            "properties": {
                "command": command,
                "provider": provider,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "prompt_length": prompt_length,
            },
            "anonymousId": self.anonymous_id,
            "sessionId": self.session_id,
        }

    def track(self, command: str, provider: str, prompt_length: int) -> asyncio.Task | None:
        """Schedule one event without waiting for delivery"""
        if not self.enabled or not self.endpoint:
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Telemetry skipped: no running event loop")
            return None

        event = self.build_event(command, provider, prompt_length)
        task = loop.create_task(self.send(event))
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    async def send(self, event: dict[str, Any]) -> bool:
        """POST one event; returns False instead of raising on any failure"""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.endpoint,
                    headers={"Content-Type": "application/json"},
                    json=event,
                )
                response.raise_for_status()
            return True
        except Exception as e:
            logger.debug(f"Telemetry error: {e}")
            return False

    async def flush(self, timeout: float = 2.0) -> None:
        """Wait briefly for scheduled events, e.g. before an event loop closes"""
        if not self._pending:
            return
        await asyncio.wait(set(self._pending), timeout=timeout)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Telemetry task failed: {task.exception()}")
