"""
Inference Service Client

DESIGN DECISION: Both AI features talk to the same hosted agent-chat
endpoint; only the agent id and the message differ. This client owns
the transport concerns so the agents only deal with prompts and replies:
1. Request shape (user/session identifiers, API key header)
2. Timeout and bounded retry on transport errors
3. Turning HTTP failures into typed exceptions

The reply's "response" field is free-form text. Decoding structure out
of it is NOT this client's job (see agents.json_parser).
"""

import time
from typing import Optional
from uuid import uuid4

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from budget_tracker.config import InferenceSettings


logger = structlog.get_logger(__name__)


class InferenceError(Exception):
    """Base exception for inference calls."""
    pass


class InferenceTransportError(InferenceError):
    """The request never got a response (network, timeout)."""
    pass


class InferenceResponseError(InferenceError):
    """The endpoint answered, but not with a usable reply."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


def generate_request_identity() -> tuple[str, str]:
    """
    Fresh (user_id, session_id) pair for one call.

    The endpoint only needs them to be unique; they carry no
    authentication meaning.
    """
    stamp = int(time.time() * 1000)
    suffix = uuid4().hex[:8]
    return f"user{stamp}-{suffix}@budget-tracker.local", f"session-{stamp}-{suffix}"


class InferenceClient:
    """
    Async client for the agent-chat inference endpoint.

    Pass `transport` to run against a mock (httpx.MockTransport) in tests.
    """

    def __init__(
        self,
        settings: InferenceSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._transport = transport

    @property
    def settings(self) -> InferenceSettings:
        return self._settings

    def _build_payload(self, agent_id: str, message: str) -> dict:
        user_id, session_id = generate_request_identity()
        return {
            "user_id": user_id,
            "agent_id": agent_id,
            "session_id": session_id,
            "message": message,
        }

    async def _post_once(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            self._settings.base_url,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "x-api-key": self._settings.api_key,
            },
        )

    async def send_message(self, agent_id: str, message: str) -> str:
        """
        Send one message to an agent and return its reply text.

        Returns:
            The reply's "response" text ("" when the field is absent)

        Raises:
            InferenceTransportError: No response after all attempts
            InferenceResponseError: Non-2xx status or a non-JSON body
        """
        payload = self._build_payload(agent_id, message)

        async with httpx.AsyncClient(
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(self._settings.max_attempts),
                    wait=wait_exponential(
                        multiplier=self._settings.retry_wait_seconds,
                        max=10,
                    ),
                    retry=retry_if_exception_type(httpx.TransportError),
                    reraise=True,
                ):
                    with attempt:
                        response = await self._post_once(client, payload)
            except httpx.TransportError as e:
                raise InferenceTransportError(
                    f"Inference request failed: {e!r}"
                ) from e

        if response.status_code >= 400:
            raise InferenceResponseError(
                f"Inference endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise InferenceResponseError(
                "Inference endpoint returned a non-JSON body",
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise InferenceResponseError(
                "Inference reply is not a JSON object",
                status_code=response.status_code,
            )

        reply = data.get("response")
        logger.debug(
            "inference_reply_received",
            agent_id=agent_id,
            status_code=response.status_code,
            reply_length=len(reply) if isinstance(reply, str) else 0,
        )
        return reply if isinstance(reply, str) else ""
