"""Client for the backend AI responder (``POST /query``)."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ai_gateway.config.errors import ResponderError
from ai_gateway.config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class ResponderReply:
    """Normalized responder answer."""

    success: bool
    message: str
    data: Any = None


class AIResponderClient:
    """Sends raw queries to the AI responder.

    Transport errors, HTTP errors and malformed bodies raise
    :class:`ResponderError`. Timeouts come from ``request_timeout``.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._client = client or httpx.AsyncClient(
            base_url=settings.responder_url.rstrip("/"),
            timeout=settings.request_timeout,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def query(self, query: str, context: dict[str, Any] | None = None) -> ResponderReply:
        """
        Ask the responder.

        Args:
            query: Raw user query
            context: Optional classification context, sent when provided

        Returns:
            ResponderReply with the message to show
        """
        payload: dict[str, Any] = {"query": query}
        if context:
            payload["context"] = context
        try:
            response = await self._client.post("/query", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise ResponderError(
                f"POST /query returned {e.response.status_code}", e.response.status_code
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ResponderError(f"POST /query failed: {e}") from e

        if not isinstance(body, dict):
            raise ResponderError("POST /query returned a non-object body")

        if body.get("success"):
            inner = body.get("response") or {}
            if not isinstance(inner, dict) or "message" not in inner:
                raise ResponderError("successful reply is missing response.message")
            return ResponderReply(success=True, message=str(inner["message"]), data=inner.get("data"))

        message = body.get("message")
        if not message:
            raise ResponderError("unsuccessful reply carries no message")
        logger.info("Responder declined the query: %s", message)
        return ResponderReply(success=False, message=str(message))
